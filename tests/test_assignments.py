from datetime import timedelta

from sqlmodel import select

from src.seniku.models import (
    Assignment,
    AssignmentClass,
    AssignmentStatus,
    Notification,
    NotificationType,
    User,
    UserRole,
)
from src.seniku.utils.time import get_current_time
from src.seniku.utils.security import hash_password
from tests.utils import API, PASSWORD, auth_header, login


def assignment_payload(seed, **overrides):
    payload = {
        "title": "Potret Keluarga",
        "description": "Gambar potret anggota keluarga",
        "category_id": str(seed.category_id),
        "deadline": (get_current_time() + timedelta(days=3)).isoformat(),
        "class_ids": [str(seed.class_id)],
    }
    payload.update(overrides)
    return payload


def add_draft(db, seed, title="Draft Rahasia"):
    draft = Assignment(
        title=title,
        description="Belum terbit",
        category_id=seed.category_id,
        deadline=get_current_time() + timedelta(days=10),
        status=AssignmentStatus.DRAFT,
        created_by=seed.teacher_id,
    )
    draft.class_links = [AssignmentClass(class_id=seed.class_id)]
    db.add(draft)
    db.commit()
    return draft.id


def assignment_notifications(db):
    db.expire_all()
    return db.exec(
        select(Notification).where(Notification.type == NotificationType.ASSIGNMENT_CREATED)
    ).all()


def test_publishing_notifies_class_students(client, db, seed, teacher_token):
    r = client.post(
        f"{API}/assignments",
        json=assignment_payload(seed, status="ACTIVE"),
        headers=auth_header(teacher_token),
    )
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    assert data["status"] == "ACTIVE"
    assert [c["name"] for c in data["classes"]] == ["1A"]
    assert data["category"]["name"] == "Lukisan"
    assert data["submission_count"] == 0

    notified = assignment_notifications(db)
    assert sorted(n.user_id for n in notified) == sorted([seed.student_id, seed.other_student_id])
    assert all(n.title == "Tugas Baru" for n in notified)


def test_draft_is_silent_until_activated(client, db, seed, teacher_token):
    r = client.post(f"{API}/assignments", json=assignment_payload(seed), headers=auth_header(teacher_token))
    assert r.status_code == 201, r.text
    assignment_id = r.json()["data"]["id"]
    assert assignment_notifications(db) == []

    r = client.put(
        f"{API}/assignments/{assignment_id}",
        json={"status": "ACTIVE"},
        headers=auth_header(teacher_token),
    )
    assert r.status_code == 200, r.text
    assert len(assignment_notifications(db)) == 2

    # Saving an already active assignment does not notify again
    client.put(f"{API}/assignments/{assignment_id}", json={"title": "Baru"}, headers=auth_header(teacher_token))
    assert len(assignment_notifications(db)) == 2


def test_missing_references_are_rejected(client, seed, teacher_token):
    missing = "00000000-0000-0000-0000-000000000000"
    r = client.post(
        f"{API}/assignments",
        json=assignment_payload(seed, category_id=missing),
        headers=auth_header(teacher_token),
    )
    assert r.status_code == 404
    assert r.json()["error"] == "Category not found"

    r = client.post(
        f"{API}/assignments",
        json=assignment_payload(seed, class_ids=[missing]),
        headers=auth_header(teacher_token),
    )
    assert r.status_code == 404
    assert r.json()["error"] == "Class not found"


def test_student_visibility(client, db, seed, student_token):
    draft_id = add_draft(db, seed)

    r = client.get(f"{API}/assignments", headers=auth_header(student_token))
    assert r.status_code == 200
    assert [a["title"] for a in r.json()["data"]] == ["Pemandangan Alam"]

    r = client.get(f"{API}/assignments/{draft_id}", headers=auth_header(student_token))
    assert r.status_code == 404


def test_teachers_only_see_and_modify_their_own(client, db, seed, teacher_token):
    db.add(User(name="Wanda Oke", nip="T002", role=UserRole.TEACHER, hashed_password=hash_password(PASSWORD)))
    db.commit()
    other_token = login(client, "T002", PASSWORD)

    r = client.get(f"{API}/assignments", headers=auth_header(other_token))
    assert r.json()["data"] == []

    r = client.put(
        f"{API}/assignments/{seed.assignment_id}",
        json={"title": "Dibajak"},
        headers=auth_header(other_token),
    )
    assert r.status_code == 403

    r = client.delete(f"{API}/assignments/{seed.assignment_id}", headers=auth_header(other_token))
    assert r.status_code == 403


def test_bulk_status_and_delete(client, db, seed, teacher_token):
    first = add_draft(db, seed, "Draft Satu")
    second = add_draft(db, seed, "Draft Dua")

    r = client.put(
        f"{API}/assignments/bulk-status",
        json={"ids": [str(first), str(second)], "status": "ACTIVE"},
        headers=auth_header(teacher_token),
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"] == {"updated": 2}
    assert len(assignment_notifications(db)) == 4

    r = client.request(
        "DELETE",
        f"{API}/assignments/bulk-delete",
        json={"ids": [str(first), str(second)]},
        headers=auth_header(teacher_token),
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"] == {"deleted": 2}

    r = client.get(f"{API}/assignments", headers=auth_header(teacher_token))
    assert [a["title"] for a in r.json()["data"]] == ["Pemandangan Alam"]
