from datetime import timedelta

import pytest
from sqlmodel import select

from src.seniku.controllers.submission_controller import insert_submission
from src.seniku.models import Assignment, Submission, SubmissionRevision, SubmissionStatus
from src.seniku.schemas.submission import SubmissionCreate
from src.seniku.utils.errors import ConflictError
from src.seniku.utils.time import get_current_time
from tests.utils import API, auth_header, image_part, make_image, make_submission

RED = make_image(color=(220, 20, 20))
GREEN = make_image(color=(20, 200, 20))
BLUE = make_image(color=(20, 20, 220))


def submit(client, token, assignment_id, content, title="Senja di Pantai"):
    return client.post(
        f"{API}/submissions",
        headers=auth_header(token),
        data={"assignment_id": str(assignment_id), "title": title, "description": "Cat air"},
        files=image_part(content),
    )


def test_submit_creates_pending_submission(client, storage, seed, student_token):
    r = submit(client, student_token, seed.assignment_id, RED)
    assert r.status_code == 201, r.text

    data = r.json()["data"]
    assert data["status"] == "PENDING"
    assert data["revision_count"] == 0
    assert data["assignment_title"] == "Pemandangan Alam"
    assert data["image_url"].startswith("http://storage.test/submissions/submission-")
    assert data["image_medium"].startswith("http://storage.test/submissions/medium-")
    assert data["image_thumbnail"].startswith("http://storage.test/submissions/thumb-")
    assert [h["version"] for h in data["history"]] == [1]
    assert data["history"][0]["is_current"] is True
    assert storage.await_count == 3


def test_submit_requires_image_and_fields(client, storage, seed, student_token):
    r = client.post(
        f"{API}/submissions",
        headers=auth_header(student_token),
        data={"assignment_id": str(seed.assignment_id), "title": "Tanpa gambar"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Image file is required"

    r = client.post(
        f"{API}/submissions",
        headers=auth_header(student_token),
        data={"assignment_id": str(seed.assignment_id)},
        files=image_part(RED),
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Assignment ID and title are required"


def test_submit_rejects_bad_uploads(client, storage, seed, student_token):
    r = client.post(
        f"{API}/submissions",
        headers=auth_header(student_token),
        data={"assignment_id": str(seed.assignment_id), "title": "Teks"},
        files=image_part(b"hello", name="notes.txt", content_type="text/plain"),
    )
    assert r.status_code == 400
    assert r.json()["error"].startswith("Invalid file type")

    r = submit(client, student_token, seed.assignment_id, make_image(size=(320, 240)))
    assert r.status_code == 400
    assert "too small" in r.json()["error"]
    storage.assert_not_awaited()


def test_submit_rejects_overlong_title_before_upload(client, storage, seed, student_token):
    r = submit(client, student_token, seed.assignment_id, RED, title="x" * 201)
    assert r.status_code == 422, r.text
    assert r.json()["error"] == "Validation error"
    assert r.json()["errors"][0]["field"] == "title"
    storage.assert_not_awaited()


def test_json_update_changes_text(client, db, seed, student_token):
    submission = make_submission(db, seed.assignment_id, seed.student_id, status=SubmissionStatus.PENDING, title="Asli")

    r = client.put(
        f"{API}/submissions/{submission.id}",
        headers=auth_header(student_token),
        json={"title": "  Judul Baru  ", "description": "Cat minyak"},
    )
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["title"] == "Judul Baru"
    assert data["description"] == "Cat minyak"
    assert data["status"] == "PENDING"
    assert data["image_url"] == submission.image_url
    assert db.exec(select(SubmissionRevision)).all() == []


def test_text_only_update_resubmits_revision(client, db, seed, student_token):
    submission = make_submission(db, seed.assignment_id, seed.student_id, status=SubmissionStatus.REVISION, title="Asli")

    r = client.put(
        f"{API}/submissions/{submission.id}",
        headers=auth_header(student_token),
        data={"title": "Sudah Diperbaiki"},
    )
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["status"] == "PENDING"
    assert data["title"] == "Sudah Diperbaiki"
    assert [h["version"] for h in data["history"]] == [1]


def test_update_rejects_invalid_fields(client, db, seed, student_token):
    submission = make_submission(db, seed.assignment_id, seed.student_id, status=SubmissionStatus.PENDING, title="Asli")

    r = client.put(
        f"{API}/submissions/{submission.id}",
        headers=auth_header(student_token),
        data={"title": "   "},
    )
    assert r.status_code == 422, r.text
    assert r.json()["errors"][0]["field"] == "title"

    r = client.put(
        f"{API}/submissions/{submission.id}",
        headers=auth_header(student_token),
        json={"title": "y" * 201},
    )
    assert r.status_code == 422, r.text

    db.expire_all()
    assert db.get(Submission, submission.id).title == "Asli"


def test_only_students_submit(client, storage, seed, teacher_token):
    r = submit(client, teacher_token, seed.assignment_id, RED)
    assert r.status_code == 403


def test_submit_after_deadline_is_rejected(client, storage, db, seed, student_token):
    assignment = db.get(Assignment, seed.assignment_id)
    assignment.deadline = get_current_time() - timedelta(days=1)
    db.add(assignment)
    db.commit()

    r = submit(client, student_token, seed.assignment_id, RED)
    assert r.status_code == 400
    assert r.json()["error"] == "Assignment deadline has passed"


def test_submit_to_missing_assignment(client, storage, student_token):
    r = submit(client, student_token, "00000000-0000-0000-0000-000000000000", RED)
    assert r.status_code == 404
    assert r.json()["error"] == "Assignment not found"


def test_racing_insert_surfaces_as_conflict(db, seed):
    payload = SubmissionCreate(assignment_id=seed.assignment_id, title="Satu", image_url="http://x/a.jpg")
    insert_submission(db, payload, seed.student_id)

    with pytest.raises(ConflictError) as exc:
        insert_submission(db, payload.model_copy(update={"title": "Dua"}), seed.student_id)
    assert exc.value.status_code == 409
    assert exc.value.detail.startswith("Submission already exists for this assignment")

    rows = db.exec(select(Submission).where(Submission.student_id == seed.student_id)).all()
    assert len(rows) == 1


def test_resubmitting_same_bytes_creates_no_revision(client, storage, db, seed, student_token):
    first = submit(client, student_token, seed.assignment_id, RED).json()["data"]
    second = submit(client, student_token, seed.assignment_id, RED, title="Judul Baru")
    assert second.status_code == 200, second.text
    assert second.json()["message"] == "Submission updated successfully"

    data = second.json()["data"]
    assert data["id"] == first["id"]
    assert data["title"] == "Judul Baru"
    assert len(data["history"]) == 1
    assert db.exec(select(SubmissionRevision)).all() == []


def test_revision_cycle_history(client, storage, seed, student_token, teacher_token):
    image_a = submit(client, student_token, seed.assignment_id, RED).json()["data"]
    image_b = submit(client, student_token, seed.assignment_id, GREEN).json()["data"]
    assert image_a["id"] == image_b["id"]
    submission_id = image_b["id"]

    r = client.post(
        f"{API}/submissions/{submission_id}/revision",
        headers=auth_header(teacher_token),
        json={"revision_note": "Perbaiki komposisi warna"},
    )
    assert r.status_code == 200, r.text
    revised = r.json()["data"]
    assert revised["status"] == "REVISION"
    assert revised["revision_count"] == 1

    r = client.put(
        f"{API}/submissions/{submission_id}",
        headers=auth_header(student_token),
        files=image_part(BLUE),
    )
    assert r.status_code == 200, r.text
    final = r.json()["data"]

    assert final["status"] == "PENDING"
    assert final["revision_count"] == 1
    history = final["history"]
    assert [h["version"] for h in history] == [1, 2, 3]
    assert [h["image_url"] for h in history] == [image_a["image_url"], image_b["image_url"], final["image_url"]]
    assert history[0]["revision_note"] is None
    assert history[1]["revision_note"] == "Perbaiki komposisi warna"
    assert [h["is_current"] for h in history] == [False, False, True]

    # Reading again rebuilds the same timeline
    again = client.get(f"{API}/submissions/{submission_id}", headers=auth_header(student_token)).json()["data"]
    assert again["history"] == history


def test_repeated_revision_request_archives_once(client, db, seed, teacher_token):
    submission = Submission(
        assignment_id=seed.assignment_id,
        student_id=seed.student_id,
        title="Potret",
        image_url="http://storage.test/submissions/submission-a.jpg",
        submitted_at=get_current_time(),
    )
    db.add(submission)
    db.commit()

    for _ in range(2):
        r = client.post(
            f"{API}/submissions/{submission.id}/revision",
            headers=auth_header(teacher_token),
            json={"revision_note": "Tambahkan detail"},
        )
        assert r.status_code == 200, r.text

    data = r.json()["data"]
    assert data["revision_count"] == 2
    assert [h["version"] for h in data["history"]] == [1]
    assert len(db.exec(select(SubmissionRevision)).all()) == 1


def test_graded_submission_is_frozen(client, storage, db, seed, student_token, teacher_token):
    submission_id = submit(client, student_token, seed.assignment_id, RED).json()["data"]["id"]

    r = client.post(
        f"{API}/submissions/{submission_id}/grade",
        headers=auth_header(teacher_token),
        json={"grade": 88, "feedback": "Komposisi bagus"},
    )
    assert r.status_code == 200, r.text
    graded = r.json()["data"]
    assert graded["status"] == "GRADED"
    assert graded["grade"] == 88
    assert graded["graded_at"] is not None

    r = client.put(
        f"{API}/submissions/{submission_id}",
        headers=auth_header(student_token),
        data={"title": "Ganti judul"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Submission has already been graded"

    r = submit(client, student_token, seed.assignment_id, GREEN)
    assert r.status_code == 400
    assert r.json()["error"] == "Submission has already been graded"


def test_grade_validation(client, db, seed, teacher_token):
    submission = Submission(
        assignment_id=seed.assignment_id,
        student_id=seed.student_id,
        title="Potret",
        image_url="http://storage.test/a.jpg",
        submitted_at=get_current_time(),
    )
    db.add(submission)
    db.commit()

    r = client.post(
        f"{API}/submissions/{submission.id}/grade",
        headers=auth_header(teacher_token),
        json={"grade": 101},
    )
    assert r.status_code == 422
    assert r.json()["errors"][0]["field"] == "grade"


def test_delete_rules(client, db, seed, student_token, other_student_token):
    pending = Submission(
        assignment_id=seed.assignment_id,
        student_id=seed.student_id,
        title="Pending",
        image_url="http://storage.test/a.jpg",
        submitted_at=get_current_time(),
    )
    db.add(pending)
    db.commit()
    pending_id = pending.id

    r = client.delete(f"{API}/submissions/{pending_id}", headers=auth_header(other_student_token))
    assert r.status_code == 403

    r = client.delete(f"{API}/submissions/{pending_id}", headers=auth_header(student_token))
    assert r.status_code == 200, r.text
    db.expire_all()
    assert db.get(Submission, pending_id) is None


def test_graded_submission_cannot_be_deleted(client, db, seed, teacher_token):
    graded = Submission(
        assignment_id=seed.assignment_id,
        student_id=seed.student_id,
        title="Selesai",
        image_url="http://storage.test/a.jpg",
        status=SubmissionStatus.GRADED,
        grade=90,
        submitted_at=get_current_time(),
    )
    db.add(graded)
    db.commit()

    r = client.delete(f"{API}/submissions/{graded.id}", headers=auth_header(teacher_token))
    assert r.status_code == 400
    assert r.json()["error"] == "Only pending submissions can be deleted"
    db.expire_all()
    assert db.get(Submission, graded.id) is not None


def test_students_only_see_their_own_submissions(client, db, seed, student_token, other_student_token, teacher_token):
    mine = Submission(
        assignment_id=seed.assignment_id,
        student_id=seed.student_id,
        title="Milik Siti",
        image_url="http://storage.test/a.jpg",
        submitted_at=get_current_time(),
    )
    db.add(mine)
    db.commit()

    r = client.get(f"{API}/submissions", headers=auth_header(other_student_token))
    assert r.status_code == 200
    assert r.json()["data"] == []
    assert r.json()["pagination"]["total"] == 0

    r = client.get(f"{API}/submissions/{mine.id}", headers=auth_header(other_student_token))
    assert r.status_code == 403

    r = client.get(f"{API}/submissions", headers=auth_header(teacher_token))
    assert [s["title"] for s in r.json()["data"]] == ["Milik Siti"]
    assert r.json()["data"][0]["student_name"] == "Siti Aminah"


def test_naive_utc_timestamps_round_trip(db, seed):
    submission = make_submission(db, seed.assignment_id, seed.student_id)
    stamped = submission.submitted_at

    db.expire_all()
    stored = db.get(Submission, submission.id)
    assert stored.submitted_at.tzinfo is None
    assert stored.submitted_at == stamped
