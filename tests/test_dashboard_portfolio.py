from src.seniku.models import SubmissionStatus, User, UserRole
from src.seniku.utils.security import hash_password
from tests.utils import API, PASSWORD, auth_header, login, make_submission


def test_teacher_overview(client, db, seed, teacher_token):
    make_submission(db, seed.assignment_id, seed.student_id, grade=80)
    make_submission(db, seed.assignment_id, seed.other_student_id, status=SubmissionStatus.PENDING)

    r = client.get(f"{API}/dashboard/overview", headers=auth_header(teacher_token))
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["role"] == "TEACHER"
    assert data["statistics"] == {
        "total_students": 2,
        "total_classes": 1,
        "active_assignments": 1,
        "pending_submissions": 1,
        "graded_submissions": 1,
        "average_score": 80.0,
    }
    assert len(data["recent_submissions"]) == 2
    assert [s["name"] for s in data["top_students"]] == ["Siti Aminah"]
    deadline = data["upcoming_deadlines"][0]
    assert deadline["submission_count"] == 2
    assert deadline["total_students"] == 2


def test_student_overview(client, db, seed, student_token):
    make_submission(db, seed.assignment_id, seed.student_id, grade=88)

    r = client.get(f"{API}/dashboard/overview", headers=auth_header(student_token))
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["role"] == "STUDENT"
    assert data["statistics"]["portfolio_count"] == 1
    assert data["statistics"]["highest_score"] == 88
    assert data["statistics"]["total_assignments"] == 1

    pending = data["pending_assignments"][0]
    assert pending["title"] == "Pemandangan Alam"
    assert pending["my_submission"]["grade"] == 88
    assert pending["days_remaining"] == 7
    assert [w["category"] for w in data["recent_works"]] == ["Lukisan"]


def test_student_without_class_has_no_overview(client, db):
    db.add(User(name="Tanpa Kelas", nis="S099", role=UserRole.STUDENT, hashed_password=hash_password(PASSWORD)))
    db.commit()
    token = login(client, "S099")

    r = client.get(f"{API}/dashboard/overview", headers=auth_header(token))
    assert r.status_code == 404


def test_portfolio_lists_graded_work_only(client, db, seed, student_token):
    make_submission(db, seed.assignment_id, seed.student_id, grade=95, title="Sawah")
    pending = make_submission(
        db, seed.assignment_id, seed.other_student_id, status=SubmissionStatus.PENDING, title="Gunung"
    )

    r = client.get(f"{API}/portfolio", headers=auth_header(student_token))
    assert r.status_code == 200
    items = r.json()["data"]
    assert [i["title"] for i in items] == ["Sawah"]
    assert items[0]["category"]["name"] == "Lukisan"
    assert items[0]["student"]["class_name"] == "1A"
    assert r.json()["pagination"]["total"] == 1

    r = client.get(f"{API}/portfolio/{pending.id}", headers=auth_header(student_token))
    assert r.status_code == 404
    assert r.json()["error"] == "Portfolio item not found"


def test_portfolio_filters_and_sorting(client, db, seed, teacher_token):
    make_submission(db, seed.assignment_id, seed.student_id, grade=95, title="Sawah")
    make_submission(db, seed.assignment_id, seed.other_student_id, grade=70, title="Gunung")

    r = client.get(f"{API}/portfolio?min_grade=90", headers=auth_header(teacher_token))
    assert [i["title"] for i in r.json()["data"]] == ["Sawah"]

    r = client.get(f"{API}/portfolio?sort_by=grade&sort_order=asc", headers=auth_header(teacher_token))
    assert [i["grade"] for i in r.json()["data"]] == [70, 95]

    r = client.get(f"{API}/portfolio?search=andi", headers=auth_header(teacher_token))
    assert [i["title"] for i in r.json()["data"]] == ["Gunung"]

    r = client.get(f"{API}/portfolio?student_id={seed.student_id}", headers=auth_header(teacher_token))
    assert [i["title"] for i in r.json()["data"]] == ["Sawah"]

    r = client.get(f"{API}/portfolio?sort_by=rating", headers=auth_header(teacher_token))
    assert r.status_code == 422


def test_portfolio_item_carries_history(client, db, seed, student_token):
    submission = make_submission(db, seed.assignment_id, seed.student_id, grade=91)

    r = client.get(f"{API}/portfolio/{submission.id}", headers=auth_header(student_token))
    assert r.status_code == 200, r.text
    history = r.json()["data"]["history"]
    assert len(history) == 1
    assert history[0]["version"] == 1
    assert history[0]["is_current"] is True
    assert history[0]["image_url"] == submission.image_url
