from datetime import timedelta
from unittest.mock import patch
from uuid import UUID

from sqlmodel import select

from src.seniku.controllers.achievement_controller import unlock_achievement
from src.seniku.controllers import achievement_evaluator
from src.seniku.controllers.achievement_evaluator import check_and_unlock_achievements, compute_stats
from src.seniku.models import (
    Achievement,
    Assignment,
    AssignmentStatus,
    Notification,
    NotificationType,
    SubmissionStatus,
    UserAchievement,
)
from src.seniku.utils.time import get_current_time
from tests.utils import API, auth_header, make_submission


def first_work_achievement(db) -> Achievement:
    achievement = Achievement(
        name="Karya Pertama",
        description="Mendapatkan nilai untuk karya pertama",
        icon="🌱",
        criteria={"type": "total_graded_submissions", "value": 1, "operator": ">="},
    )
    db.add(achievement)
    db.commit()
    db.refresh(achievement)
    return achievement


def test_grading_unlocks_achievement_once(client, db, seed, teacher_token):
    achievement = first_work_achievement(db)
    submission = make_submission(db, seed.assignment_id, seed.student_id, status=SubmissionStatus.PENDING)

    for grade in (92, 95):
        r = client.post(
            f"{API}/submissions/{submission.id}/grade",
            headers=auth_header(teacher_token),
            json={"grade": grade, "feedback": "Luar biasa"},
        )
        assert r.status_code == 200, r.text

    db.expire_all()
    unlocks = db.exec(select(UserAchievement).where(UserAchievement.user_id == seed.student_id)).all()
    assert [u.achievement_id for u in unlocks] == [achievement.id]

    notifications = db.exec(
        select(Notification).where(
            Notification.user_id == seed.student_id,
            Notification.type == NotificationType.ACHIEVEMENT_UNLOCKED,
        )
    ).all()
    assert len(notifications) == 1
    assert notifications[0].title == "Achievement Terbuka!"
    assert notifications[0].message == 'Selamat! Anda mendapatkan achievement "Karya Pertama"'
    assert notifications[0].link == f"/achievements/{achievement.id}"

    graded = db.exec(
        select(Notification).where(Notification.type == NotificationType.SUBMISSION_GRADED)
    ).all()
    assert sorted(n.message for n in graded) == [
        'Karya "Karya" mendapat nilai 92',
        'Karya "Karya" mendapat nilai 95',
    ]


def test_evaluator_skips_unmet_and_unknown_criteria(db, seed):
    db.add_all([
        Achievement(
            name="Nilai Sempurna",
            description="Nilai 100",
            icon="💯",
            criteria={"type": "highest_grade", "value": 100, "operator": ">="},
        ),
        Achievement(
            name="Misteri",
            description="Jenis kriteria baru",
            icon="❓",
            criteria={"type": "login_streak", "value": 1},
        ),
        Achievement(
            name="Rata-rata Tinggi",
            description="Rata-rata minimal 85",
            icon="⭐",
            criteria={"type": "average_grade", "value": 85, "operator": ">="},
        ),
    ])
    db.commit()
    make_submission(db, seed.assignment_id, seed.student_id, grade=90)

    unlocked = check_and_unlock_achievements(db, seed.student_id)
    assert [a.name for a in unlocked] == ["Rata-rata Tinggi"]

    # A second pass finds nothing new
    assert check_and_unlock_achievements(db, seed.student_id) == []


def test_unlock_is_idempotent(db, seed):
    achievement = first_work_achievement(db)

    first, created = unlock_achievement(db, seed.student_id, achievement.id)
    again, created_again = unlock_achievement(db, seed.student_id, achievement.id)

    assert created is True
    assert created_again is False
    assert first.id == again.id


def extra_assignment(db, seed, title: str) -> Assignment:
    assignment = Assignment(
        title=title,
        description="Tugas tambahan",
        category_id=seed.category_id,
        deadline=get_current_time() + timedelta(days=7),
        status=AssignmentStatus.ACTIVE,
        created_by=seed.teacher_id,
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return assignment


def test_zero_grade_is_left_out_of_grade_stats(db, seed):
    make_submission(db, seed.assignment_id, seed.student_id, grade=0)
    other = extra_assignment(db, seed, "Alam Benda")
    make_submission(db, other.id, seed.student_id, grade=80)

    stats = compute_stats(db, seed.student_id)
    assert stats.total_graded_submissions == 2
    assert stats.average_grade == 80
    assert stats.highest_grade == 80
    assert stats.a_grade_count == 0


def test_failed_unlock_does_not_block_other_achievements(db, seed):
    broken = first_work_achievement(db)
    other = Achievement(
        name="Rata-rata Baik",
        description="Rata-rata minimal 80",
        icon="⭐",
        criteria={"type": "average_grade", "value": 80, "operator": ">="},
    )
    db.add(other)
    db.commit()
    db.refresh(other)
    broken_id, other_id = broken.id, other.id
    make_submission(db, seed.assignment_id, seed.student_id, grade=90)

    def flaky_unlock(session, user_id, achievement_id):
        if achievement_id == broken_id:
            raise RuntimeError("database hiccup")
        return unlock_achievement(session, user_id, achievement_id)

    with patch.object(achievement_evaluator, "unlock_achievement", side_effect=flaky_unlock):
        unlocked = check_and_unlock_achievements(db, seed.student_id)

    assert [a.id for a in unlocked] == [other_id]
    held = db.exec(select(UserAchievement.achievement_id).where(UserAchievement.user_id == seed.student_id)).all()
    assert held == [other_id]
    notifications = db.exec(
        select(Notification).where(Notification.type == NotificationType.ACHIEVEMENT_UNLOCKED)
    ).all()
    assert [n.link for n in notifications] == [f"/achievements/{other_id}"]


def test_achievement_crud_and_guard(client, db, seed, teacher_token, student_token):
    payload = {
        "name": "Bintang Kelas",
        "description": "Lima karya bernilai A",
        "icon": "  🏆\x00 ",
        "criteria": {"type": "grade_count", "value": 5, "min_grade": 90},
    }
    r = client.post(f"{API}/achievements", json=payload, headers=auth_header(teacher_token))
    assert r.status_code == 201, r.text
    created = r.json()["data"]
    assert created["icon"] == "🏆"
    assert created["criteria"] == {"type": "grade_count", "value": 5, "operator": ">=", "min_grade": 90}

    r = client.post(f"{API}/achievements", json=payload, headers=auth_header(teacher_token))
    assert r.status_code == 409
    assert r.json()["error"] == "Achievement name already exists"

    r = client.post(
        f"{API}/achievements",
        json={**payload, "name": "Rusak", "criteria": {"type": "average_grade", "value": "tinggi"}},
        headers=auth_header(teacher_token),
    )
    assert r.status_code == 422

    unlock_achievement(db, seed.student_id, UUID(created["id"]))

    r = client.get(f"{API}/achievements/me/achievements", headers=auth_header(student_token))
    assert r.status_code == 200
    assert [u["achievement"]["name"] for u in r.json()["data"]] == ["Bintang Kelas"]

    r = client.delete(f"{API}/achievements/{created['id']}", headers=auth_header(teacher_token))
    assert r.status_code == 400
    assert r.json()["error"] == "Cannot delete achievement: Has users. Use force=true to force delete."

    r = client.delete(f"{API}/achievements/{created['id']}?force=true", headers=auth_header(teacher_token))
    assert r.status_code == 200, r.text
    db.expire_all()
    assert db.exec(select(UserAchievement)).all() == []

