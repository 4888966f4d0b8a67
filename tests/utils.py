"""Helpers shared by the test modules."""
from io import BytesIO
from typing import Optional

from PIL import Image

from src.seniku.models import Submission, SubmissionStatus
from src.seniku.utils.time import get_current_time

API = "/seniku/api/v1"
PASSWORD = "password123"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def make_image(color=(200, 30, 30), size=(1000, 800), fmt="PNG") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def image_part(content: bytes, name: str = "art.png", content_type: str = "image/png") -> dict:
    return {"image": (name, content, content_type)}


def make_submission(
    db,
    assignment_id,
    student_id,
    status: SubmissionStatus = SubmissionStatus.GRADED,
    grade: Optional[int] = 90,
    title: str = "Karya",
    image_url: str = "http://storage.test/submissions/submission-a.jpg",
) -> Submission:
    now = get_current_time()
    submission = Submission(
        assignment_id=assignment_id,
        student_id=student_id,
        title=title,
        image_url=image_url,
        status=status,
        grade=grade if status == SubmissionStatus.GRADED else None,
        feedback="Bagus" if status == SubmissionStatus.GRADED else None,
        submitted_at=now,
        graded_at=now if status == SubmissionStatus.GRADED else None,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)
    return submission


def login(client, identifier: str, password: str = PASSWORD) -> str:
    r = client.post(f"{API}/auth/login", json={"identifier": identifier, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["data"]["access_token"]
