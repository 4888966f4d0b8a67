import os

# Must be set before the application modules build their engine
os.environ["DATABASE_URL"] = "sqlite:///./test_seniku.db"
os.environ.pop("S3_ENDPOINT_URL", None)

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from src.seniku.db.session import engine, get_db
from src.seniku.main import app
from src.seniku.models import (
    Assignment,
    AssignmentClass,
    AssignmentStatus,
    Category,
    SchoolClass,
    TeacherClass,
    User,
    UserRole,
)
from src.seniku.utils.security import hash_password
from src.seniku.utils.time import get_current_time
from tests.utils import PASSWORD, login

TEST_DB_FILE = "test_seniku.db"

HASHED_PASSWORD = hash_password(PASSWORD)


def override_get_db():
    with Session(engine) as session:
        yield session


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed():
    """Seed a clean minimal dataset for each test."""
    with Session(engine) as db:
        # Clear tables (child -> parent)
        for table in reversed(SQLModel.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()

        school_class = SchoolClass(name="1A", description="Kelas 1A")
        category = Category(name="Lukisan", description="Karya lukis", icon="🎨")
        db.add_all([school_class, category])
        db.commit()

        teacher = User(
            name="Budi Arie",
            nip="T001",
            email="budi@seniku.test",
            role=UserRole.TEACHER,
            hashed_password=HASHED_PASSWORD,
        )
        teacher.teacher_classes = [TeacherClass(class_id=school_class.id)]
        student = User(
            name="Siti Aminah",
            nis="S001",
            role=UserRole.STUDENT,
            class_id=school_class.id,
            hashed_password=HASHED_PASSWORD,
        )
        other_student = User(
            name="Andi Wijaya",
            nis="S002",
            role=UserRole.STUDENT,
            class_id=school_class.id,
            hashed_password=HASHED_PASSWORD,
        )
        db.add_all([teacher, student, other_student])
        db.commit()

        # Assignment (future deadline so submissions are allowed)
        assignment = Assignment(
            title="Pemandangan Alam",
            description="Lukis pemandangan di sekitar rumah",
            category_id=category.id,
            deadline=get_current_time() + timedelta(days=7),
            status=AssignmentStatus.ACTIVE,
            created_by=teacher.id,
        )
        assignment.class_links = [AssignmentClass(class_id=school_class.id)]
        db.add(assignment)
        db.commit()

        seeded = SimpleNamespace(
            class_id=school_class.id,
            category_id=category.id,
            teacher_id=teacher.id,
            student_id=student.id,
            other_student_id=other_student.id,
            assignment_id=assignment.id,
        )

    yield seeded


@pytest.fixture()
def db():
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def storage():
    """Replace object storage uploads; URLs echo the bucket and key."""

    async def fake_upload(bucket, key, data, content_type=None):
        return f"http://storage.test/{bucket}/{key}"

    with patch("src.seniku.utils.file.upload_bytes", new=AsyncMock(side_effect=fake_upload)) as mock:
        yield mock


@pytest.fixture()
def teacher_token(client):
    return login(client, "T001")


@pytest.fixture()
def student_token(client):
    return login(client, "S001")


@pytest.fixture()
def other_student_token(client):
    return login(client, "S002")
