"""
Populate a fresh database with demo data.

Creates classes 1A-2C, two teachers, ten students per class, the art
categories and a starter set of achievements. Safe to re-run: rows that
already exist (matched by name, NIP or NIS) are left untouched.
"""
import logging

from sqlmodel import select

from src.seniku.db.session import create_db_and_tables, open_session
from src.seniku.models import Achievement, Category, SchoolClass, TeacherClass, User, UserRole
from src.seniku.utils.security import hash_password

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger("seed_db")

DEFAULT_PASSWORD = "123456"
CLASS_NAMES = ["1A", "1B", "1C", "2A", "2B", "2C"]
TEACHERS = [
    {"name": "Budi Arie", "nip": "198501012010011001", "email": "budi.arie@seniku.sch.id", "classes": ["1A", "1B", "1C"]},
    {"name": "Wanda Oke", "nip": "198703152011012002", "email": "wanda.oke@seniku.sch.id", "classes": ["2A", "2B", "2C"]},
]
CATEGORIES = [
    {"name": "Lukisan", "description": "Karya lukis dengan cat air, akrilik atau minyak", "icon": "🎨"},
    {"name": "Digital Art", "description": "Ilustrasi dan karya seni digital", "icon": "💻"},
    {"name": "Seni Rupa", "description": "Gambar, sketsa dan karya rupa lainnya", "icon": "🖌️"},
]
ACHIEVEMENTS = [
    {
        "name": "Karya Pertama",
        "description": "Mendapatkan nilai untuk karya pertama",
        "icon": "🌱",
        "criteria": {"type": "total_graded_submissions", "value": 1, "operator": ">="},
    },
    {
        "name": "Seniman Produktif",
        "description": "Mendapatkan nilai untuk 10 karya",
        "icon": "🏅",
        "criteria": {"type": "total_graded_submissions", "value": 10, "operator": ">="},
    },
    {
        "name": "Nilai Sempurna",
        "description": "Meraih nilai 100 pada sebuah karya",
        "icon": "💯",
        "criteria": {"type": "highest_grade", "value": 100, "operator": ">="},
    },
    {
        "name": "Konsisten",
        "description": "Rata-rata nilai minimal 85",
        "icon": "⭐",
        "criteria": {"type": "average_grade", "value": 85, "operator": ">="},
    },
    {
        "name": "Bintang Kelas",
        "description": "Lima karya dengan nilai A",
        "icon": "🏆",
        "criteria": {"type": "grade_count", "value": 5, "operator": ">=", "min_grade": 90},
    },
    {
        "name": "Penjelajah Seni",
        "description": "Menyelesaikan karya di tiga kategori berbeda",
        "icon": "🧭",
        "criteria": {"type": "category_completion", "value": 3, "operator": ">="},
    },
]


def seed_classes(db) -> dict:
    classes = {}
    for name in CLASS_NAMES:
        school_class = db.exec(select(SchoolClass).where(SchoolClass.name == name)).first()
        if not school_class:
            school_class = SchoolClass(name=name, description=f"Kelas {name}")
            db.add(school_class)
            logger.info(f"Class {name} created")
        classes[name] = school_class
    db.commit()
    return classes


def seed_teachers(db, classes: dict) -> None:
    for data in TEACHERS:
        if db.exec(select(User).where(User.nip == data["nip"])).first():
            continue
        teacher = User(
            name=data["name"],
            nip=data["nip"],
            email=data["email"],
            role=UserRole.TEACHER,
            hashed_password=hash_password(DEFAULT_PASSWORD),
        )
        teacher.teacher_classes = [TeacherClass(class_id=classes[name].id) for name in data["classes"]]
        db.add(teacher)
        logger.info(f"Teacher {data['name']} created")
    db.commit()


def seed_students(db, classes: dict) -> None:
    hashed = hash_password(DEFAULT_PASSWORD)
    for index, name in enumerate(CLASS_NAMES, start=1):
        for number in range(1, 11):
            nis = f"2024{index:02d}{number:03d}"
            if db.exec(select(User).where(User.nis == nis)).first():
                continue
            db.add(User(
                name=f"Siswa {name} {number:02d}",
                nis=nis,
                role=UserRole.STUDENT,
                class_id=classes[name].id,
                hashed_password=hashed,
            ))
        logger.info(f"Students for class {name} ready")
    db.commit()


def seed_named(db, model, rows: list) -> None:
    for data in rows:
        if db.exec(select(model).where(model.name == data["name"])).first():
            continue
        db.add(model(**data))
        logger.info(f"{model.__name__} {data['name']} created")
    db.commit()


def main() -> None:
    create_db_and_tables()
    with open_session() as db:
        classes = seed_classes(db)
        seed_teachers(db, classes)
        seed_students(db, classes)
        seed_named(db, Category, CATEGORIES)
        seed_named(db, Achievement, ACHIEVEMENTS)
    logger.info(f"Seeding complete. Default password for every account: {DEFAULT_PASSWORD}")


if __name__ == "__main__":
    main()
