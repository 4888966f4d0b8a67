# src/seniku/models/__init__.py

# Centralizes all model imports so SQLAlchemy's metadata knows every table
# before mappers are configured or tables are created.

# --- Base Models (Fewest dependencies) ---
from .school_class import SchoolClass
from .user import User, UserRole, TeacherClass
from .category import Category

# --- Assignment and Submission Models ---
from .assignment import Assignment, AssignmentClass, AssignmentStatus
from .submission import Submission, SubmissionRevision, SubmissionStatus

# --- Achievement and Notification Models ---
from .achievement import Achievement, UserAchievement
from .notification import Notification, NotificationType


# The __all__ list defines the public API for the 'models' package.
__all__ = [
    "SchoolClass",
    "User",
    "UserRole",
    "TeacherClass",
    "Category",
    "Assignment",
    "AssignmentClass",
    "AssignmentStatus",
    "Submission",
    "SubmissionRevision",
    "SubmissionStatus",
    "Achievement",
    "UserAchievement",
    "Notification",
    "NotificationType",
]
