# src/seniku/schemas/__init__.py

# Shared namespace for the read models so nested references resolve in one place.
from .user import UserRead, UserDetail, UserBrief, ClassSummary
from .assignment import AssignmentRead, CategoryBrief
from .submission import SubmissionRead
from .achievement import AchievementRead, UserAchievementRead
from .notification import NotificationRead

UserDetail.model_rebuild(_types_namespace=globals())
AssignmentRead.model_rebuild(_types_namespace=globals())
UserAchievementRead.model_rebuild(_types_namespace=globals())
