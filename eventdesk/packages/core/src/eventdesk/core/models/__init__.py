"""EventDesk Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .agenda import (
    DEFAULT_SEATING_CATEGORY,
    NOT_AVAILABLE,
    Attendee,
    GalleryItem,
    ScheduleItem,
)
from .category import Category
from .enums import PHASE_ORDER, Phase, Priority, Status, UserRole
from .summary import (
    ActivityEntry,
    DerivedState,
    EventSummary,
    PhaseSummary,
    TaskStats,
)
from .task import Task, TaskUpdate
from .user import User

__all__ = [
    # 枚举
    "Phase",
    "Status",
    "Priority",
    "UserRole",
    "PHASE_ORDER",
    # Task
    "Task",
    "TaskUpdate",
    # Category
    "Category",
    # User
    "User",
    # Agenda
    "ScheduleItem",
    "Attendee",
    "GalleryItem",
    "NOT_AVAILABLE",
    "DEFAULT_SEATING_CATEGORY",
    # 派生视图
    "PhaseSummary",
    "DerivedState",
    "TaskStats",
    "EventSummary",
    "ActivityEntry",
]
