"""枚举定义

包含 Phase、Status、Priority、UserRole 枚举。
枚举值即线上/存储格式（kebab-case 字符串）。
"""

from enum import StrEnum


class Phase(StrEnum):
    """活动阶段"""

    PRE_EVENT = "pre-event"
    DURING_EVENT = "during-event"
    POST_EVENT = "post-event"


class Status(StrEnum):
    """任务 / 分类状态"""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class Priority(StrEnum):
    """分类优先级"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class UserRole(StrEnum):
    """成员角色 -- 仅 SUPER_ADMIN 可执行删除类操作"""

    ADMIN = "admin"
    TEAM_MEMBER = "team-member"
    SUPER_ADMIN = "super-admin"


# 阶段展示顺序
PHASE_ORDER: tuple[Phase, ...] = (
    Phase.PRE_EVENT,
    Phase.DURING_EVENT,
    Phase.POST_EVENT,
)
