"""读侧派生模型 -- 聚合引擎的输出，不持久化"""

from datetime import datetime

from pydantic import BaseModel, Field

from .category import Category
from .enums import Phase


class PhaseSummary(BaseModel):
    """单个阶段的汇总"""

    phase: Phase
    progress: float = Field(ge=0.0, le=100.0, description="阶段内分类进度均值，无分类时为 0")
    weight: float = Field(ge=0.0, le=1.0, description="阶段权重")
    category_count: int = Field(ge=0)


class DerivedState(BaseModel):
    """看板派生状态：推导后的分类 + 整体进度"""

    categories: list[Category] = Field(default_factory=list)
    overall_progress: int = Field(ge=0, le=100)
    phases: list[PhaseSummary] = Field(default_factory=list)


class TaskStats(BaseModel):
    """任务数量统计"""

    total: int = 0
    not_started: int = 0
    in_progress: int = 0
    completed: int = 0
    blocked: int = 0


class EventSummary(BaseModel):
    """活动总览指标"""

    completed_tasks: int = 0
    total_tasks: int = 0
    days_to_go: int = Field(description="距活动日天数，活动已过时为负数")
    active_team: int = Field(ge=0, description="提交过进度的成员数，无人提交时为成员总数")
    at_risk: int = Field(ge=0, description="状态为 blocked 的分类数")


class ActivityEntry(BaseModel):
    """最近动态：审计条目 + 所属任务"""

    task_id: str
    task_title: str
    timestamp: datetime
    user: str
    message: str
    progress_before: int
    progress_after: int
