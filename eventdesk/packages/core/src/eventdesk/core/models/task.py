"""Task Domain Model

updates 为 newest-first 的审计列表，只允许在头部追加新条目。
status == completed 当且仅当 progress == 100 仅对生命周期引擎产生的任务成立，
外部注入的数据可能违反该约束。
"""

from datetime import UTC, date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import Status


class TaskUpdate(BaseModel):
    """任务审计条目 -- 创建后不可变"""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(description="变更发生时间")
    user: str = Field(description="操作者姓名")
    message: str = Field(description="变更说明")
    progress_before: int = Field(ge=0, le=100, description="变更前进度")
    progress_after: int = Field(ge=0, le=100, description="变更后进度")

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """外部数据中不带时区的时间按 UTC 处理"""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class Task(BaseModel):
    """Task 数据模型"""

    id: str = Field(description="唯一标识，task-<ULID> 格式")
    category_id: str = Field(min_length=1, description="所属分类 ID")
    title: str = Field(description="任务标题")
    description: str = Field(default="", description="任务描述")
    assigned_to: list[str] = Field(default_factory=list, description="负责人姓名列表")
    status: Status = Field(default=Status.NOT_STARTED, description="当前状态")
    progress: int = Field(default=0, ge=0, le=100, description="完成百分比")
    due_date: date = Field(description="截止日期")
    updates: list[TaskUpdate] = Field(
        default_factory=list,
        description="审计记录，newest-first",
    )
    schedule_item_id: str | None = Field(default=None, description="关联的日程条目 ID")
    attachments: list[str] = Field(default_factory=list, description="关联照片引用")
