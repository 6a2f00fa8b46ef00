"""Category Domain Model

progress / status 在存在任务时由聚合引擎在读取时推导；
存储层只保存创建时给定的值，推导值不回写。
"""

from datetime import date

from pydantic import BaseModel, Field

from .enums import Phase, Priority, Status


class Category(BaseModel):
    """分类（工作流）数据模型"""

    id: str = Field(description="唯一标识")
    name: str = Field(description="分类名称")
    phase: Phase = Field(description="所属活动阶段")
    responsible_persons: list[str] = Field(default_factory=list, description="负责人（仅展示）")
    progress: int = Field(default=0, ge=0, le=100, description="进度百分比")
    status: Status = Field(default=Status.NOT_STARTED, description="状态")
    due_date: date = Field(description="截止日期")
    priority: Priority = Field(default=Priority.MEDIUM, description="优先级")
