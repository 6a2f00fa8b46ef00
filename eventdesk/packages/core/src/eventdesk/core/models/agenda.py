"""日程、嘉宾名单与照片墙数据模型"""

from datetime import datetime

from pydantic import BaseModel, Field

# 嘉宾信息缺省占位
NOT_AVAILABLE = "N/A"
DEFAULT_SEATING_CATEGORY = "General"


class ScheduleItem(BaseModel):
    """活动当日日程条目，按 s_no 排序"""

    id: str = Field(description="唯一标识")
    s_no: int = Field(ge=0, description="序号")
    time: str = Field(default="", description="时间段，自由文本")
    event_transit: str = Field(default="", description="环节 / 动线说明")
    duration: str = Field(default="", description="时长，自由文本")


class Attendee(BaseModel):
    """受邀嘉宾"""

    id: str = Field(description="唯一标识")
    name: str = Field(min_length=1, description="嘉宾姓名")
    designation: str = Field(default=NOT_AVAILABLE, description="职务")
    organization: str = Field(default=NOT_AVAILABLE, description="所属机构")
    seating_category: str = Field(default=DEFAULT_SEATING_CATEGORY, description="座位分区")
    def_touchpoint: str = Field(default=NOT_AVAILABLE, description="对接人")
    invited_by: str = Field(default="", description="邀请人")
    created_at: datetime = Field(description="登记时间")


class GalleryItem(BaseModel):
    """照片墙条目 -- 必须关联一个任务"""

    id: str = Field(description="唯一标识")
    task_id: str = Field(min_length=1, description="关联任务 ID")
    schedule_item_id: str | None = Field(default=None, description="关联日程条目 ID")
    uploaded_by: str = Field(description="上传人")
    photo_data: str = Field(min_length=1, description="照片内容（data URL 等不透明字符串）")
    created_at: datetime = Field(description="上传时间")
