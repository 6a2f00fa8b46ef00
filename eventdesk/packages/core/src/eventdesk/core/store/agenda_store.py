"""日程 / 嘉宾 / 照片墙 SQLite 实现

日程按 s_no 正序，嘉宾与照片按 created_at 倒序。
"""

from ..models.agenda import Attendee, GalleryItem, ScheduleItem
from .collection import SqliteCollectionStore


class SqliteScheduleStore(SqliteCollectionStore[ScheduleItem]):
    """schedule 集合"""

    model = ScheduleItem
    table = "schedule"
    columns = ("id", "s_no", "time", "event_transit", "duration")
    order_by = "s_no ASC, rowid ASC"


class SqliteAttendeeStore(SqliteCollectionStore[Attendee]):
    """attendees 集合"""

    model = Attendee
    table = "attendees"
    columns = (
        "id",
        "name",
        "designation",
        "organization",
        "seating_category",
        "def_touchpoint",
        "invited_by",
        "created_at",
    )
    order_by = "created_at DESC"


class SqliteGalleryStore(SqliteCollectionStore[GalleryItem]):
    """gallery 集合"""

    model = GalleryItem
    table = "gallery"
    columns = ("id", "task_id", "schedule_item_id", "uploaded_by", "photo_data", "created_at")
    order_by = "created_at DESC"
