"""AgendaService -- 日程、嘉宾名单、照片墙

这三个集合不进入协调器的内存存储，读写直接走持久化层：
写操作等待 SQLite 提交后才返回，PersistenceError 原样抛给路由层（503）。
删除类操作与日程写操作仅限 super-admin。
"""

from datetime import UTC, datetime

import structlog
from eventdesk.core import aggregation
from eventdesk.core.coordinator import EventCoordinator
from eventdesk.core.exceptions import NotFoundError, ValidationError
from eventdesk.core.lifecycle import ensure_super_admin, generate_id
from eventdesk.core.models import (
    DEFAULT_SEATING_CATEGORY,
    NOT_AVAILABLE,
    Attendee,
    GalleryItem,
    ScheduleItem,
)
from eventdesk.core.session import SessionContext
from eventdesk.core.store import StoreGroup

log = structlog.get_logger()


def _or_default(value: str | None, default: str) -> str:
    return (value or "").strip() or default


class AgendaService:
    """日程 / 嘉宾 / 照片墙服务"""

    def __init__(self, store_group: StoreGroup, coordinator: EventCoordinator) -> None:
        self._stores = store_group
        self._coordinator = coordinator

    # ============================================================
    # 日程
    # ============================================================

    async def list_schedule(self) -> list[ScheduleItem]:
        return await self._stores.schedule_store.select_all()

    async def schedule_overview(self) -> dict:
        """日程 + 每条的关联任务进度 + 当前进行中的条目下标"""
        items = await self.list_schedule()
        progress = aggregation.schedule_progress(items, self._coordinator.tasks.all())
        return {
            "items": items,
            "progress": progress,
            "active_index": aggregation.active_schedule_index(items, progress),
        }

    async def add_schedule_item(self, fields: dict, session: SessionContext) -> ScheduleItem:
        ensure_super_admin(session.require_user())
        s_no = fields.get("s_no")
        if s_no is None:
            existing = await self.list_schedule()
            s_no = max((i.s_no for i in existing), default=0) + 1

        item = ScheduleItem(
            id=generate_id("sched"),
            s_no=s_no,
            time=fields.get("time") or "",
            event_transit=fields.get("event_transit") or "",
            duration=fields.get("duration") or "",
        )
        await self._stores.schedule_store.insert(item)
        log.info("schedule_item_added", item_id=item.id, s_no=item.s_no)
        return item

    async def update_schedule_item(
        self,
        item_id: str,
        fields: dict,
        session: SessionContext,
    ) -> ScheduleItem:
        ensure_super_admin(session.require_user())
        current = await self._stores.schedule_store.get(item_id)
        if current is None:
            raise NotFoundError("ScheduleItem", item_id)

        updated = ScheduleItem.model_validate({**current.model_dump(), **fields, "id": item_id})
        await self._stores.schedule_store.upsert(updated)
        log.info("schedule_item_updated", item_id=item_id)
        return updated

    async def delete_schedule_item(self, item_id: str, session: SessionContext) -> None:
        ensure_super_admin(session.require_user())
        if not await self._stores.schedule_store.delete(item_id):
            raise NotFoundError("ScheduleItem", item_id)
        log.info("schedule_item_deleted", item_id=item_id)

    # ============================================================
    # 嘉宾名单
    # ============================================================

    async def list_attendees(self) -> list[Attendee]:
        return await self._stores.attendee_store.select_all()

    async def add_attendee(self, fields: dict, session: SessionContext) -> Attendee:
        user = session.require_user()
        name = (fields.get("name") or "").strip()
        if not name:
            raise ValidationError("attendee name is required")

        attendee = Attendee(
            id=generate_id("att"),
            name=name,
            designation=_or_default(fields.get("designation"), NOT_AVAILABLE),
            organization=_or_default(fields.get("organization"), NOT_AVAILABLE),
            seating_category=_or_default(fields.get("seating_category"), DEFAULT_SEATING_CATEGORY),
            def_touchpoint=_or_default(fields.get("def_touchpoint"), NOT_AVAILABLE),
            invited_by=user.name,
            created_at=datetime.now(UTC),
        )
        await self._stores.attendee_store.insert(attendee)
        log.info("attendee_added", attendee_id=attendee.id)
        return attendee

    async def rename_attendee(
        self,
        attendee_id: str,
        name: str,
        session: SessionContext,
    ) -> Attendee:
        session.require_user()
        name = (name or "").strip()
        if not name:
            raise ValidationError("attendee name is required")
        current = await self._stores.attendee_store.get(attendee_id)
        if current is None:
            raise NotFoundError("Attendee", attendee_id)

        updated = current.model_copy(update={"name": name})
        await self._stores.attendee_store.upsert(updated)
        return updated

    async def delete_attendee(self, attendee_id: str, session: SessionContext) -> None:
        ensure_super_admin(session.require_user())
        if not await self._stores.attendee_store.delete(attendee_id):
            raise NotFoundError("Attendee", attendee_id)
        log.info("attendee_deleted", attendee_id=attendee_id)

    # ============================================================
    # 照片墙
    # ============================================================

    async def list_gallery(self) -> list[GalleryItem]:
        return await self._stores.gallery_store.select_all()

    async def upload_photo(
        self,
        task_id: str,
        photo_data: str,
        session: SessionContext,
        schedule_item_id: str | None = None,
    ) -> GalleryItem:
        """上传照片：必须关联已存在的任务，照片同时追加到任务附件"""
        user = session.require_user()
        self._coordinator.get_task(task_id)
        if not (photo_data or "").strip():
            raise ValidationError("photo_data is required")

        item = GalleryItem(
            id=generate_id("photo"),
            task_id=task_id,
            schedule_item_id=schedule_item_id or None,
            uploaded_by=user.name,
            photo_data=photo_data,
            created_at=datetime.now(UTC),
        )
        await self._stores.gallery_store.insert(item)
        self._coordinator.attach_photo(task_id, photo_data)
        log.info("photo_uploaded", photo_id=item.id, task_id=task_id)
        return item

    async def relink_photo(
        self,
        photo_id: str,
        task_id: str,
        session: SessionContext,
        schedule_item_id: str | None = None,
    ) -> GalleryItem:
        """修改照片关联的任务 / 日程条目，任务变化时附件随之迁移"""
        session.require_user()
        self._coordinator.get_task(task_id)
        current = await self._stores.gallery_store.get(photo_id)
        if current is None:
            raise NotFoundError("GalleryItem", photo_id)

        updated = current.model_copy(
            update={"task_id": task_id, "schedule_item_id": schedule_item_id or None}
        )
        await self._stores.gallery_store.upsert(updated)
        if current.task_id != task_id:
            self._coordinator.detach_photo(current.task_id, current.photo_data)
            self._coordinator.attach_photo(task_id, current.photo_data)
            log.info(
                "photo_relinked", photo_id=photo_id, from_task=current.task_id, to_task=task_id
            )
        return updated

    async def delete_photo(self, photo_id: str, session: SessionContext) -> None:
        """删除照片，同时从所属任务的附件中移除"""
        ensure_super_admin(session.require_user())
        current = await self._stores.gallery_store.get(photo_id)
        if current is None or not await self._stores.gallery_store.delete(photo_id):
            raise NotFoundError("GalleryItem", photo_id)
        self._coordinator.detach_photo(current.task_id, current.photo_data)
        log.info("photo_deleted", photo_id=photo_id)
