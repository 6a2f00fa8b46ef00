"""日程 / 嘉宾名单 / 照片墙路由

写操作等待 SQLite 提交后返回；存储不可用时返回 503。
"""

from eventdesk.core.session import SessionContext
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from ..deps import get_agenda_service, get_session
from ..services.agenda_service import AgendaService

router = APIRouter()


class ScheduleItemRequest(BaseModel):
    """日程条目请求体"""

    s_no: int | None = Field(default=None, ge=0)
    time: str = ""
    event_transit: str = ""
    duration: str = ""


class AttendeeRequest(BaseModel):
    """嘉宾请求体 -- 可选文本为空时填充 N/A"""

    name: str = ""
    designation: str | None = None
    organization: str | None = None
    seating_category: str | None = None
    def_touchpoint: str | None = None


class AttendeeRenameRequest(BaseModel):
    name: str = ""


class PhotoUploadRequest(BaseModel):
    """照片上传请求体"""

    task_id: str = Field(min_length=1)
    photo_data: str = ""
    schedule_item_id: str | None = None


class PhotoRelinkRequest(BaseModel):
    task_id: str = Field(min_length=1)
    schedule_item_id: str | None = None


# ============================================================
# 日程
# ============================================================


@router.get("/api/schedule")
async def list_schedule(service: AgendaService = Depends(get_agenda_service)):
    overview = await service.schedule_overview()
    return {
        "items": [i.model_dump(mode="json") for i in overview["items"]],
        "progress": overview["progress"],
        "active_index": overview["active_index"],
    }


@router.post("/api/schedule", status_code=201)
async def add_schedule_item(
    body: ScheduleItemRequest,
    service: AgendaService = Depends(get_agenda_service),
    session: SessionContext = Depends(get_session),
):
    item = await service.add_schedule_item(body.model_dump(), session)
    return {"item": item.model_dump(mode="json")}


@router.put("/api/schedule/{item_id}")
async def update_schedule_item(
    item_id: str,
    body: ScheduleItemRequest,
    service: AgendaService = Depends(get_agenda_service),
    session: SessionContext = Depends(get_session),
):
    fields = body.model_dump(exclude_unset=True)
    if fields.get("s_no") is None:
        fields.pop("s_no", None)
    item = await service.update_schedule_item(item_id, fields, session)
    return {"item": item.model_dump(mode="json")}


@router.delete("/api/schedule/{item_id}", status_code=204)
async def delete_schedule_item(
    item_id: str,
    service: AgendaService = Depends(get_agenda_service),
    session: SessionContext = Depends(get_session),
):
    await service.delete_schedule_item(item_id, session)
    return Response(status_code=204)


# ============================================================
# 嘉宾名单
# ============================================================


@router.get("/api/attendees")
async def list_attendees(service: AgendaService = Depends(get_agenda_service)):
    attendees = await service.list_attendees()
    return {"attendees": [a.model_dump(mode="json") for a in attendees]}


@router.post("/api/attendees", status_code=201)
async def add_attendee(
    body: AttendeeRequest,
    service: AgendaService = Depends(get_agenda_service),
    session: SessionContext = Depends(get_session),
):
    attendee = await service.add_attendee(body.model_dump(), session)
    return {"attendee": attendee.model_dump(mode="json")}


@router.patch("/api/attendees/{attendee_id}")
async def rename_attendee(
    attendee_id: str,
    body: AttendeeRenameRequest,
    service: AgendaService = Depends(get_agenda_service),
    session: SessionContext = Depends(get_session),
):
    attendee = await service.rename_attendee(attendee_id, body.name, session)
    return {"attendee": attendee.model_dump(mode="json")}


@router.delete("/api/attendees/{attendee_id}", status_code=204)
async def delete_attendee(
    attendee_id: str,
    service: AgendaService = Depends(get_agenda_service),
    session: SessionContext = Depends(get_session),
):
    await service.delete_attendee(attendee_id, session)
    return Response(status_code=204)


# ============================================================
# 照片墙
# ============================================================


@router.get("/api/gallery")
async def list_gallery(service: AgendaService = Depends(get_agenda_service)):
    photos = await service.list_gallery()
    return {"photos": [p.model_dump(mode="json") for p in photos]}


@router.post("/api/gallery", status_code=201)
async def upload_photo(
    body: PhotoUploadRequest,
    service: AgendaService = Depends(get_agenda_service),
    session: SessionContext = Depends(get_session),
):
    photo = await service.upload_photo(
        body.task_id,
        body.photo_data,
        session,
        schedule_item_id=body.schedule_item_id,
    )
    return {"photo": photo.model_dump(mode="json")}


@router.patch("/api/gallery/{photo_id}")
async def relink_photo(
    photo_id: str,
    body: PhotoRelinkRequest,
    service: AgendaService = Depends(get_agenda_service),
    session: SessionContext = Depends(get_session),
):
    photo = await service.relink_photo(
        photo_id,
        body.task_id,
        session,
        schedule_item_id=body.schedule_item_id,
    )
    return {"photo": photo.model_dump(mode="json")}


@router.delete("/api/gallery/{photo_id}", status_code=204)
async def delete_photo(
    photo_id: str,
    service: AgendaService = Depends(get_agenda_service),
    session: SessionContext = Depends(get_session),
):
    await service.delete_photo(photo_id, session)
    return Response(status_code=204)
