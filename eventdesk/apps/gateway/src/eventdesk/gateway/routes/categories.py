"""分类路由

GET /api/categories: 推导后的分类列表。
POST /api/categories: 新建分类。
GET /api/categories/{category_id}: 分类详情，含任务、统计与最近动态。
"""

from datetime import date

from eventdesk.core.coordinator import EventCoordinator
from eventdesk.core.models import Phase, Priority
from eventdesk.core.session import SessionContext
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_coordinator, get_session

router = APIRouter()


class CategoryCreateRequest(BaseModel):
    """新建分类请求体"""

    name: str = Field(description="分类名称")
    phase: Phase = Phase.PRE_EVENT
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM
    responsible_persons: list[str] | None = None


@router.get("/api/categories")
async def list_categories(coordinator: EventCoordinator = Depends(get_coordinator)):
    state = coordinator.get_derived_state()
    return {"categories": [c.model_dump(mode="json") for c in state.categories]}


@router.post("/api/categories", status_code=201)
async def create_category(
    body: CategoryCreateRequest,
    coordinator: EventCoordinator = Depends(get_coordinator),
    session: SessionContext = Depends(get_session),
):
    category = coordinator.add_category(
        body.name,
        session,
        phase=body.phase,
        due_date=body.due_date,
        priority=body.priority,
        responsible_persons=body.responsible_persons,
    )
    return {"category": category.model_dump(mode="json")}


@router.get("/api/categories/{category_id}")
async def get_category_detail(
    category_id: str,
    coordinator: EventCoordinator = Depends(get_coordinator),
):
    detail = coordinator.get_category_detail(category_id)
    return {
        "category": detail["category"].model_dump(mode="json"),
        "tasks": [t.model_dump(mode="json") for t in detail["tasks"]],
        "stats": detail["stats"].model_dump(mode="json"),
        "recent_activity": [a.model_dump(mode="json") for a in detail["recent_activity"]],
    }
