"""任务路由

GET /api/tasks: 任务列表，支持关键字搜索与 mine 筛选，附带状态统计。
POST /api/tasks: 在已存在的分类下创建任务。
GET /api/tasks/{task_id}: 任务详情。
PATCH /api/tasks/{task_id}: 编辑描述性字段。
DELETE /api/tasks/{task_id}: 删除任务（super-admin）。
POST /api/tasks/{task_id}/quick-update: 快捷进度 +10%。
POST /api/tasks/{task_id}/progress: 手动设定进度。
"""

from datetime import date
from typing import Any

from eventdesk.core import aggregation
from eventdesk.core.coordinator import EventCoordinator
from eventdesk.core.session import SessionContext
from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field

from ..deps import get_coordinator, get_session

router = APIRouter()


class TaskCreateRequest(BaseModel):
    """创建任务请求体"""

    category_id: str = Field(description="所属分类 ID")
    title: str = ""
    description: str = ""
    assigned_to: list[str] = Field(default_factory=list)
    due_date: date | None = None
    schedule_item_id: str | None = None


class TaskEditRequest(BaseModel):
    """编辑任务请求体 -- 只有显式给出的字段会被修改"""

    title: str | None = None
    description: str | None = None
    assigned_to: list[str] | None = None
    due_date: date | None = None
    category_id: str | None = None
    schedule_item_id: str | None = None


class ProgressRequest(BaseModel):
    """手动进度请求体

    progress 不在此处做类型约束，交由生命周期引擎校验（0-100 的整数）。
    """

    progress: Any = None
    message: str | None = None


def _task_payload(task) -> dict:
    return task.model_dump(mode="json")


@router.get("/api/tasks")
async def list_tasks(
    q: str | None = Query(default=None, description="关键字"),
    mine: bool = Query(default=False, description="仅看自己负责的任务"),
    coordinator: EventCoordinator = Depends(get_coordinator),
    session: SessionContext = Depends(get_session),
):
    tasks = coordinator.list_tasks(query=q, mine=mine, session=session)
    return {
        "tasks": [_task_payload(t) for t in tasks],
        "stats": aggregation.task_stats(tasks).model_dump(mode="json"),
    }


@router.post("/api/tasks", status_code=201)
async def create_task(
    body: TaskCreateRequest,
    coordinator: EventCoordinator = Depends(get_coordinator),
    session: SessionContext = Depends(get_session),
):
    fields = body.model_dump(exclude={"category_id"})
    task = coordinator.add_task(body.category_id, fields, session)
    return {"task": _task_payload(task)}


@router.get("/api/tasks/{task_id}")
async def get_task_detail(
    task_id: str,
    coordinator: EventCoordinator = Depends(get_coordinator),
):
    task = coordinator.get_task(task_id)
    category = None
    # 外部注入的数据可能引用不存在的分类
    if task.category_id in coordinator.categories:
        category = coordinator.get_category(task.category_id).model_dump(mode="json")
    return {"task": _task_payload(task), "category": category}


@router.patch("/api/tasks/{task_id}")
async def edit_task(
    task_id: str,
    body: TaskEditRequest,
    coordinator: EventCoordinator = Depends(get_coordinator),
    session: SessionContext = Depends(get_session),
):
    task = coordinator.edit_task(task_id, body.model_dump(exclude_unset=True), session)
    return {"task": _task_payload(task)}


@router.delete("/api/tasks/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    coordinator: EventCoordinator = Depends(get_coordinator),
    session: SessionContext = Depends(get_session),
):
    coordinator.delete_task(task_id, session)
    return Response(status_code=204)


@router.post("/api/tasks/{task_id}/quick-update")
async def quick_update(
    task_id: str,
    coordinator: EventCoordinator = Depends(get_coordinator),
    session: SessionContext = Depends(get_session),
):
    task = coordinator.quick_update(task_id, session)
    return {"task": _task_payload(task)}


@router.post("/api/tasks/{task_id}/progress")
async def record_progress(
    task_id: str,
    body: ProgressRequest,
    coordinator: EventCoordinator = Depends(get_coordinator),
    session: SessionContext = Depends(get_session),
):
    task = coordinator.record_progress(task_id, body.progress, session, body.message)
    return {"task": _task_payload(task)}
