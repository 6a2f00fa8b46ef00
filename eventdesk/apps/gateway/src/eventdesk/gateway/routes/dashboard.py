"""看板路由

GET /api/dashboard: 推导后的分类、整体进度、阶段汇总、活动总览与最近动态。
"""

from eventdesk.core.coordinator import EventCoordinator
from fastapi import APIRouter, Depends

from ..deps import get_coordinator

router = APIRouter()


@router.get("/api/dashboard")
async def dashboard(coordinator: EventCoordinator = Depends(get_coordinator)):
    """每次请求都从当前内存状态重新推导"""
    state = coordinator.get_derived_state()
    return {
        "overall_progress": state.overall_progress,
        "categories": [c.model_dump(mode="json") for c in state.categories],
        "phases": [p.model_dump(mode="json") for p in state.phases],
        "summary": coordinator.event_summary().model_dump(mode="json"),
        "recent_activity": [a.model_dump(mode="json") for a in coordinator.recent_activity()],
    }
