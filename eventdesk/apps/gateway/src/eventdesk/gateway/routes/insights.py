"""AI 洞察路由

POST /api/insights: 基于推导后的分类与全部任务生成进度洞察。
POST /api/reports/weekly: 基于推导后的分类生成周报。

生成失败时仍返回 200，text 为兜底文案，available=False。
"""

from eventdesk.core.coordinator import EventCoordinator
from fastapi import APIRouter, Depends

from ..deps import get_coordinator, get_insight_service
from ..services.insight_service import InsightService

router = APIRouter()


@router.post("/api/insights")
async def generate_insights(
    coordinator: EventCoordinator = Depends(get_coordinator),
    service: InsightService = Depends(get_insight_service),
):
    state = coordinator.get_derived_state()
    result = await service.generate_insights(state.categories, coordinator.tasks.all())
    return result.model_dump()


@router.post("/api/reports/weekly")
async def generate_weekly_report(
    coordinator: EventCoordinator = Depends(get_coordinator),
    service: InsightService = Depends(get_insight_service),
):
    state = coordinator.get_derived_state()
    result = await service.generate_weekly_report(state.categories)
    return result.model_dump()
