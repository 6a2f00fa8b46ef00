"""InsightService -- AI 进度洞察与周报

把分类 / 任务数据组装为提示词，经 FallbackManager 调用文本生成协作方。
返回内容对调用方是不透明文本；调用失败或返回空内容时记录 warning，
并以固定兜底文案返回（available=False），不向上抛出。
"""

import json
from collections.abc import Sequence
from datetime import date

import structlog
from eventdesk.core.config import DEFAULT_EVENT_DATE
from eventdesk.core.exceptions import UpstreamServiceError
from eventdesk.core.models import Category, Task
from eventdesk.provider import EchoMessageAdapter, FallbackManager, ProviderError
from pydantic import BaseModel, Field

log = structlog.get_logger()

INSIGHTS_FALLBACK_TEXT = "Failed to generate AI insights. Please check your API configuration."
REPORT_FALLBACK_TEXT = "Failed to generate weekly report."


class InsightResult(BaseModel):
    """生成结果"""

    text: str = Field(description="生成文本（Markdown），失败时为兜底文案")
    available: bool = Field(description="是否为真实生成结果")
    model_name: str = Field(default="", description="实际模型")
    is_fallback: bool = Field(default=False, description="是否经过降级")


def _to_json(items: Sequence[BaseModel]) -> str:
    return json.dumps(
        [item.model_dump(mode="json") for item in items],
        ensure_ascii=False,
        indent=2,
    )


def _format_deadline(event_date: date) -> str:
    return f"{event_date.day} {event_date.strftime('%B %Y')}"


class InsightService:
    """洞察生成服务"""

    def __init__(
        self,
        fallback_manager: FallbackManager | None = None,
        model_alias: str = "main",
        event_title: str = "IIT Madras Talk",
        event_date: date = DEFAULT_EVENT_DATE,
    ) -> None:
        """初始化

        Args:
            fallback_manager: 降级管理器，None 时使用离线 Echo 模式
            model_alias: Proxy 中的模型 group
            event_title: 活动名称（写入提示词）
            event_date: 活动日期（写入提示词）
        """
        self._fallback_manager = fallback_manager or FallbackManager(
            primary=EchoMessageAdapter(),
            fallback=None,
        )
        self._model_alias = model_alias
        self._event_title = event_title
        self._event_date = event_date

    def build_insights_prompt(
        self,
        categories: Sequence[Category],
        tasks: Sequence[Task],
    ) -> str:
        return (
            "Analyze this event management progress data and provide high-level "
            f'strategic insights for the "{self._event_title}" event.\n\n'
            f"Categories: {_to_json(categories)}\n"
            f"Tasks: {_to_json(tasks)}\n\n"
            "Please provide:\n"
            "1. A brief summary of overall progress.\n"
            "2. Identify specific categories or tasks at high risk.\n"
            "3. Suggest 3 actionable next steps to ensure the "
            f"{_format_deadline(self._event_date)} deadline is met.\n"
            "4. Detect potential bottlenecks (e.g., blocked tasks).\n\n"
            "Format the response in clear Markdown."
        )

    def build_report_prompt(self, categories: Sequence[Category]) -> str:
        return (
            "Generate a professional weekly progress report based on the following "
            f"category data for the {self._event_title} event management team.\n\n"
            f"Data: {_to_json(categories)}\n\n"
            "Format the report with sections:\n"
            "- Executive Summary\n"
            "- Phase-wise Status\n"
            "- Key Risks & Mitigations\n"
            "- Focus for Next Week"
        )

    async def generate_insights(
        self,
        categories: Sequence[Category],
        tasks: Sequence[Task],
    ) -> InsightResult:
        """进度洞察"""
        return await self._generate(
            "insights",
            self.build_insights_prompt(categories, tasks),
            INSIGHTS_FALLBACK_TEXT,
        )

    async def generate_weekly_report(self, categories: Sequence[Category]) -> InsightResult:
        """周报"""
        return await self._generate(
            "weekly_report",
            self.build_report_prompt(categories),
            REPORT_FALLBACK_TEXT,
        )

    async def _generate(self, kind: str, prompt: str, fallback_text: str) -> InsightResult:
        try:
            result = await self._call(prompt)
        except UpstreamServiceError as e:
            log.warning("insight_generation_failed", kind=kind, error=str(e))
            return InsightResult(text=fallback_text, available=False)

        log.info(
            "insight_generated",
            kind=kind,
            model_name=result.model_name,
            is_fallback=result.is_fallback,
            duration_ms=result.duration_ms,
        )
        return InsightResult(
            text=result.content,
            available=True,
            model_name=result.model_name,
            is_fallback=result.is_fallback,
        )

    async def _call(self, prompt: str):
        """调用文本生成协作方

        Raises:
            UpstreamServiceError: 调用失败或返回空内容
        """
        try:
            result = await self._fallback_manager.call_with_fallback(
                messages=[{"role": "user", "content": prompt}],
                model_alias=self._model_alias,
            )
        except ProviderError as e:
            raise UpstreamServiceError(str(e)) from e

        if not result.content.strip():
            raise UpstreamServiceError("text generation returned no content")
        return result
