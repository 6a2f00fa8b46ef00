"""FallbackManager -- 降级管理器

每次调用先尝试 primary，失败则切换到 fallback（若配置）。
不维护显式的"降级状态"标记。
"""

import structlog

from .exceptions import ProviderError
from .models import ModelCallResult

log = structlog.get_logger()


class FallbackManager:
    """降级管理器

    primary / fallback 均需实现 complete(messages, model_alias, **kwargs)。
    fallback 为 None 时 primary 的失败直接以 ProviderError 抛出，
    由上层服务转换为用户可见的兜底文案。
    """

    def __init__(self, primary, fallback=None) -> None:
        self._primary = primary
        self._fallback = fallback

    @property
    def primary(self):
        return self._primary

    async def call_with_fallback(
        self,
        messages: list[dict[str, str]],
        model_alias: str = "main",
        **kwargs,
    ) -> ModelCallResult:
        """带降级的调用

        Returns:
            - primary 成功: is_fallback=False
            - fallback 成功: is_fallback=True, fallback_reason=<primary 错误描述>

        Raises:
            ProviderError: primary 失败且无 fallback，或两者均失败
        """
        try:
            return await self._primary.complete(
                messages=messages,
                model_alias=model_alias,
                **kwargs,
            )
        except Exception as e:
            primary_error = e
            log.warning(
                "primary_failed_attempting_fallback",
                error=str(e),
                model_alias=model_alias,
                has_fallback=self._fallback is not None,
            )

        if self._fallback is None:
            raise ProviderError(
                f"Primary 调用失败且无 fallback 配置: {primary_error}",
                recoverable=False,
            ) from primary_error

        try:
            result = await self._fallback.complete(
                messages=messages,
                model_alias=model_alias,
            )
        except Exception as fallback_error:
            log.error(
                "both_primary_and_fallback_failed",
                primary_error=str(primary_error),
                fallback_error=str(fallback_error),
            )
            raise ProviderError(
                f"Primary 和 Fallback 均失败。Primary: {primary_error}; "
                f"Fallback: {fallback_error}",
                recoverable=False,
            ) from fallback_error

        log.info(
            "fallback_activated",
            fallback_reason=str(primary_error),
            model_alias=model_alias,
        )
        return result.model_copy(
            update={
                "is_fallback": True,
                "fallback_reason": f"Primary 失败: {primary_error}",
            }
        )
