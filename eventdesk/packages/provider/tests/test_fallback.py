"""FallbackManager 单元测试

验证 primary 成功不触发 fallback、primary 失败触发 fallback（is_fallback=True + fallback_reason）、
无 fallback 或双方失败时抛 ProviderError、每次调用都会重新尝试 primary。
"""

from unittest.mock import AsyncMock

import pytest
from eventdesk.provider.exceptions import ProviderError, ProxyUnreachableError
from eventdesk.provider.fallback import FallbackManager
from eventdesk.provider.models import ModelCallResult

MESSAGES = [{"role": "user", "content": "Analyze this event management progress data"}]


def _make_result(content: str = "ok") -> ModelCallResult:
    return ModelCallResult(
        content=content,
        model_alias="main",
        model_name="gpt-4o",
        provider="openai",
        duration_ms=100,
    )


def _unreachable() -> ProxyUnreachableError:
    return ProxyUnreachableError("http://localhost:4000", ConnectionError("refused"))


@pytest.fixture
def mock_primary():
    client = AsyncMock()
    client.complete = AsyncMock(return_value=_make_result("primary response"))
    return client


@pytest.fixture
def mock_fallback():
    adapter = AsyncMock()
    adapter.complete = AsyncMock(return_value=_make_result("Echo: fallback"))
    return adapter


class TestPrimarySuccess:
    async def test_primary_success_no_fallback(self, mock_primary, mock_fallback):
        fm = FallbackManager(primary=mock_primary, fallback=mock_fallback)

        result = await fm.call_with_fallback(MESSAGES, model_alias="main")

        assert result.content == "primary response"
        assert result.is_fallback is False
        mock_fallback.complete.assert_not_called()

    async def test_model_alias_passed_through(self, mock_primary):
        fm = FallbackManager(primary=mock_primary)

        await fm.call_with_fallback(MESSAGES, model_alias="cheap")

        assert mock_primary.complete.call_args.kwargs["model_alias"] == "cheap"

    def test_primary_property(self, mock_primary):
        assert FallbackManager(primary=mock_primary).primary is mock_primary


class TestPrimaryFailure:
    @pytest.mark.parametrize(
        "error",
        [_unreachable(), ProviderError("model unavailable"), RuntimeError("unexpected")],
    )
    async def test_failure_triggers_fallback(self, mock_primary, mock_fallback, error):
        mock_primary.complete.side_effect = error
        fm = FallbackManager(primary=mock_primary, fallback=mock_fallback)

        result = await fm.call_with_fallback(MESSAGES)

        assert result.is_fallback is True
        assert result.fallback_reason.startswith("Primary 失败")
        assert result.content == "Echo: fallback"

    async def test_no_fallback_configured(self, mock_primary):
        mock_primary.complete.side_effect = _unreachable()
        fm = FallbackManager(primary=mock_primary, fallback=None)

        with pytest.raises(ProviderError) as exc_info:
            await fm.call_with_fallback(MESSAGES)
        assert exc_info.value.recoverable is False

    async def test_both_fail(self, mock_primary, mock_fallback):
        mock_primary.complete.side_effect = _unreachable()
        mock_fallback.complete.side_effect = RuntimeError("echo also failed")
        fm = FallbackManager(primary=mock_primary, fallback=mock_fallback)

        with pytest.raises(ProviderError, match="echo also failed"):
            await fm.call_with_fallback(MESSAGES)

    async def test_primary_retried_on_next_call(self, mock_primary, mock_fallback):
        fm = FallbackManager(primary=mock_primary, fallback=mock_fallback)

        mock_primary.complete.side_effect = _unreachable()
        first = await fm.call_with_fallback(MESSAGES)
        assert first.is_fallback is True

        mock_primary.complete.side_effect = None
        mock_primary.complete.return_value = _make_result("recovered")
        second = await fm.call_with_fallback(MESSAGES)
        assert second.is_fallback is False
        assert second.content == "recovered"
