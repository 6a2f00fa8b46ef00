"""EchoMessageAdapter 单元测试"""

import pytest
from eventdesk.provider.echo_adapter import ECHO_MAX_CHARS, EchoMessageAdapter
from eventdesk.provider.models import ModelCallResult


@pytest.fixture
def adapter():
    return EchoMessageAdapter()


class TestEchoMessageAdapter:
    async def test_echoes_last_user_message(self, adapter):
        messages = [
            {"role": "user", "content": "First prompt"},
            {"role": "assistant", "content": "First answer"},
            {"role": "user", "content": "Weekly report please"},
        ]
        result = await adapter.complete(messages)

        assert isinstance(result, ModelCallResult)
        assert result.content == "Echo: Weekly report please"
        assert result.provider == "echo"
        assert result.model_name == "echo"
        assert result.is_fallback is False

    async def test_long_prompt_truncated(self, adapter):
        """带完整 JSON 数据的提示词不整段回显"""
        prompt = "x" * (ECHO_MAX_CHARS * 3)
        result = await adapter.complete([{"role": "user", "content": prompt}])

        assert result.content.endswith("...")
        assert len(result.content) == len("Echo: ") + ECHO_MAX_CHARS + len("...")

    async def test_custom_limit(self):
        result = await EchoMessageAdapter(max_chars=5).complete(
            [{"role": "user", "content": "Executive Summary"}]
        )
        assert result.content == "Echo: Execu..."

    async def test_model_alias_passed_through(self, adapter):
        result = await adapter.complete([{"role": "user", "content": "hi"}], model_alias="main")
        assert result.model_alias == "main"

    async def test_token_usage_estimated(self, adapter):
        result = await adapter.complete([{"role": "user", "content": "three word prompt"}])

        assert result.token_usage.prompt_tokens == 3
        assert result.token_usage.total_tokens == (
            result.token_usage.prompt_tokens + result.token_usage.completion_tokens
        )

    async def test_empty_messages(self, adapter):
        result = await adapter.complete([])
        assert result.content == "Echo: (empty)"

    async def test_no_user_message_uses_last(self, adapter):
        result = await adapter.complete([{"role": "system", "content": "system prompt"}])
        assert result.content == "Echo: system prompt"
