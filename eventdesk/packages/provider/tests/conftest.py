"""Provider 包测试 fixtures"""

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def report_messages() -> list[dict[str, str]]:
    """周报提示词形态的 messages"""
    return [
        {
            "role": "user",
            "content": "Generate a professional weekly progress report. Data: []",
        }
    ]


@pytest.fixture
def make_litellm_response():
    """构造 Mock 的 litellm.acompletion 返回"""

    def _make(
        content: str | None = "## Executive Summary",
        model: str = "gpt-4o-mini",
        usage: tuple[int, int, int] | None = (120, 80, 200),
        provider: str = "openai",
    ):
        response = MagicMock()
        response.model = model

        choice = MagicMock()
        choice.message.content = content
        response.choices = [choice]

        if usage is None:
            response.usage = None
        else:
            response.usage = MagicMock(
                prompt_tokens=usage[0],
                completion_tokens=usage[1],
                total_tokens=usage[2],
            )
        response._hidden_params = {"custom_llm_provider": provider}
        return response

    return _make
