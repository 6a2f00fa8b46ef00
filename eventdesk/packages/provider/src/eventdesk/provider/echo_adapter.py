"""EchoMessageAdapter -- 离线模式

不访问任何外部服务，直接回显最后一条 user message（截断到固定长度），
用于本地开发和测试；接口与 LiteLLMClient.complete() 一致。
"""

import time

from .models import ModelCallResult, TokenUsage

# 回显内容最大字符数（提示词中含完整 JSON 数据，避免整段回显）
ECHO_MAX_CHARS = 500


class EchoMessageAdapter:
    """离线回显适配器"""

    def __init__(self, max_chars: int = ECHO_MAX_CHARS) -> None:
        self._max_chars = max_chars

    async def complete(
        self,
        messages: list[dict[str, str]],
        model_alias: str = "echo",
        **kwargs,
    ) -> ModelCallResult:
        """返回 "Echo: {content}"，content 超长时截断并以 "..." 结尾"""
        start_time = time.monotonic()

        user_content = self._extract_last_user_content(messages).strip()
        if len(user_content) > self._max_chars:
            user_content = user_content[: self._max_chars].rstrip() + "..."
        response_text = f"Echo: {user_content}"

        # 按 word 简单估算 token
        prompt_tokens = sum(len(m.get("content", "").split()) for m in messages)
        completion_tokens = len(response_text.split())

        return ModelCallResult(
            content=response_text,
            model_alias=model_alias,
            model_name="echo",
            provider="echo",
            duration_ms=int((time.monotonic() - start_time) * 1000),
            token_usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )

    @staticmethod
    def _extract_last_user_content(messages: list[dict[str, str]]) -> str:
        """最后一条 user message 的 content，无 user 消息时退回最后一条消息"""
        for msg in reversed(messages):
            if msg.get("role") == "user":
                return msg.get("content", "")
        if messages:
            return messages[-1].get("content", "(empty)")
        return "(empty)"
