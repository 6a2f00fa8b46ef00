"""文本生成协作方异常

InsightService 在边界处统一捕获 ProviderError，转换为兜底文案。
"""


class ProviderError(Exception):
    """文本生成调用失败

    recoverable=False 表示已无降级路径（无 fallback 或 fallback 也失败）。
    """

    def __init__(self, message: str, recoverable: bool = True) -> None:
        super().__init__(message)
        self.recoverable = recoverable


class ProxyUnreachableError(ProviderError):
    """LiteLLM Proxy 连接失败或超时"""

    def __init__(self, proxy_url: str, original_error: Exception) -> None:
        super().__init__(f"proxy unreachable at {proxy_url}: {original_error}")
        self.proxy_url = proxy_url
        self.original_error = original_error
