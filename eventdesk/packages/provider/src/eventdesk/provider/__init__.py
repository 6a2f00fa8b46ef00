"""EventDesk Provider -- 文本生成协作方抽象层

packages/provider 的公开接口导出。
"""

from .client import LiteLLMClient
from .config import ProviderConfig, load_provider_config
from .echo_adapter import EchoMessageAdapter
from .exceptions import ProviderError, ProxyUnreachableError
from .fallback import FallbackManager
from .models import ModelCallResult, TokenUsage

__all__ = [
    "ModelCallResult",
    "TokenUsage",
    "LiteLLMClient",
    "FallbackManager",
    "EchoMessageAdapter",
    "ProviderConfig",
    "load_provider_config",
    "ProviderError",
    "ProxyUnreachableError",
]
