"""ProviderConfig -- 文本生成协作方配置加载

从环境变量加载配置，不硬编码 provider/模型名。
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()


class ProviderConfig(BaseModel):
    """Provider 包配置 -- 从环境变量加载

    环境变量:
        LITELLM_PROXY_URL: Proxy 地址（默认 http://localhost:4000）
        LITELLM_PROXY_KEY: Proxy 访问密钥
        EVENTDESK_LLM_MODE: 运行模式（litellm/echo，默认 echo）
        EVENTDESK_LLM_TIMEOUT_S: 调用超时（秒，默认 30）
        EVENTDESK_LLM_MODEL_ALIAS: Proxy 中的模型 group（默认 main）
    """

    proxy_base_url: str = Field(
        default="http://localhost:4000",
        description="LiteLLM Proxy 基础 URL",
    )
    proxy_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Proxy 访问密钥（不是 LLM provider API key）",
    )
    llm_mode: Literal["litellm", "echo"] = Field(
        default="echo",
        description="运行模式：litellm / echo",
    )
    timeout_s: int = Field(
        default=30,
        ge=1,
        description="调用超时（秒）",
    )
    model_alias: str = Field(
        default="main",
        min_length=1,
        description="Proxy 中配置的模型 group 名称",
    )


def load_provider_config() -> ProviderConfig:
    """从环境变量加载 Provider 配置

    非法的超时值记录 warning 并使用默认值，不阻塞启动。

    Returns:
        ProviderConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("LITELLM_PROXY_URL"):
        kwargs["proxy_base_url"] = val

    if val := os.environ.get("LITELLM_PROXY_KEY"):
        kwargs["proxy_api_key"] = SecretStr(val)

    if val := os.environ.get("EVENTDESK_LLM_MODE"):
        kwargs["llm_mode"] = val

    if val := os.environ.get("EVENTDESK_LLM_MODEL_ALIAS"):
        kwargs["model_alias"] = val

    if val := os.environ.get("EVENTDESK_LLM_TIMEOUT_S"):
        try:
            kwargs["timeout_s"] = int(val)
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="EVENTDESK_LLM_TIMEOUT_S",
                value=val,
                fallback=30,
            )

    return ProviderConfig(**kwargs)
