"""ProviderConfig 环境变量加载测试"""

import pytest
from eventdesk.provider.config import ProviderConfig, load_provider_config
from pydantic import ValidationError

_ENV_VARS = (
    "LITELLM_PROXY_URL",
    "LITELLM_PROXY_KEY",
    "EVENTDESK_LLM_MODE",
    "EVENTDESK_LLM_TIMEOUT_S",
    "EVENTDESK_LLM_MODEL_ALIAS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadProviderConfig:
    def test_defaults(self):
        config = load_provider_config()

        assert config.llm_mode == "echo"
        assert config.proxy_base_url == "http://localhost:4000"
        assert config.proxy_api_key.get_secret_value() == ""
        assert config.timeout_s == 30
        assert config.model_alias == "main"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("LITELLM_PROXY_URL", "http://proxy:4000")
        monkeypatch.setenv("LITELLM_PROXY_KEY", "sk-proxy")
        monkeypatch.setenv("EVENTDESK_LLM_MODE", "litellm")
        monkeypatch.setenv("EVENTDESK_LLM_TIMEOUT_S", "60")
        monkeypatch.setenv("EVENTDESK_LLM_MODEL_ALIAS", "cheap")

        config = load_provider_config()

        assert config.proxy_base_url == "http://proxy:4000"
        assert config.proxy_api_key.get_secret_value() == "sk-proxy"
        assert config.llm_mode == "litellm"
        assert config.timeout_s == 60
        assert config.model_alias == "cheap"

    def test_invalid_timeout_falls_back(self, monkeypatch):
        monkeypatch.setenv("EVENTDESK_LLM_TIMEOUT_S", "soon")

        assert load_provider_config().timeout_s == 30

    def test_secret_not_in_repr(self, monkeypatch):
        monkeypatch.setenv("LITELLM_PROXY_KEY", "sk-proxy")

        assert "sk-proxy" not in repr(load_provider_config())

    def test_unknown_mode_rejected(self, monkeypatch):
        monkeypatch.setenv("EVENTDESK_LLM_MODE", "gpt")

        with pytest.raises(ValidationError):
            load_provider_config()

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ProviderConfig(timeout_s=0)
