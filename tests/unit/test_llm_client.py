"""Tests for LLM client multi-provider support."""
import pytest

from myday.core.llm.client import LLMClient
from myday.utils.exceptions import LLMError


class _RecordingProvider:
    def __init__(self, reply="ok", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, system, user, model, max_tokens):
        self.calls.append({"system": system, "user": user, "model": model, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return self.reply


class TestLLMClientProviderSelection:
    """Verify that LLMClient correctly instantiates different providers."""

    def test_anthropic_requires_key(self):
        with pytest.raises(LLMError, match="API key is required"):
            LLMClient("anthropic", "", "claude-sonnet-4-20250514")

    def test_anthropic_provider(self):
        from myday.core.llm.providers.anthropic_provider import AnthropicProvider

        client = LLMClient("anthropic", "test-key", "claude-sonnet-4-20250514")
        assert isinstance(client.backend, AnthropicProvider)

    @pytest.mark.parametrize("provider", ["openai", "siliconflow", "deepseek"])
    def test_hosted_compatible_providers_require_key(self, provider):
        with pytest.raises(LLMError, match="API key is required"):
            LLMClient(provider, "", "some-model")

    def test_siliconflow_provider(self):
        client = LLMClient("siliconflow", "test-key", "Qwen/Qwen2.5-VL-72B-Instruct")
        assert client.provider == "siliconflow"
        assert str(client.backend.client.base_url).startswith(
            "https://api.siliconflow.cn/v1"
        )

    def test_ollama_without_key(self):
        """Ollama runs locally and does not need a key."""
        client = LLMClient("ollama", "", "llama3")
        assert client.provider == "ollama"
        assert client.backend is not None

    def test_openai_compatible_with_base_url(self):
        client = LLMClient(
            "openai_compatible", "test-key", "my-model",
            base_url="http://my-server:8080/v1",
        )
        assert client.provider == "openai_compatible"

    def test_openai_compatible_without_base_url_raises(self):
        with pytest.raises(LLMError, match="base_url is required"):
            LLMClient("openai_compatible", "test-key", "my-model")

    def test_unknown_provider_raises(self):
        with pytest.raises(LLMError, match="Unknown provider"):
            LLMClient("nonexistent", "key", "model")

    def test_custom_base_url_override(self):
        custom_url = "http://my-proxy:9090/v1"
        client = LLMClient("deepseek", "test-key", "deepseek-chat", base_url=custom_url)
        assert str(client.backend.client.base_url).startswith(custom_url)

    def test_sdk_retries_disabled(self):
        client = LLMClient("openai", "test-key", "gpt-4o", timeout=5.0)
        assert client.backend.client.max_retries == 0


class TestLLMClientComplete:
    @pytest.mark.asyncio
    async def test_default_model_used(self):
        client = LLMClient("openai", "test-key", "default-model")
        provider = _RecordingProvider(reply="hello")
        client.backend = provider

        assert await client.complete("sys", "user") == "hello"
        assert provider.calls[0]["model"] == "default-model"
        assert provider.calls[0]["max_tokens"] == 4096

    @pytest.mark.asyncio
    async def test_model_override(self):
        client = LLMClient("openai", "test-key", "default-model")
        provider = _RecordingProvider()
        client.backend = provider

        await client.complete("sys", "user", model="other-model", max_tokens=512)
        assert provider.calls[0]["model"] == "other-model"
        assert provider.calls[0]["max_tokens"] == 512

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self):
        client = LLMClient("openai", "test-key", "default-model")
        client.backend = _RecordingProvider(error=RuntimeError("connection reset"))

        with pytest.raises(LLMError, match="connection reset") as exc_info:
            await client.complete("sys", "user")
        assert exc_info.value.provider == "openai"

    @pytest.mark.asyncio
    async def test_llm_error_passes_through(self):
        client = LLMClient("openai", "test-key", "default-model")
        original = LLMError("openai", "timed out")
        client.backend = _RecordingProvider(error=original)

        with pytest.raises(LLMError) as exc_info:
            await client.complete("sys", "user")
        assert exc_info.value is original
