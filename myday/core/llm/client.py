"""Chat-completion client used by the assistant.

:class:`LLMClient` hides which vendor answers a prompt.  Two backend
families exist:

* ``anthropic`` talks to the Claude Messages API.
* Everything else speaks the OpenAI ``/chat/completions`` dialect: the
  hosted services in :data:`COMPATIBLE_ENDPOINTS`, a local Ollama, or any
  server named with ``openai_compatible`` plus an explicit base URL.

A call is made once with the configured timeout.  Whatever goes wrong
reaches the caller as :class:`~myday.utils.exceptions.LLMError`, which the
chat service turns into a fallback reply.
"""

from __future__ import annotations

from myday.utils.exceptions import LLMError
from myday.utils.logging import get_logger

logger = get_logger("llm.client")

COMPATIBLE_ENDPOINTS: dict[str, str] = {
    "siliconflow": "https://api.siliconflow.cn/v1",
    "openai": "https://api.openai.com/v1",
    "deepseek": "https://api.deepseek.com",
    "moonshot": "https://api.moonshot.cn/v1",
    "zhipu": "https://open.bigmodel.cn/api/paas/v4",
    "ollama": "http://localhost:11434/v1",
}

CUSTOM_ENDPOINT = "openai_compatible"

# No key needed.
LOCAL_PROVIDERS: frozenset[str] = frozenset({"ollama"})


class LLMClient:
    """Sends ``(system, user)`` prompt pairs to the configured model.

    Parameters
    ----------
    provider:
        ``"anthropic"``, ``"openai_compatible"`` or a key of
        :data:`COMPATIBLE_ENDPOINTS`.
    api_key:
        Credential for *provider*; may be empty for local providers.
    model:
        Default model name, e.g. ``"Qwen/Qwen2.5-VL-72B-Instruct"``.
    base_url:
        Endpoint override.  Mandatory for ``openai_compatible``.
    timeout:
        Seconds before the SDK abandons a request.
    temperature:
        Sampling temperature for every call.
    """

    def __init__(
        self,
        provider: str,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout: float = 60.0,
        temperature: float = 0.7,
    ):
        self.provider = provider
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.backend = self._make_backend(api_key, base_url)

    def _make_backend(self, api_key: str, base_url: str | None):
        if self.provider == "anthropic":
            from myday.core.llm.providers.anthropic_provider import AnthropicProvider

            return AnthropicProvider(api_key, timeout=self.timeout, temperature=self.temperature)

        if self.provider != CUSTOM_ENDPOINT and self.provider not in COMPATIBLE_ENDPOINTS:
            supported = ", ".join(["anthropic", *COMPATIBLE_ENDPOINTS, CUSTOM_ENDPOINT])
            raise LLMError(self.provider, f"Unknown provider: {self.provider}. Supported: {supported}")

        endpoint = base_url or COMPATIBLE_ENDPOINTS.get(self.provider)
        if not endpoint:
            raise LLMError(
                self.provider,
                "base_url is required for a custom OpenAI-compatible endpoint; set LLM_BASE_URL.",
            )

        from myday.core.llm.providers.openai_compatible_provider import OpenAICompatibleProvider

        return OpenAICompatibleProvider(
            api_key=api_key,
            base_url=endpoint,
            provider_name=self.provider,
            timeout=self.timeout,
            temperature=self.temperature,
            require_key=self.provider not in LOCAL_PROVIDERS,
        )

    async def complete(
        self,
        system: str,
        user: str,
        model: str | None = None,
        max_tokens: int = 4096,
    ) -> str:
        """Return the model's reply text.

        *model* replaces the default model for this call only.
        """
        model = model or self.model
        logger.info("llm_request", provider=self.provider, model=model, max_tokens=max_tokens)
        try:
            text = await self.backend.complete(system, user, model=model, max_tokens=max_tokens)
        except LLMError:
            raise
        except Exception as exc:
            logger.error("llm_request_failed", provider=self.provider, error=str(exc))
            raise LLMError(self.provider, str(exc)) from exc

        logger.info("llm_reply", provider=self.provider, chars=len(text))
        return text
