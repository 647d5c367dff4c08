"""Backend for servers that speak the OpenAI chat-completions dialect.

SiliconFlow (the default), OpenAI, DeepSeek, Moonshot, Zhipu and a local
Ollama all accept the same request shape, so one backend covers them.
"""

from __future__ import annotations

import openai

from myday.utils.exceptions import LLMError
from myday.utils.logging import get_logger

logger = get_logger("llm.openai_compatible")

# Placeholder for servers that ignore the key; the SDK rejects an empty one.
_UNUSED_KEY = "none"


class OpenAICompatibleProvider:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        provider_name: str = "openai_compatible",
        timeout: float = 60.0,
        temperature: float = 0.7,
        require_key: bool = True,
    ):
        if not base_url:
            raise LLMError(provider_name, "base_url is required but was empty.")
        if require_key and not api_key:
            raise LLMError(provider_name, "API key is required but was empty.")

        self.provider_name = provider_name
        self.temperature = temperature
        self.client = openai.AsyncOpenAI(
            api_key=api_key or _UNUSED_KEY,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    async def complete(self, system: str, user: str, model: str, max_tokens: int) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                max_tokens=max_tokens,
                temperature=self.temperature,
            )
        except openai.OpenAIError as exc:
            logger.error("chat_completion_failed", provider=self.provider_name, error=str(exc))
            raise LLMError(self.provider_name, str(exc)) from exc

        if not response.choices:
            raise LLMError(self.provider_name, "Response contained no choices.")
        return response.choices[0].message.content or ""
