"""Backend for Anthropic's Messages API."""

from __future__ import annotations

import anthropic

from myday.utils.exceptions import LLMError
from myday.utils.logging import get_logger

logger = get_logger("llm.anthropic")


class AnthropicProvider:
    def __init__(self, api_key: str, timeout: float = 60.0, temperature: float = 0.7):
        if not api_key:
            raise LLMError("anthropic", "API key is required but was empty.")
        self.temperature = temperature
        self.client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)

    async def complete(self, system: str, user: str, model: str, max_tokens: int) -> str:
        """Return the text blocks of Claude's reply joined together."""
        try:
            message = await self.client.messages.create(
                model=model,
                system=system,
                messages=[{"role": "user", "content": user}],
                max_tokens=max_tokens,
                temperature=self.temperature,
            )
        except anthropic.AnthropicError as exc:
            logger.error("messages_request_failed", error=str(exc))
            raise LLMError("anthropic", str(exc)) from exc

        return "".join(block.text for block in message.content if block.type == "text")
