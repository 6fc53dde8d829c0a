"""Claude API wrapper implementing the pipeline's model capability."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Sequence

import anthropic
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from candidate_ingest.clients.base import PromptPart

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


def to_content_block(part: PromptPart) -> dict:
    """Convert one prompt part into an Anthropic message content block."""
    if isinstance(part, str):
        return {"type": "text", "text": part}

    b64_data = base64.b64encode(part.data).decode("utf-8")
    block_type = "image" if part.media_type.startswith("image/") else "document"
    return {
        "type": block_type,
        "source": {
            "type": "base64",
            "media_type": part.media_type,
            "data": b64_data,
        },
    }


class LLMClient:
    """Async Claude API client with exponential-backoff retries."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        *,
        model: str = DEFAULT_MODEL,
        max_retries: int = 3,
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.model = model
        self.max_retries = max_retries
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    async def _call_api(self, content: list[dict]) -> anthropic.types.Message:
        """Make the actual API call with retry logic."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(min=1, max=10),
            reraise=True,
        ):
            with attempt:
                return await self.client.messages.create(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    messages=[{"role": "user", "content": content}],
                )

    async def generate(self, prompt_parts: Sequence[PromptPart]) -> LLMResponse:
        """Send prompt parts to Claude and return the text response with usage."""
        content = [to_content_block(part) for part in prompt_parts]
        logger.debug("LLM call: model=%s, parts=%d", self.model, len(content))
        try:
            message = await self._call_api(content)
        except Exception:
            logger.error("LLM call failed", exc_info=True)
            raise
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((self.model, input_tokens, output_tokens))
        return LLMResponse(
            text=message.content[0].text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    async def call(self, prompt_parts: Sequence[PromptPart]) -> str:
        """ModelCaller entry point: return only the response text."""
        response = await self.generate(prompt_parts)
        return response.text

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
