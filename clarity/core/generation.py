"""Anthropic-backed generation client for Ask AI.

The client never retries; the SDK's own retries are disabled too. The whole call
is bounded by a single timeout, and a timeout is reported as ``GenerationError``.
"""

import asyncio
import base64
import time
from collections.abc import Callable
from typing import Any

import anthropic

from clarity.core.config import Settings
from clarity.core.errors import ConfigurationError, GenerationError
from clarity.core.logging import get_logger
from clarity.core.schemas_ask import ImagePart, PromptPart, TextPart

logger = get_logger(__name__)

# Image formats accepted by the Messages API
SUPPORTED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}

UsageRecorder = Callable[..., None]


def to_content_blocks(parts: list[PromptPart]) -> list[dict[str, Any]]:
    """Convert prompt parts to Messages API content blocks, preserving order."""
    blocks: list[dict[str, Any]] = []
    for part in parts:
        if isinstance(part, TextPart):
            blocks.append({"type": "text", "text": part.text})
        elif isinstance(part, ImagePart):
            if part.mime_type not in SUPPORTED_IMAGE_TYPES:
                logger.warning(f"Dropping image part with unsupported type {part.mime_type}")
                continue
            blocks.append({
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": part.mime_type,
                    "data": base64.standard_b64encode(part.data).decode("utf-8"),
                },
            })
    return blocks


class GenerationClient:
    """Sends an ordered list of prompt parts to Claude and returns the answer text."""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        max_tokens: int = 2048,
        temperature: float = 0.2,
        timeout_seconds: float = 120.0,
        usage_recorder: UsageRecorder | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds
        self.usage_recorder = usage_recorder
        self._client: anthropic.AsyncAnthropic | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationClient":
        from clarity.core.llm_usage import record_llm_usage

        return cls(
            api_key=settings.ANTHROPIC_API_KEY,
            model=settings.ASK_MODEL,
            max_tokens=settings.ASK_MAX_TOKENS,
            temperature=settings.ASK_TEMPERATURE,
            timeout_seconds=settings.GENERATION_TIMEOUT_SECONDS,
            usage_recorder=record_llm_usage,
        )

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if not self.api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY is not configured")
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key, max_retries=0)
        return self._client

    async def generate(self, parts: list[PromptPart], company_id: str | None = None) -> str:
        """
        Run one generation call.

        Args:
            parts: Ordered text and image parts
            company_id: Used only for usage tracking

        Returns:
            Answer text

        Raises:
            ConfigurationError: No credential, or the provider rejected it
            GenerationError: Timeout, provider error or empty response
        """
        client = self._get_client()
        content = to_content_blocks(parts)

        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                client.messages.create(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    messages=[{"role": "user", "content": content}],
                ),
                timeout=self.timeout_seconds,
            )
        except (asyncio.TimeoutError, anthropic.APITimeoutError) as e:
            raise GenerationError(f"Generation timed out after {self.timeout_seconds}s") from e
        except anthropic.AuthenticationError as e:
            raise ConfigurationError(f"Anthropic rejected the configured API key: {e}") from e
        except anthropic.APIError as e:
            raise GenerationError(f"Anthropic API error: {e}") from e

        duration_ms = int((time.monotonic() - start) * 1000)

        answer = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        ).strip()
        if not answer:
            raise GenerationError("Model returned an empty response")

        usage = getattr(response, "usage", None)
        if usage is not None and self.usage_recorder is not None:
            await asyncio.to_thread(
                self.usage_recorder,
                workflow="ask_ai",
                model=self.model,
                tokens_input=usage.input_tokens,
                tokens_output=usage.output_tokens,
                duration_ms=duration_ms,
                company_id=company_id,
            )

        return answer
