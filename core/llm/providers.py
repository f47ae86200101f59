"""LLM provider clients behind a single completion call."""

import logging
from dataclasses import dataclass
from typing import Optional

import anthropic
import openai

from core.errors import ProviderError

from .catalog import ANTHROPIC, OPENAI

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMRequest:
    """A single-turn completion request."""

    model_id: str
    system_instruction: str
    max_output_tokens: int
    user_content: str


class LLMProvider:
    """Base class for providers; returns the model's free text reply."""

    name = ""

    async def complete(self, request: LLMRequest) -> str:
        raise NotImplementedError


class AnthropicProvider(LLMProvider):
    """Anthropic messages API."""

    name = ANTHROPIC

    def __init__(self, api_key: str, timeout: float = 120.0):
        self.api_key = api_key
        self.timeout = timeout
        self._client: Optional[anthropic.AsyncAnthropic] = None

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        """Get or create the Anthropic client."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def complete(self, request: LLMRequest) -> str:
        logger.info(f"Sending request to Anthropic ({request.model_id})")
        try:
            response = await self.client.messages.create(
                model=request.model_id,
                max_tokens=request.max_output_tokens,
                system=request.system_instruction,
                messages=[{"role": "user", "content": request.user_content}],
            )
        except anthropic.AnthropicError as e:
            logger.error(f"Anthropic request failed: {e}")
            raise ProviderError(f"Anthropic request failed: {e}", provider=self.name) from e

        for block in response.content or []:
            if getattr(block, "type", None) == "text":
                logger.info("Received response from Anthropic")
                return block.text

        raise ProviderError("Anthropic response contained no text content", provider=self.name)


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions API."""

    name = OPENAI

    def __init__(self, api_key: str, timeout: float = 120.0):
        self.api_key = api_key
        self.timeout = timeout
        self._client: Optional[openai.AsyncOpenAI] = None

    @property
    def client(self) -> openai.AsyncOpenAI:
        """Get or create the OpenAI client."""
        if self._client is None:
            self._client = openai.AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def complete(self, request: LLMRequest) -> str:
        logger.info(f"Sending request to OpenAI ({request.model_id})")
        try:
            response = await self.client.chat.completions.create(
                model=request.model_id,
                max_tokens=request.max_output_tokens,
                messages=[
                    {"role": "system", "content": request.system_instruction},
                    {"role": "user", "content": request.user_content},
                ],
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenAI request failed: {e}")
            raise ProviderError(f"OpenAI request failed: {e}", provider=self.name) from e

        if not response.choices or not response.choices[0].message.content:
            raise ProviderError("OpenAI response contained no text content", provider=self.name)

        logger.info("Received response from OpenAI")
        return response.choices[0].message.content


PROVIDER_CLASSES = {
    ANTHROPIC: AnthropicProvider,
    OPENAI: OpenAIProvider,
}
