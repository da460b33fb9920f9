"""LLM provider implementations.

Provides a unified interface for OpenAI and Anthropic so the interpretation
service doesn't need to know which backend is in use.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import anthropic
import openai

if TYPE_CHECKING:
    from stat_analyzer.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.3


class ProviderError(RuntimeError):
    """A provider call failed; the message is safe to show to users."""


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    name: str = "llm"

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Return the model's reply to a single prompt as JSON text."""
        ...  # pragma: no cover


class OpenAIProvider(LLMProvider):
    """Provider using the OpenAI chat completions API in JSON mode."""

    name = "openai"

    def __init__(self, api_key: str, model: str) -> None:
        self.client = openai.AsyncOpenAI(api_key=api_key)
        self.model = model

    @staticmethod
    def _friendly_error(exc: openai.APIError) -> str:
        """Return a user-facing error message for common OpenAI errors."""
        status = getattr(exc, "status_code", None)
        if status == 401:
            return "Your OpenAI API key is invalid or expired."
        if status == 429:
            return "You've hit the OpenAI rate limit. Please wait a moment and try again."
        return f"API error: {exc}"

    async def complete(
        self,
        system_prompt: str,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIError as e:
            raise ProviderError(self._friendly_error(e)) from e

        return response.choices[0].message.content or ""


class AnthropicProvider(LLMProvider):
    """Provider using the Anthropic API directly."""

    name = "anthropic"

    def __init__(self, api_key: str, model: str) -> None:
        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model

    @staticmethod
    def _friendly_anthropic_error(exc: anthropic.APIError) -> str:
        """Return a user-facing error message for common Anthropic errors."""
        status = getattr(exc, "status_code", None)
        if status == 401:
            return (
                "Your Anthropic API key is invalid or expired. "
                "Please check your key at console.anthropic.com/settings/keys."
            )
        if status == 429:
            return (
                "You've hit the Anthropic rate limit. "
                "Please wait a moment and try again."
            )
        if status == 529:
            return (
                "The Anthropic API is temporarily overloaded. "
                "Please try again in a few moments."
            )
        return f"API error: {exc.message}"

    async def complete(
        self,
        system_prompt: str,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=f"{system_prompt} Respond with a single JSON object only.",
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise ProviderError(self._friendly_anthropic_error(e)) from e

        text = ""
        for block in response.content:
            if hasattr(block, "text"):
                text += block.text
        return text


def get_provider(settings: Settings) -> LLMProvider:
    """Create the appropriate LLM provider based on available credentials.

    Priority: OpenAI key → Anthropic key.

    Raises:
        ValueError: If no key is configured
    """
    if settings.openai_api_key:
        return OpenAIProvider(settings.openai_api_key, settings.openai_model)
    if settings.anthropic_api_key:
        return AnthropicProvider(settings.anthropic_api_key, settings.anthropic_model)
    raise ValueError("No LLM provider configured")
