"""LLM provider abstraction and result interpretation.

Supports OpenAI (JSON mode) and Anthropic, with a fixed fallback
interpretation when neither is available.
"""

from stat_analyzer.llm.interpretation import (
    Interpretation,
    InterpretationService,
    fallback_interpretation,
)
from stat_analyzer.llm.providers import (
    AnthropicProvider,
    LLMProvider,
    OpenAIProvider,
    ProviderError,
    get_provider,
)

__all__ = [
    "AnthropicProvider",
    "Interpretation",
    "InterpretationService",
    "LLMProvider",
    "OpenAIProvider",
    "ProviderError",
    "fallback_interpretation",
    "get_provider",
]
