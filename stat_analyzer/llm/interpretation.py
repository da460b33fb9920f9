"""Narrative interpretation of statistical results.

The service asks an LLM provider for a structured JSON interpretation of
``StatisticalResults.to_dict()``. Whenever the provider is missing, fails, or
returns something that is not a JSON object, a fixed fallback
interpretation is returned instead, so an analysis never fails because of
the interpretation step.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

from stat_analyzer.llm.providers import LLMProvider, ProviderError

if TYPE_CHECKING:
    from stat_analyzer.analysis.engine import StatisticalResults

logger = logging.getLogger(__name__)

INTERPRETATION_SYSTEM_PROMPT = (
    "You are a professional statistician and data scientist with expertise in "
    "statistical analysis interpretation. Provide comprehensive, accurate, and "
    "professional interpretations of statistical results equivalent to those "
    "found in academic research papers and professional statistical software output."
)

INSIGHTS_SYSTEM_PROMPT = (
    "You are a data analyst. Generate insights about the uploaded dataset "
    "based on its structure and preview."
)

RESPONSE_SCHEMA = """{
  "executiveSummary": "Brief summary of the overall findings",
  "keyFindings": ["Finding 1", "Finding 2"],
  "statisticalSignificance": "Discussion of statistical significance of results",
  "practicalImplications": "What these results mean in practical terms",
  "limitations": "Limitations and assumptions of the analysis",
  "recommendations": ["Recommendation 1", "Recommendation 2"],
  "methodology": "Summary of statistical methods used"
}"""

FALLBACK_INSIGHT = (
    "Dataset uploaded successfully. Statistical analysis will provide detailed insights."
)
EMPTY_INSIGHT = "Dataset successfully processed and ready for analysis."


@dataclass
class Interpretation:
    """Structured narrative for a report."""

    executive_summary: str
    key_findings: list[str] = field(default_factory=list)
    statistical_significance: str = ""
    practical_implications: str = ""
    limitations: str = ""
    recommendations: list[str] = field(default_factory=list)
    methodology: str = ""
    is_fallback: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Interpretation:
        """Build from a stored dictionary, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    @classmethod
    def from_llm_json(cls, data: dict[str, Any]) -> Interpretation:
        """Build from the model's camelCase reply, filling missing fields."""
        return cls(
            executive_summary=data.get("executiveSummary")
            or "Statistical analysis completed successfully.",
            key_findings=_string_list(data.get("keyFindings")),
            statistical_significance=data.get("statisticalSignificance")
            or "Analysis shows mixed statistical significance across variables.",
            practical_implications=data.get("practicalImplications")
            or "Results suggest practical implications for the research domain.",
            limitations=data.get("limitations")
            or "Standard statistical assumptions and limitations apply.",
            recommendations=_string_list(data.get("recommendations")),
            methodology=data.get("methodology")
            or "Standard statistical analysis methods were applied.",
        )


def _string_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(item) for item in value]
    if isinstance(value, str) and value:
        return [value]
    return []


def fallback_interpretation() -> Interpretation:
    """Interpretation used when no model output is available."""
    return Interpretation(
        executive_summary=(
            "Statistical analysis completed successfully. Comprehensive results "
            "are available in the detailed sections below."
        ),
        key_findings=[
            "Data processing completed with full variable detection",
            "Descriptive statistics calculated for all numeric variables",
            "Statistical tests performed where applicable",
            "Report generated with detailed methodology",
        ],
        statistical_significance=(
            "Statistical significance testing completed at alpha = 0.05 level. Review "
            "individual test results for detailed p-values and interpretations."
        ),
        practical_implications=(
            "Results provide quantitative insights for data-driven decision making. "
            "Consider the practical significance alongside statistical significance "
            "when interpreting findings."
        ),
        limitations=(
            "Standard statistical assumptions apply. Ensure data quality and "
            "appropriate test selection for your research context."
        ),
        recommendations=[
            "Review descriptive statistics for data quality assessment",
            "Examine correlation patterns for relationship insights",
            "Consider additional domain-specific analysis if needed",
            "Validate findings with appropriate subject matter expertise",
        ],
        methodology=(
            "Descriptive statistics, Pearson correlation, Shapiro-Wilk and "
            "one-sample t-tests, IQR outlier detection, least-squares regression "
            "and Shewhart control charts were applied systematically."
        ),
        is_fallback=True,
    )


def build_interpretation_prompt(
    results: dict[str, Any],
    research_question: str | None = None,
) -> str:
    """Build the user prompt for an interpretation request."""
    if research_question:
        context = f"Research Question: {research_question}\n\n"
    else:
        context = "No specific research question provided.\n\n"

    return (
        f"{context}Please analyze the following statistical results and provide "
        f"a comprehensive interpretation in JSON format with the following "
        f"structure:\n\n{RESPONSE_SCHEMA}\n\n"
        f"Statistical Results:\n{json.dumps(results, indent=2, default=str)}\n\n"
        "Please provide professional, accurate interpretations suitable for "
        "academic or business reporting. Focus on:\n"
        "1. Statistical significance and effect sizes\n"
        "2. Practical implications of the findings\n"
        "3. Data quality and reliability\n"
        "4. Appropriate conclusions based on the analysis type\n"
        "5. Recommendations for further analysis or actions"
    )


def _parse_json_object(text: str) -> dict[str, Any]:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    return data


class InterpretationService:
    """Turns statistical results into an ``Interpretation``.

    Args:
        provider: LLM provider, or None to always use the fallback
        max_tokens: Token budget for an interpretation reply

    Example:
        >>> service = InterpretationService(None)
        >>> interpretation = await service.interpret(results)
        >>> interpretation.is_fallback
        True
    """

    def __init__(self, provider: LLMProvider | None, max_tokens: int = 2000) -> None:
        self.provider = provider
        self.max_tokens = max_tokens

    async def interpret(
        self,
        results: StatisticalResults,
        research_question: str | None = None,
    ) -> Interpretation:
        if self.provider is None:
            logger.warning("No LLM provider configured, using fallback interpretation")
            return fallback_interpretation()

        prompt = build_interpretation_prompt(results.to_dict(), research_question)
        try:
            reply = await self.provider.complete(
                INTERPRETATION_SYSTEM_PROMPT, prompt, max_tokens=self.max_tokens
            )
            return Interpretation.from_llm_json(_parse_json_object(reply))
        except (ProviderError, ValueError) as e:
            logger.warning(f"Interpretation unavailable, using fallback: {e}")
            return fallback_interpretation()

    async def generate_data_insights(self, preview: dict[str, Any]) -> list[str]:
        """Return 3-5 short insights about a data preview."""
        if self.provider is None:
            return [FALLBACK_INSIGHT]

        prompt = (
            "Analyze this dataset preview and provide 3-5 key insights in JSON "
            'format: {"insights": ["insight1", "insight2", ...]}\n\n'
            f"Data Preview:\n{json.dumps(preview, indent=2, default=str)}"
        )
        try:
            reply = await self.provider.complete(
                INSIGHTS_SYSTEM_PROMPT, prompt, max_tokens=500, temperature=0.5
            )
            insights = _string_list(_parse_json_object(reply).get("insights"))
        except (ProviderError, ValueError) as e:
            logger.warning(f"Data insights unavailable: {e}")
            return [FALLBACK_INSIGHT]

        return insights or [EMPTY_INSIGHT]
