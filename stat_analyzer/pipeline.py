"""End-to-end processing of one uploaded file.

parse -> analyze -> interpret, shared by the HTTP API and the CLI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stat_analyzer.analysis import StatisticalResults, analyze
from stat_analyzer.config import Settings
from stat_analyzer.ingest import ParsedTable, parse_file
from stat_analyzer.llm import Interpretation, InterpretationService, get_provider

logger = logging.getLogger(__name__)


@dataclass
class PipelineOutcome:
    """Everything produced for one file."""

    table: ParsedTable
    results: StatisticalResults
    interpretation: Interpretation


def build_interpretation_service(settings: Settings) -> InterpretationService:
    """Create the interpretation service, without a provider when no key is set."""
    try:
        provider = get_provider(settings)
    except ValueError:
        logger.info("No LLM API key configured; interpretations will use the fallback")
        provider = None
    return InterpretationService(provider, max_tokens=settings.interpretation_max_tokens)


def analyze_table(table: ParsedTable, settings: Settings) -> StatisticalResults:
    return analyze(
        table.rows,
        table.headers,
        alignment=settings.pair_alignment,
        qc_subgroup_size=settings.qc_subgroup_size,
    )


async def run_pipeline(
    content: bytes,
    filename: str,
    settings: Settings,
    service: InterpretationService,
    research_question: str | None = None,
) -> PipelineOutcome:
    """Parse, analyse and interpret a file.

    Raises:
        UnsupportedFileError: For unknown file types
        MalformedInputError: If the table cannot be analysed
        ValueError: If the file cannot be decoded
    """
    table = parse_file(content, filename)
    results = analyze_table(table, settings)
    interpretation = await service.interpret(results, research_question)
    return PipelineOutcome(table=table, results=results, interpretation=interpretation)
