"""FastAPI application for StatAnalyzer.

This module provides the REST API endpoints for uploading data files,
polling analysis status, downloading reports and fetching charts.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import (
    BackgroundTasks,
    Depends,
    FastAPI,
    File,
    Form,
    HTTPException,
    Query,
    Request,
    UploadFile,
    status,
)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from pydantic import BaseModel

from stat_analyzer import __version__
from stat_analyzer.analysis import PairAlignment, StatisticalResults
from stat_analyzer.analysis.pairing import paired_values
from stat_analyzer.config import Settings, get_settings
from stat_analyzer.core.errors import UnsupportedFileError
from stat_analyzer.ingest import file_type_for, parse_file
from stat_analyzer.llm import Interpretation, InterpretationService, fallback_interpretation
from stat_analyzer.pipeline import analyze_table, build_interpretation_service
from stat_analyzer.reporting import ReportGenerator, ReportOptions
from stat_analyzer.storage import (
    AnalysisRecord,
    AnalysisRepository,
    AnalysisStatus,
    InMemoryAnalysisRepository,
)
from stat_analyzer.visualization import (
    PlotResult,
    create_control_chart,
    create_correlation_heatmap,
    create_histogram,
    create_regression_plot,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

CHART_KINDS = ("histogram", "control", "correlation", "regression")
MEDIA_TYPES = {"pdf": "application/pdf", "text": "text/plain"}


# Dependencies
def get_repository(request: Request) -> AnalysisRepository:
    """Repository attached to the application."""
    return request.app.state.repository


def get_interpretation_service(
    settings: Settings = Depends(get_settings),
) -> InterpretationService:
    return build_interpretation_service(settings)


# Response models
class AnalyzeResponse(BaseModel):
    """Response from the upload endpoint."""

    message: str
    analysis_id: int
    status: AnalysisStatus


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ChartResponse(BaseModel):
    """Plotly figure plus its description."""

    title: str
    description: str
    data_summary: dict[str, Any]
    figure: dict[str, Any]

    @classmethod
    def from_plot(cls, plot: PlotResult) -> ChartResponse:
        return cls(
            title=plot.title,
            description=plot.description,
            data_summary=plot.data_summary,
            figure=json.loads(plot.to_json()),
        )


async def process_analysis(
    analysis_id: int,
    content: bytes,
    filename: str,
    repository: AnalysisRepository,
    settings: Settings,
    service: InterpretationService,
) -> None:
    """Background job: parse, analyse and interpret an uploaded file.

    Any failure marks the record as failed with the error message.
    """
    repository.update(analysis_id, status=AnalysisStatus.PROCESSING)
    record = repository.get(analysis_id)
    question = record.research_question if record else None

    try:
        table = parse_file(content, filename)
        preview = table.preview()
        preview["insights"] = await service.generate_data_insights(preview)
        repository.update(analysis_id, data_preview=preview)

        results = analyze_table(table, settings)
        interpretation = await service.interpret(results, question)

        repository.update(
            analysis_id,
            status=AnalysisStatus.COMPLETED,
            statistical_results=results.to_dict(),
            interpretation=interpretation.to_dict(),
            results=results,
        )
        logger.info(f"Analysis {analysis_id} completed")
    except Exception as e:
        logger.exception(f"Analysis {analysis_id} failed")
        repository.update(
            analysis_id,
            status=AnalysisStatus.FAILED,
            error_message=str(e),
        )


def _require_record(repository: AnalysisRepository, analysis_id: int) -> AnalysisRecord:
    record = repository.get(analysis_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Analysis not found",
        )
    return record


def _require_results(record: AnalysisRecord) -> StatisticalResults:
    if record.status != AnalysisStatus.COMPLETED:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Analysis not completed",
        )
    if record.results is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No statistical results available",
        )
    return record.results


def build_chart(
    results: StatisticalResults,
    chart: str,
    variable: str | None,
    index: int,
    alignment: PairAlignment | str,
) -> PlotResult:
    """Create one chart for a completed analysis.

    Raises:
        LookupError: If the requested variable, chart or model doesn't exist
        ValueError: If the chart cannot be drawn from the data
    """
    if chart == "histogram":
        numeric = [v for v in results.variables if v.is_numerical]
        if variable is not None:
            numeric = [v for v in numeric if v.name == variable]
        if not numeric:
            raise LookupError(f"No numerical variable {variable or ''}".strip())
        return create_histogram(numeric[0])

    if chart == "control":
        charts = [c for c in results.control_charts if variable in (None, c.variable)]
        if index >= len(charts):
            raise LookupError("Control chart not found")
        return create_control_chart(charts[index])

    if chart == "correlation":
        if results.correlation is None:
            raise LookupError("Correlation matrix not available")
        return create_correlation_heatmap(results.correlation)

    if index >= len(results.regressions):
        raise LookupError("Regression model not found")
    regression = results.regressions[index]
    numeric = [v for v in results.variables if v.is_numerical]
    first, second = regression.columns
    x, y = paired_values(
        numeric[first],
        numeric[second],
        PairAlignment(alignment),
    )
    return create_regression_plot(regression, x, y)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    logger.info(f"Starting StatAnalyzer API ({settings.environment})")
    yield
    logger.info("Shutting down StatAnalyzer API")


def create_app(repository: AnalysisRepository | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        repository: Record storage (in-memory if None)
    """
    app = FastAPI(
        title="StatAnalyzer API",
        description="Automated statistical analysis of uploaded data files",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.repository = repository or InMemoryAnalysisRepository()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Check API health."""
        return HealthResponse(status="healthy", version=__version__)

    @app.post("/api/analyze", response_model=AnalyzeResponse)
    async def upload_file(
        background_tasks: BackgroundTasks,
        file: UploadFile = File(...),
        research_question: str | None = Form(default=None),
        repository: AnalysisRepository = Depends(get_repository),
        settings: Settings = Depends(get_settings),
        service: InterpretationService = Depends(get_interpretation_service),
    ) -> AnalyzeResponse:
        """Upload a data file and start its analysis."""
        filename = file.filename or ""
        try:
            file_type = file_type_for(filename)
        except UnsupportedFileError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            )

        content = await file.read()
        if not content:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No file uploaded",
            )
        if len(content) > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File exceeds {settings.max_upload_mb} MB limit",
            )

        record = repository.create(
            filename=filename,
            file_type=file_type,
            file_size=len(content),
            research_question=research_question or None,
        )
        background_tasks.add_task(
            process_analysis,
            record.id,
            content,
            filename,
            repository,
            settings,
            service,
        )
        logger.info(f"Queued analysis {record.id} for {filename}")

        return AnalyzeResponse(
            message="File uploaded successfully. Analysis started.",
            analysis_id=record.id,
            status=AnalysisStatus.PROCESSING,
        )

    @app.get("/api/analysis/{analysis_id}", response_model=AnalysisRecord)
    async def get_analysis(
        analysis_id: int,
        repository: AnalysisRepository = Depends(get_repository),
    ) -> AnalysisRecord:
        """Get an analysis record."""
        return _require_record(repository, analysis_id)

    @app.get("/api/analysis/{analysis_id}/report")
    async def download_report(
        analysis_id: int,
        format: str = Query(default="pdf", pattern="^(pdf|text)$"),
        repository: AnalysisRepository = Depends(get_repository),
        settings: Settings = Depends(get_settings),
    ) -> FileResponse:
        """Render and download the report for a completed analysis."""
        record = _require_record(repository, analysis_id)
        results = _require_results(record)

        interpretation = (
            Interpretation.from_dict(record.interpretation)
            if record.interpretation
            else fallback_interpretation()
        )

        try:
            path = ReportGenerator(settings.reports_dir).generate(
                record, results, interpretation, ReportOptions(format=format)
            )
        except Exception as e:
            logger.exception("Report generation failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to generate report: {e}",
            )

        repository.update(analysis_id, report_path=str(path))
        return FileResponse(path, media_type=MEDIA_TYPES[format], filename=path.name)

    @app.get("/api/analysis/{analysis_id}/charts/{chart}", response_model=ChartResponse)
    async def get_chart(
        analysis_id: int,
        chart: str,
        variable: str | None = None,
        index: int = Query(default=0, ge=0),
        repository: AnalysisRepository = Depends(get_repository),
        settings: Settings = Depends(get_settings),
    ) -> ChartResponse:
        """Get a Plotly chart for a completed analysis."""
        if chart not in CHART_KINDS:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown chart: {chart}",
            )
        record = _require_record(repository, analysis_id)
        results = _require_results(record)

        try:
            plot = build_chart(results, chart, variable, index, settings.pair_alignment)
        except LookupError as e:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(e),
            )
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            )

        return ChartResponse.from_plot(plot)

    @app.get("/api/analyses", response_model=list[AnalysisRecord])
    async def list_analyses(
        repository: AnalysisRepository = Depends(get_repository),
    ) -> list[AnalysisRecord]:
        """List all analyses, newest first."""
        return repository.list_all()

    return app


app = create_app()
