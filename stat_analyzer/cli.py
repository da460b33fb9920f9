"""Command-line interface for StatAnalyzer."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from stat_analyzer import __version__
from stat_analyzer.config import get_settings


def _analyze_file(args: argparse.Namespace) -> int:
    from stat_analyzer.pipeline import build_interpretation_service, run_pipeline
    from stat_analyzer.reporting import ReportGenerator, ReportOptions
    from stat_analyzer.storage import AnalysisStatus, InMemoryAnalysisRepository

    settings = get_settings()
    path = Path(args.file)
    try:
        content = path.read_bytes()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    repository = InMemoryAnalysisRepository()
    record = repository.create(
        filename=path.name,
        file_type=path.suffix.lstrip(".").lower(),
        file_size=len(content),
        research_question=args.question,
    )

    try:
        outcome = asyncio.run(
            run_pipeline(
                content,
                path.name,
                settings,
                build_interpretation_service(settings),
                research_question=args.question,
            )
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    record = repository.update(record.id, status=AnalysisStatus.COMPLETED)
    output_dir = Path(args.output) if args.output else settings.reports_dir
    report = ReportGenerator(output_dir).generate(
        record,
        outcome.results,
        outcome.interpretation,
        ReportOptions(format=args.format),
    )

    print(outcome.results.format_for_display())
    print(f"\nReport written to {report}")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(
        prog="stat-analyzer",
        description="Automated statistical analysis of data files",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the API server",
    )
    parser.add_argument(
        "--host",
        default=settings.api_host,
        help=f"API server host (default: {settings.api_host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.api_port,
        help=f"API server port (default: {settings.api_port})",
    )

    subparsers = parser.add_subparsers(dest="command")
    analyze_parser = subparsers.add_parser("analyze", help="Analyze a data file")
    analyze_parser.add_argument("file", help="CSV, Excel, PDF or Word file")
    analyze_parser.add_argument(
        "--format",
        choices=["pdf", "text"],
        default="text",
        help="Report format (default: text)",
    )
    analyze_parser.add_argument(
        "--question",
        default=None,
        help="Research question to guide the interpretation",
    )
    analyze_parser.add_argument(
        "--output",
        default=None,
        help="Report directory (default: REPORTS_DIR setting)",
    )

    args = parser.parse_args()

    if args.serve:
        try:
            import uvicorn

            from stat_analyzer.api.app import app

            uvicorn.run(app, host=args.host, port=args.port)
        except ImportError as e:
            print(f"Error: {e}. Make sure uvicorn is installed.", file=sys.stderr)
            return 1
    elif args.command == "analyze":
        return _analyze_file(args)
    else:
        parser.print_help()

    return 0


if __name__ == "__main__":
    sys.exit(main())
