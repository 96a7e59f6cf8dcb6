# src/main.py — v2
"""CLI entry point — analyze and batch commands.

Usage:
    docsorter analyze <file> [options]
    docsorter batch <directory> [options]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from docsorter.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from docsorter.config.settings import ConfigurationError, load_settings

    try:
        overrides: dict[str, object] = {}
        if args.no_ai:
            overrides["ai_enabled"] = False
        settings = load_settings(**overrides)
    except (ConfigurationError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="docsorter",
        description=f"docsorter v{__version__} — Hybrid document metadata extraction",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-ai", action="store_true",
        help="Heuristics only, never call the AI provider",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- analyze ---
    p_analyze = subparsers.add_parser(
        "analyze", help="Analyze a single text document",
    )
    p_analyze.add_argument("file", type=Path, help="Path to a .txt or .md document")
    p_analyze.add_argument(
        "--force-ai", action="store_true",
        help="Call the AI even when heuristics are confident",
    )
    p_analyze.add_argument(
        "--force-refresh", action="store_true",
        help="Ignore cached AI results (fresh results are still cached)",
    )
    p_analyze.set_defaults(func=_cmd_analyze)

    # --- batch ---
    p_batch = subparsers.add_parser(
        "batch", help="Analyze every text document in a directory",
    )
    p_batch.add_argument("directory", type=Path, help="Directory to scan")
    p_batch.add_argument(
        "--no-recursive", action="store_true",
        help="Disable recursive scanning",
    )
    p_batch.add_argument(
        "--formats", default=None,
        help="Comma-separated formats to include (txt, md)",
    )
    p_batch.set_defaults(func=_cmd_batch)

    return parser


async def _cmd_analyze(args: argparse.Namespace, settings) -> int:
    """Analyse one file and print the analysis as JSON."""
    from docsorter.api.facade import DocumentAnalyzer
    from docsorter.batch.scanner import SUPPORTED_FORMATS, extract_text

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1
    if file_path.suffix.lower() not in SUPPORTED_FORMATS:
        logger.error("Unsupported format: %s", file_path.suffix)
        return 1

    analyzer = DocumentAnalyzer.from_settings(settings)
    options = analyzer.options.model_copy(
        update={"force_ai": args.force_ai, "force_refresh": args.force_refresh}
    )
    analysis = await analyzer.analyze(extract_text(file_path), str(file_path), options)

    print(analysis.model_dump_json(indent=2))
    print(f"\nSuggested filename: {analysis.suggested_filename}")
    return 0


async def _cmd_batch(args: argparse.Namespace, settings) -> int:
    """Analyse a directory and print one line per document."""
    from docsorter.api.facade import DocumentAnalyzer
    from docsorter.batch.scanner import BatchScanner

    directory: Path = args.directory
    if not directory.is_dir():
        logger.error("Not a directory: %s", directory)
        return 1

    analyzer = DocumentAnalyzer.from_settings(settings)
    scanner = BatchScanner(analyzer)

    formats = None
    if args.formats:
        formats = [f.strip() for f in args.formats.split(",")]

    logger.info("Batch scanning %s", directory)
    batch_result = await scanner.scan_and_process(
        scan_root=directory,
        recursive=not args.no_recursive,
        formats_filter=formats,
    )

    for analysis in batch_result.analyses:
        print(
            f"{Path(analysis.file_path or '').name} -> {analysis.suggested_filename} "
            f"[{analysis.source}, {analysis.overall_confidence:.2f}]"
        )

    stats = analyzer.get_stats()
    print(f"\nBatch complete:")
    print(f"  Files found:  {batch_result.total_files_found}")
    print(f"  Processed:    {batch_result.processed}")
    print(f"  AI-assisted:  {stats.ai_processed}")
    print(f"  Errors:       {batch_result.errors}")
    print(f"  Duration:     {batch_result.duration_seconds:.1f}s")
    return 0


def _setup_logging(settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from docsorter.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
