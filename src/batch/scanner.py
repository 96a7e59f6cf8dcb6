# src/batch/scanner.py — v3
"""Directory batch runs: find text documents, read them, analyse them together.

Only plain-text formats are read here; binary formats (PDF, DOCX, images)
need an external text extractor first.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from docsorter.batch.models import BatchResult, ScanEntry
from docsorter.core.models import BatchItem

if TYPE_CHECKING:
    from docsorter.api.facade import DocumentAnalyzer
    from docsorter.core.models import AnalysisOptions

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS: dict[str, str] = {".txt": "txt", ".md": "md"}


def extract_text(path: Path) -> str:
    """Read a plain-text document (UTF-8, undecodable bytes replaced)."""
    return path.read_text(encoding="utf-8", errors="replace")


def _walk(root: Path, recursive: bool) -> Iterator[Path]:
    candidates = root.rglob("*") if recursive else root.iterdir()
    for path in candidates:
        # Skip anything inside a dot-directory (.git, .cache ...) or dot-file
        if any(part.startswith(".") for part in path.relative_to(root).parts):
            continue
        if path.is_file():
            yield path


class BatchScanner:
    """Feed every supported file under a directory to DocumentAnalyzer.analyze_batch.

    Unreadable files are logged and counted as errors; they never abort the run.
    """

    def __init__(self, analyzer: DocumentAnalyzer) -> None:
        self._analyzer = analyzer

    def scan(
        self,
        scan_root: Path,
        recursive: bool = True,
        formats_filter: list[str] | None = None,
    ) -> list[ScanEntry]:
        """List supported files, sorted by path.

        Raises:
            ValueError: If ``scan_root`` is not a directory.
        """
        if not scan_root.is_dir():
            raise ValueError(f"Scan root is not a directory: {scan_root}")

        wanted = {f.lower() for f in formats_filter} if formats_filter else set(SUPPORTED_FORMATS.values())
        entries = [
            ScanEntry(
                file_path=str(path.resolve()),
                filename=path.name,
                format=SUPPORTED_FORMATS[path.suffix.lower()],
                size_bytes=path.stat().st_size,
            )
            for path in sorted(_walk(scan_root, recursive))
            if SUPPORTED_FORMATS.get(path.suffix.lower()) in wanted
        ]
        logger.info(
            "Found %d text documents under %s", len(entries), scan_root,
            extra={"data": {"recursive": recursive, "formats": sorted(wanted)}},
        )
        return entries

    def load_items(self, entries: list[ScanEntry]) -> tuple[list[BatchItem], int]:
        """Read scanned files into batch items, returning ``(items, unreadable_count)``."""
        items: list[BatchItem] = []
        for entry in entries:
            try:
                items.append(BatchItem(text=extract_text(Path(entry.file_path)), file_path=entry.file_path))
            except OSError as e:
                logger.error("Failed to read %s: %s", entry.filename, e)
        return items, len(entries) - len(items)

    async def scan_and_process(
        self,
        scan_root: Path,
        recursive: bool = True,
        formats_filter: list[str] | None = None,
        options: AnalysisOptions | None = None,
    ) -> BatchResult:
        started = time.perf_counter()
        entries = self.scan(scan_root, recursive, formats_filter)
        items, unreadable = self.load_items(entries)
        analyses = await self._analyzer.analyze_batch(items, options) if items else []

        return BatchResult(
            scan_root=str(scan_root),
            total_files_found=len(entries),
            processed=len(analyses),
            errors=unreadable,
            analyses=analyses,
            duration_seconds=round(time.perf_counter() - started, 2),
        )
