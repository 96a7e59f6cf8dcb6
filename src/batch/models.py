# src/batch/models.py — v2
"""Batch processing models: ScanEntry, BatchResult."""

from __future__ import annotations

from pydantic import BaseModel, Field

from docsorter.core.models import DocumentAnalysis


class ScanEntry(BaseModel):
    """A single text file discovered during a directory scan."""

    file_path: str
    filename: str
    format: str
    size_bytes: int


class BatchResult(BaseModel):
    """Summary result of a directory batch run."""

    scan_root: str
    total_files_found: int
    processed: int
    errors: int
    analyses: list[DocumentAnalysis] = Field(default_factory=list)
    duration_seconds: float
