"""Testing utilities for verifying extraction output against recorded baselines.

Importable without any GUI toolkit; only the standard library is used.
"""

from __future__ import annotations

__all__ = [
    "FileEntry",
    "FileSnapshot",
    "SnapshotCompareResult",
    "compare_snapshots",
    "baseline_path",
]

from .file_snapshot import (
    FileEntry,
    FileSnapshot,
    SnapshotCompareResult,
    compare_snapshots,
    baseline_path,
)
