"""
Diff statistics for TagPatch.

Summarises the staged change of a version before it is committed.
"""

from dataclasses import dataclass, field
from typing import Optional

from unidiff import PatchSet, UnidiffParseError


@dataclass
class FileStats:
    path: str
    additions: int
    deletions: int


@dataclass
class DiffStats:
    """Totals for a unified diff."""

    files_changed: int = 0
    additions: int = 0
    deletions: int = 0
    files: list[FileStats] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.files_changed} file(s) changed, +{self.additions} -{self.deletions}"


def summarize_diff(diff_text: str) -> Optional[DiffStats]:
    """
    Extract statistics from a unified diff.

    Args:
        diff_text: Unified diff string

    Returns:
        DiffStats, or None if the diff cannot be parsed
    """
    try:
        patch = PatchSet(diff_text)
    except UnidiffParseError:
        return None

    stats = DiffStats(files_changed=len(patch))

    for patched_file in patch:
        stats.files.append(FileStats(patched_file.path, patched_file.added, patched_file.removed))
        stats.additions += patched_file.added
        stats.deletions += patched_file.removed

    return stats
