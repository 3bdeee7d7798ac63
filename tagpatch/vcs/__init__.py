"""
Version control for TagPatch.

Handles:
- Tag listing and detached checkout
- Branch probing, creation, switching and deletion
- Staging, committing and pushing
- Diff statistics for reporting
"""

from tagpatch.vcs.repository import GitRepository
from tagpatch.vcs.diffstat import DiffStats, summarize_diff

__all__ = [
    "GitRepository",
    "DiffStats",
    "summarize_diff",
]
