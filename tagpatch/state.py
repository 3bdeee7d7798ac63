"""
Per-version workflow state for TagPatch.

One instance flows through the branch workflow graph for each version.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from tagpatch.patching.apply import DocumentOutcome
from tagpatch.vcs.diffstat import DiffStats
from tagpatch.versions.resolver import Version


class Phase(str, Enum):
    INIT = "init"
    CHECKED_OUT_TAG = "checked_out_tag"
    ON_BRANCH = "on_branch"
    PATCHED = "patched"
    COMMITTED = "committed"
    SKIPPED_NO_DIFF = "skipped_no_diff"
    DISCARDED_DRY_RUN = "discarded_dry_run"


@dataclass
class VersionState:
    """State of one version as it moves through the workflow."""

    version: Version
    tag: str = ""
    branch_name: str = ""

    phase: Phase = Phase.INIT

    # Branch
    branch_reused: bool = False

    # Patching
    documents: list[DocumentOutcome] = field(default_factory=list)

    # Changes
    has_diff: Optional[bool] = None
    diff_stats: Optional[DiffStats] = None

    # Publishing
    commit_sha: Optional[str] = None
    pushed: bool = False

    @property
    def committed(self) -> bool:
        return self.commit_sha is not None

    @property
    def blocks_found(self) -> int:
        return sum(d.found for d in self.documents)

    @property
    def blocks_total(self) -> int:
        return sum(d.total for d in self.documents)
