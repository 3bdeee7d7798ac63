"""
Run Report for TagPatch.

Collects per-version outcomes for the end-of-run summary. Nothing is
persisted; git refs are the only state kept between runs.
"""

from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tagpatch.state import Phase, VersionState

console = Console()

OUTCOME_STYLES = {
    Phase.COMMITTED: "green",
    Phase.SKIPPED_NO_DIFF: "bright_black",
    Phase.DISCARDED_DRY_RUN: "yellow",
}


@dataclass
class VersionMetrics:
    """Outcome of a single version."""

    tag: str
    branch: str
    outcome: str
    branch_reused: bool
    blocks_found: int
    blocks_total: int
    documents_failed: int
    commit_sha: Optional[str]
    pushed: bool


def collect_metrics(state: VersionState) -> VersionMetrics:
    return VersionMetrics(
        tag=state.tag,
        branch=state.branch_name,
        outcome=state.phase.value,
        branch_reused=state.branch_reused,
        blocks_found=state.blocks_found,
        blocks_total=state.blocks_total,
        documents_failed=sum(1 for d in state.documents if d.error),
        commit_sha=state.commit_sha,
        pushed=state.pushed,
    )


def summarize(states: list[VersionState]) -> dict:
    """
    Generate summary statistics for a run.

    Returns:
        Dictionary of counts per outcome
    """
    metrics = [collect_metrics(s) for s in states]

    return {
        "versions": len(metrics),
        "committed": sum(1 for m in metrics if m.outcome == Phase.COMMITTED.value),
        "skipped": sum(1 for m in metrics if m.outcome == Phase.SKIPPED_NO_DIFF.value),
        "discarded": sum(1 for m in metrics if m.outcome == Phase.DISCARDED_DRY_RUN.value),
        "pushed": sum(1 for m in metrics if m.pushed),
        "documents_failed": sum(m.documents_failed for m in metrics),
    }


def print_report(states: list[VersionState], output: Optional[Console] = None) -> None:
    """Print one table row per processed version."""
    output = output or console

    table = Table(title="Patched Versions")
    table.add_column("Tag", style="cyan")
    table.add_column("Branch", style="blue")
    table.add_column("Outcome")
    table.add_column("Blocks found", justify="right")
    table.add_column("Commit", style="magenta")

    for state in states:
        m = collect_metrics(state)
        style = OUTCOME_STYLES.get(state.phase, "white")
        table.add_row(
            escape(m.tag),
            escape(m.branch) + (" (reused)" if m.branch_reused else ""),
            f"[{style}]{m.outcome}[/{style}]",
            f"{m.blocks_found}/{m.blocks_total}",
            m.commit_sha[:10] if m.commit_sha else "-",
        )

    output.print(table)
