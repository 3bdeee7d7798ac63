"""
Run reporting for TagPatch.

Tracks per-version outcomes:
- Committed, pruned or discarded
- Blocks found per version
- Commit and push status
"""

from tagpatch.metrics.report import VersionMetrics, collect_metrics, print_report, summarize

__all__ = ["VersionMetrics", "collect_metrics", "print_report", "summarize"]
