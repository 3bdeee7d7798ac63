"""
Version handling for TagPatch.

Handles:
- Parsing release tags
- Selecting the latest patch of each minor line
- Naming tags, branches and commits
"""

from tagpatch.versions.resolver import Version, resolve_versions, select_versions
from tagpatch.versions.naming import BranchScheme, branch_name, commit_message, tag_name

__all__ = [
    "Version",
    "resolve_versions",
    "select_versions",
    "BranchScheme",
    "branch_name",
    "commit_message",
    "tag_name",
]
