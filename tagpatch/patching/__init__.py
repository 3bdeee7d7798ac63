"""
Patch Application for TagPatch.

Handles:
- Loading the patch document tree
- Parsing literal find/replace blocks
- Applying them in apply, dry-run or show-only mode
"""

from tagpatch.patching.apply import (
    BlockOutcome,
    BlockStatus,
    DocumentAction,
    DocumentOutcome,
    PatchEngine,
    PatchMode,
)
from tagpatch.patching.parser import BRANCH_PLACEHOLDER, EditBlock, parse_edit_blocks
from tagpatch.patching.patchset import PatchDocument, PatchSet

__all__ = [
    "BlockOutcome",
    "BlockStatus",
    "DocumentAction",
    "DocumentOutcome",
    "PatchEngine",
    "PatchMode",
    "BRANCH_PLACEHOLDER",
    "EditBlock",
    "parse_edit_blocks",
    "PatchDocument",
    "PatchSet",
]
