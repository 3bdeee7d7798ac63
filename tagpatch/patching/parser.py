"""
Patch Document Parser for TagPatch.

Format:
    // find:
    <text to find>
    // replace with:
    <text to replace with>

A document without any markers is a whole-file replacement.
"""

import re
from dataclasses import dataclass

# Marker lines, whitespace allowed around the keyword
FIND_MARKER = re.compile(r"^\s*//\s*find:\s*$")
REPLACE_MARKER = re.compile(r"^\s*//\s*replace\s+with:\s*$")

# Substituted with the checked-out branch name when content is written
BRANCH_PLACEHOLDER = "$CURRENT_BRANCH"


@dataclass(frozen=True)
class EditBlock:
    """One literal find/replace pair."""

    find: str
    replace: str


def parse_edit_blocks(content: str) -> list[EditBlock]:
    """
    Split a patch document into ordered edit blocks.

    Lines before the first find marker are ignored. A find marker
    closes the block in progress; a block with no find lines is dropped.
    A block without a replace section replaces with the empty string.

    Args:
        content: Raw patch document

    Returns:
        Edit blocks in document order (empty for whole-file documents)
    """
    blocks = []
    mode = None
    find_lines: list[str] = []
    replace_lines: list[str] = []

    def flush():
        find = "\n".join(find_lines)
        if find:
            blocks.append(EditBlock(find, "\n".join(replace_lines)))

    for line in content.split("\n"):
        if FIND_MARKER.match(line):
            flush()
            find_lines = []
            replace_lines = []
            mode = "find"
        elif REPLACE_MARKER.match(line):
            mode = "replace"
        elif mode == "find":
            find_lines.append(line)
        elif mode == "replace":
            replace_lines.append(line)

    flush()
    return blocks


def substitute_branch(content: str, branch: str) -> str:
    return content.replace(BRANCH_PLACEHOLDER, branch)
