"""
Patch Application for TagPatch.

Applies patch documents to the checked-out tree:
- Missing targets are created from the document
- Documents without edit blocks overwrite the target
- Edit blocks replace the first literal occurrence, in order,
  against the progressively edited content
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from tagpatch.errors import PatchDocumentError
from tagpatch.patching.parser import EditBlock, parse_edit_blocks, substitute_branch
from tagpatch.patching.patchset import PatchDocument, PatchSet, read_text, write_text

console = Console()

# Characters of a missing find text shown in reports
PREVIEW_LENGTH = 100


class PatchMode(str, Enum):
    """How the engine treats matches."""

    APPLY = "apply"
    DRY_RUN = "dry_run"
    SHOW_ONLY = "show_only"

    @property
    def writes(self) -> bool:
        return self is PatchMode.APPLY


class BlockStatus(str, Enum):
    APPLIED = "applied"
    FOUND_NOT_APPLIED = "found_not_applied"
    NOT_FOUND = "not_found"


class DocumentAction(str, Enum):
    CREATED = "created"
    WOULD_CREATE = "would_create"
    OVERWRITTEN = "overwritten"
    WOULD_OVERWRITE = "would_overwrite"
    EDITED = "edited"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class BlockOutcome:
    """Result of one edit block. `block` is None for whole-file overwrites."""

    number: int
    status: BlockStatus
    block: Optional[EditBlock] = None

    @property
    def found(self) -> bool:
        return self.status is not BlockStatus.NOT_FOUND


@dataclass
class DocumentOutcome:
    """Result of one patch document."""

    target_path: str
    action: DocumentAction
    blocks: list[BlockOutcome] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.blocks)

    @property
    def found(self) -> int:
        return sum(1 for b in self.blocks if b.found)

    @property
    def applied(self) -> int:
        return sum(1 for b in self.blocks if b.status is BlockStatus.APPLIED)


class PatchEngine:
    """
    Applies patch documents against a working tree.

    Args:
        repo_root: Working tree the target paths are relative to
        current_branch: Returns the checked-out branch name; only called
            when content is written
        output: Console for progress (module console by default)
    """

    def __init__(
        self,
        repo_root: Path,
        current_branch: Callable[[], str],
        output: Optional[Console] = None,
    ):
        self.repo_root = Path(repo_root)
        self.current_branch = current_branch
        self.console = output or console

    def apply_patch_set(self, patch_set: PatchSet, mode: PatchMode) -> list[DocumentOutcome]:
        """Apply every document of a patch set, in enumeration order."""
        return [self.apply_document(document, mode) for document in patch_set]

    def apply_document(self, document: PatchDocument, mode: PatchMode) -> DocumentOutcome:
        """
        Apply one patch document.

        Read and write failures on the target are reported and recorded
        as a failed outcome; they never propagate.

        Args:
            document: Patch document
            mode: Apply, dry run or show only

        Returns:
            Per-block and aggregate outcome
        """
        target_label = str(document.target_path)
        target = self.repo_root / document.target_path

        self.console.print(f"  Processing patch: {escape(target_label)}")

        try:
            if not target.exists():
                outcome = self._create_target(document, target, mode)
            else:
                outcome = self._patch_target(document, target, mode)
        except PatchDocumentError as e:
            self.console.print(f"[red]    ✗ Error processing patch: {escape(str(e))}[/red]")
            return DocumentOutcome(target_label, DocumentAction.FAILED, error=str(e))

        if outcome.blocks:
            self.console.print(
                f"[cyan]    Summary: {outcome.found}/{outcome.total} blocks found[/cyan]"
            )

        return outcome

    def _create_target(self, document, target, mode):
        label = str(document.target_path)

        if not mode.writes:
            self.console.print(f"[yellow]    ✓ Would create file: {escape(label)}[/yellow]")
            if mode is PatchMode.SHOW_ONLY:
                self._show_text("NEW FILE", document.content)
            return DocumentOutcome(label, DocumentAction.WOULD_CREATE)

        self._write(document, target, document.content, create_parents=True)
        self.console.print(f"[green]    ✓ File created: {escape(label)}[/green]")
        return DocumentOutcome(label, DocumentAction.CREATED)

    def _patch_target(self, document, target, mode):
        label = str(document.target_path)
        self.console.print(f"[green]    ✓ Target file exists: {escape(label)}[/green]")

        original = self._read(document, target)
        blocks = parse_edit_blocks(document.content)

        if not blocks:
            self.console.print(
                "[yellow]    ✓ No find/replace blocks found - overwriting entire file[/yellow]"
            )
            if not mode.writes:
                if mode is PatchMode.SHOW_ONLY:
                    self._show_text("NEW CONTENT", document.content)
                return DocumentOutcome(
                    label,
                    DocumentAction.WOULD_OVERWRITE,
                    [BlockOutcome(1, BlockStatus.FOUND_NOT_APPLIED)],
                )

            self._write(document, target, document.content)
            self.console.print("      File overwritten with patch content")
            return DocumentOutcome(
                label, DocumentAction.OVERWRITTEN, [BlockOutcome(1, BlockStatus.APPLIED)]
            )

        content = original
        results = []

        for number, block in enumerate(blocks, start=1):
            index = content.find(block.find)

            if index == -1:
                results.append(BlockOutcome(number, BlockStatus.NOT_FOUND, block))
                self.console.print(f"[red]    ✗ Block {number}: NOT FOUND in file[/red]")
                if mode is PatchMode.SHOW_ONLY:
                    self._show_block(block)
                else:
                    preview = escape(block.find[:PREVIEW_LENGTH])
                    self.console.print(f"[bright_black]      Looking for: {preview}...[/bright_black]")
                continue

            self.console.print(f"[green]    ✓ Block {number}: Found in file[/green]")

            if mode.writes:
                content = content[:index] + block.replace + content[index + len(block.find):]
                results.append(BlockOutcome(number, BlockStatus.APPLIED, block))
                self.console.print("      Applying replacement...")
            else:
                results.append(BlockOutcome(number, BlockStatus.FOUND_NOT_APPLIED, block))
                self._show_block(block)

        outcome = DocumentOutcome(label, DocumentAction.UNCHANGED, results)

        if mode.writes and outcome.applied > 0:
            self._write(document, target, content)
            outcome.action = DocumentAction.EDITED
            self.console.print(
                f"[green]    ✓ Applied {outcome.applied} replacement(s) to {escape(label)}[/green]"
            )

        return outcome

    def _read(self, document, target) -> str:
        try:
            return read_text(target)
        except (OSError, UnicodeDecodeError) as e:
            raise PatchDocumentError(str(document.target_path), f"cannot read target ({e})", cause=e) from e

    def _write(self, document, target, content, create_parents=False) -> None:
        # The placeholder is resolved at write time, on the working branch
        content = substitute_branch(content, self.current_branch())
        try:
            if create_parents:
                target.parent.mkdir(parents=True, exist_ok=True)
            write_text(target, content)
        except OSError as e:
            raise PatchDocumentError(str(document.target_path), f"cannot write target ({e})", cause=e) from e

    def _show_block(self, block: EditBlock) -> None:
        self.console.print("      --- FIND BLOCK ---")
        self.console.print(block.find, markup=False, emoji=False, highlight=False)
        self.console.print("      --- REPLACE WITH ---")
        self.console.print(block.replace, markup=False, emoji=False, highlight=False)
        self.console.print("      --- END ---")

    def _show_text(self, title: str, text: str) -> None:
        self.console.print(f"      --- {title} ---")
        self.console.print(text, markup=False, emoji=False, highlight=False)
        self.console.print("      --- END ---")
