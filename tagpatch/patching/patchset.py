"""
Patch Set loading for TagPatch.

Every file under the patch root is a patch document whose target is the
same relative path inside the repository.
"""

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterator

from tagpatch.errors import SetupError


@dataclass(frozen=True)
class PatchDocument:
    """A patch file and the repository path it targets."""

    source_path: Path
    target_path: PurePosixPath
    content: str


def read_text(path: Path) -> str:
    """Read UTF-8 text without newline translation."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text(path: Path, content: str) -> None:
    """Write UTF-8 text without newline translation."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def find_patch_files(root: Path) -> list[Path]:
    """
    Recursively list patch files, depth-first, each directory sorted by name.

    Args:
        root: Patch root directory

    Returns:
        Patch file paths
    """
    files = []
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            files.extend(find_patch_files(entry))
        else:
            files.append(entry)
    return files


class PatchSet:
    """
    The patch documents of one run.

    Loaded once up front; documents are immutable afterwards.
    """

    def __init__(self, root: Path, documents: list[PatchDocument]):
        self.root = root
        self.documents = documents

    @classmethod
    def load(cls, root: Path) -> "PatchSet":
        """
        Load every patch document under a directory.

        Raises:
            SetupError: If the directory is missing or a document is unreadable
        """
        root = Path(root)
        if not root.is_dir():
            raise SetupError(f"Patch directory not found: {root}")

        documents = []
        for path in find_patch_files(root):
            try:
                content = read_text(path)
            except (OSError, UnicodeDecodeError) as e:
                raise SetupError(f"Could not read patch document {path}: {e}", cause=e) from e

            target = PurePosixPath(path.relative_to(root).as_posix())
            documents.append(PatchDocument(path, target, content))

        return cls(root, documents)

    def __iter__(self) -> Iterator[PatchDocument]:
        return iter(self.documents)

    def __len__(self) -> int:
        return len(self.documents)
