"""
Git access for TagPatch.

Wraps the repository with exactly the operations the branch workflow
needs. Every failure surfaces as GitOperationError, except the
"branch does not exist" probe which is a normal answer.
"""

from pathlib import Path
from typing import Optional, Sequence

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from rich.console import Console
from rich.markup import escape

from tagpatch.errors import GitOperationError, SetupError

console = Console()


class GitRepository:
    """
    Version control capability backed by a local git repository.

    Args:
        repo_path: Path to the repository working tree
        remote: Remote that branches are pushed to
        verbose: Whether to echo git commands
    """

    def __init__(self, repo_path, remote: str = "origin", verbose: bool = False):
        path = Path(repo_path).resolve()

        try:
            self.repo = Repo(path)
        except NoSuchPathError as e:
            raise SetupError(f"Repository path does not exist: {path}", cause=e) from e
        except InvalidGitRepositoryError as e:
            raise SetupError(f"Not a git repository: {path}", cause=e) from e

        if self.repo.bare or self.repo.working_tree_dir is None:
            raise SetupError(f"Repository has no working tree: {path}")

        self.remote = remote
        self.verbose = verbose

    @property
    def root(self) -> Path:
        return Path(self.repo.working_tree_dir)

    def _git(self, *args: str) -> str:
        command = " ".join(args)
        if self.verbose:
            console.print(f"[dim]$ git {escape(command)}[/dim]")

        try:
            return self.repo.git.execute(["git", *args])
        except GitCommandError as e:
            raise GitOperationError(
                f"git {command} failed",
                command=command,
                stderr=e.stderr,
                cause=e,
            ) from e

    def list_tags(self, pattern: str) -> list[str]:
        """List tag names matching a glob, e.g. "pkg@*"."""
        output = self._git("tag", "-l", pattern)
        return [line.strip() for line in output.splitlines() if line.strip()]

    def checkout_detached(self, tag: str) -> None:
        """Check out a tag without attaching a branch."""
        self._git("checkout", "--detach", f"refs/tags/{tag}")

    def branch_exists(self, name: str) -> bool:
        """
        Probe for a local branch.

        Raises:
            GitOperationError: If the probe fails for another reason
        """
        try:
            self._git("show-ref", "--verify", "--quiet", f"refs/heads/{name}")
        except GitOperationError as e:
            if isinstance(e.cause, GitCommandError) and e.cause.status == 1:
                return False
            raise
        return True

    def create_branch(self, name: str) -> None:
        """Create a branch at HEAD and check it out."""
        if self.verbose:
            console.print(f"[dim]$ git checkout -b {escape(name)}[/dim]")

        try:
            new_branch = self.repo.create_head(name)
            new_branch.checkout()
        except GitCommandError as e:
            raise GitOperationError(
                f"Could not create branch {name}", command=f"checkout -b {name}", stderr=e.stderr, cause=e
            ) from e

    def switch_branch(self, name: str) -> None:
        self._git("checkout", name)

    def current_branch(self) -> str:
        """Name of the checked-out branch ("HEAD" when detached)."""
        return self._git("rev-parse", "--abbrev-ref", "HEAD")

    def is_dirty(self) -> bool:
        """Whether tracked files differ from HEAD. Untracked files are ignored."""
        try:
            return self.repo.is_dirty(untracked_files=False)
        except GitCommandError as e:
            raise GitOperationError("Could not read working tree status", stderr=e.stderr, cause=e) from e

    def stage_all(self, new_paths: Sequence[str] = ()) -> None:
        """
        Stage changes to tracked files plus the given new files.

        Other untracked files are left alone.

        Args:
            new_paths: Repository-relative paths created by the patches
        """
        self._git("add", "-u")
        if new_paths:
            self._git("add", "-f", "--", *new_paths)

    def staged_diff(self) -> str:
        return self._git("diff", "--cached")

    def commit(self, message: str) -> str:
        """
        Commit the staged changes.

        Returns:
            The new commit sha
        """
        self._git("commit", "-m", message)
        return self.repo.head.commit.hexsha

    def push(self, branch: str) -> None:
        self._git("push", self.remote, branch)

    def delete_branch(self, name: str) -> None:
        self._git("branch", "-D", name)

    def detach_head(self) -> None:
        self._git("checkout", "--detach")

    def checkout_default(self, candidates: Sequence[str]) -> Optional[str]:
        """
        Switch to the first candidate default branch that exists.

        Args:
            candidates: Branch names to try in order, e.g. ("main", "master")

        Returns:
            The branch switched to, or None if no candidate exists
        """
        for name in candidates:
            if not self.branch_exists(name):
                continue
            self.switch_branch(name)
            return name
        return None
