"""
Shared fixtures for TagPatch tests.

Provides:
- Real temporary git repositories with a bare origin remote
- A directory-backed fake version control for workflow tests
"""

import fnmatch
import shutil
from pathlib import Path

import pytest
from git import Repo

from tagpatch.errors import GitOperationError

INDEX_V123 = """export function start() {
  function do_nothing {
    return;
  }
}
"""

INDEX_V125 = """// 1.2.5
export function start() {
  function do_nothing {
    return;
  }
}
"""

INDEX_V130 = """// 1.3.0
export function start() {
  function do_something {
    return 1;
  }
}
"""

SECURITY_PATCH = """// find:
function do_nothing {
// replace with:
function do_nothing_safely {"""


def write_files(root: Path, files: dict) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)


def read_files(root: Path) -> dict:
    files = {}
    for path in sorted(root.rglob("*")):
        if path.is_file() and ".git" not in path.relative_to(root).parts:
            with open(path, "r", encoding="utf-8", newline="") as f:
                files[path.relative_to(root).as_posix()] = f.read()
    return files


def commit_files(repo: Repo, files: dict, message: str) -> None:
    write_files(Path(repo.working_tree_dir), files)
    repo.git.add("-A")
    repo.git.commit("-m", message)


@pytest.fixture
def origin_repo(tmp_path):
    """Bare repository acting as origin."""
    return Repo.init(tmp_path / "origin.git", bare=True)


@pytest.fixture
def git_repo(tmp_path, origin_repo):
    """Empty working repository on main with origin configured."""
    repo = Repo.init(tmp_path / "work", initial_branch="main")

    with repo.config_writer() as config:
        config.set_value("user", "name", "TagPatch Tests")
        config.set_value("user", "email", "tests@tagpatch.invalid")
        config.set_value("commit", "gpgsign", "false")
        config.set_value("tag", "gpgsign", "false")

    repo.create_remote("origin", str(tmp_path / "origin.git"))
    return repo


@pytest.fixture
def release_repo(git_repo):
    """
    Repository with tags pkg@1.2.3, pkg@1.2.5 and pkg@1.3.0, plus noise tags.

    `function do_nothing {` exists up to 1.2.5 and is gone in 1.3.0.
    """
    commit_files(git_repo, {"src/index.js": INDEX_V123}, "Release 1.2.3")
    git_repo.create_tag("pkg@1.2.3")

    commit_files(git_repo, {"src/index.js": INDEX_V125}, "Release 1.2.5")
    git_repo.create_tag("pkg@1.2.5")
    git_repo.create_tag("pkg@1.2.5-beta.1")

    commit_files(git_repo, {"src/index.js": INDEX_V130}, "Release 1.3.0")
    git_repo.create_tag("pkg@1.3.0")
    git_repo.create_tag("other@9.9.9")

    return git_repo


@pytest.fixture
def patch_dir(tmp_path):
    """Patch directory holding the do_nothing security patch."""
    root = tmp_path / "patches"
    write_files(root, {"src/index.js": SECURITY_PATCH})
    return root


class FakeVersionControl:
    """
    Directory-backed stand-in for GitRepository.

    Tags and branches are snapshots of the working tree files. Failures
    can be injected per operation name via `fail_on`.
    """

    def __init__(self, root: Path, tags: dict, defaults=("main",)):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.tags = tags
        self.branches = {name: {} for name in defaults}
        self.head = defaults[0] if defaults else None
        self.fail_on = set()
        self.calls = []
        self.commits = []
        self.pushed = []
        self.staged = []

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise GitOperationError(f"git {name} failed", command=name, stderr="injected failure")

    def _load_tree(self, files):
        for entry in self.root.iterdir():
            if entry.is_dir():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        write_files(self.root, files)

    def list_tags(self, pattern):
        self._record("list_tags", pattern)
        return [tag for tag in self.tags if fnmatch.fnmatchcase(tag, pattern)]

    def checkout_detached(self, tag):
        self._record("checkout_detached", tag)
        if tag not in self.tags:
            raise GitOperationError(f"git checkout {tag} failed", stderr="unknown revision")
        self._load_tree(self.tags[tag])
        self.head = None
        self.detached_files = dict(self.tags[tag])

    def branch_exists(self, name):
        self._record("branch_exists", name)
        return name in self.branches

    def create_branch(self, name):
        self._record("create_branch", name)
        self.branches[name] = read_files(self.root)
        self.head = name

    def switch_branch(self, name):
        self._record("switch_branch", name)
        self._load_tree(self.branches[name])
        self.head = name

    def current_branch(self):
        return self.head or "HEAD"

    def _tip(self):
        return self.branches[self.head] if self.head else self.detached_files

    def is_dirty(self):
        self._record("is_dirty")
        tip = self._tip()
        files = read_files(self.root)
        return any(files.get(rel) != content for rel, content in tip.items())

    def stage_all(self, new_paths=()):
        self._record("stage_all", tuple(new_paths))
        self.staged = list(new_paths)

    def staged_diff(self):
        return ""

    def commit(self, message):
        self._record("commit", message)
        files = read_files(self.root)
        tracked = [rel for rel in self._tip() if rel in files]
        self.branches[self.head] = {rel: files[rel] for rel in [*tracked, *self.staged]}
        self.commits.append((self.head, message))
        return f"{len(self.commits):040d}"

    def push(self, branch):
        self._record("push", branch)
        self.pushed.append(branch)

    def delete_branch(self, name):
        self._record("delete_branch", name)
        if name == self.head:
            raise GitOperationError(f"Cannot delete checked out branch {name}")
        del self.branches[name]

    def detach_head(self):
        self._record("detach_head")
        if self.head:
            self.detached_files = self.branches[self.head]
        self.head = None

    def checkout_default(self, candidates):
        for name in candidates:
            if name in self.branches:
                self.switch_branch(name)
                return name
        return None


@pytest.fixture
def fake_vcs(tmp_path):
    """Fake repository with the same releases as `release_repo`."""
    tags = {
        "pkg@1.2.3": {"src/index.js": INDEX_V123},
        "pkg@1.2.5": {"src/index.js": INDEX_V125},
        "pkg@1.3.0": {"src/index.js": INDEX_V130},
        "pkg@latest": {"src/index.js": INDEX_V130},
    }
    return FakeVersionControl(tmp_path / "fake-repo", tags)
