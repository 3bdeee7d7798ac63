"""
Run Configuration for TagPatch.

Command-line flags win over environment variables, which win over
defaults. A `.env` file in the working directory is loaded first.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from tagpatch.errors import ConfigError
from tagpatch.patching.apply import PatchMode
from tagpatch.versions.naming import DEFAULT_BRANCHES, BranchScheme
from tagpatch.versions.resolver import Version

# Load environment variables
load_dotenv()

DEFAULT_PATCH_DIR = "patches"
DEFAULT_REMOTE = "origin"


@dataclass
class TagpatchConfig:
    """Settings for one run."""

    package_name: str
    start_version: Optional[Version] = None

    # Locations
    repo_path: Path = Path(".")
    patch_dir: Path = Path(DEFAULT_PATCH_DIR)

    # Behavior
    mode: PatchMode = PatchMode.APPLY
    branch_scheme: BranchScheme = BranchScheme.MINOR_LINE

    # Git
    remote: str = DEFAULT_REMOTE
    default_branches: tuple[str, ...] = DEFAULT_BRANCHES

    verbose: bool = False


def _split_names(value: str) -> tuple[str, ...]:
    return tuple(name.strip() for name in value.split(",") if name.strip())


def load_config(
    package_name: Optional[str],
    start_version: Optional[str] = None,
    repo_path: Optional[str] = None,
    patch_dir: Optional[str] = None,
    dry_run: bool = False,
    show_patches: bool = False,
    branch_scheme: Optional[str] = None,
    remote: Optional[str] = None,
    verbose: bool = False,
) -> TagpatchConfig:
    """
    Build the run configuration.

    Args:
        package_name: Package to patch (required)
        start_version: Inclusive lower bound, e.g. "1.5" or "1.5.2"
        repo_path: Repository path (default: current directory)
        patch_dir: Patch directory (default: TAGPATCH_PATCH_DIR or ./patches)
        dry_run: Report matches without changing anything
        show_patches: Display every block without changing anything
        branch_scheme: "minor" or "patch" (default: TAGPATCH_BRANCH_SCHEME or minor)
        remote: Push remote (default: TAGPATCH_REMOTE or origin)
        verbose: Echo git commands

    Returns:
        Validated configuration

    Raises:
        ConfigError: If any value is invalid
    """
    if not package_name or not package_name.strip():
        raise ConfigError("Package name is required")

    bound = Version.parse_bound(start_version) if start_version else None

    if show_patches:
        mode = PatchMode.SHOW_ONLY
    elif dry_run:
        mode = PatchMode.DRY_RUN
    else:
        mode = PatchMode.APPLY

    scheme_name = branch_scheme or os.getenv("TAGPATCH_BRANCH_SCHEME") or BranchScheme.MINOR_LINE.value

    default_branches = DEFAULT_BRANCHES
    if os.getenv("TAGPATCH_DEFAULT_BRANCHES") is not None:
        default_branches = _split_names(os.getenv("TAGPATCH_DEFAULT_BRANCHES"))
        if not default_branches:
            raise ConfigError("TAGPATCH_DEFAULT_BRANCHES must name at least one branch")

    return TagpatchConfig(
        package_name=package_name.strip(),
        start_version=bound,
        repo_path=Path(repo_path or ".").resolve(),
        patch_dir=Path(patch_dir or os.getenv("TAGPATCH_PATCH_DIR") or DEFAULT_PATCH_DIR).resolve(),
        mode=mode,
        branch_scheme=BranchScheme.from_name(scheme_name),
        remote=remote or os.getenv("TAGPATCH_REMOTE") or DEFAULT_REMOTE,
        default_branches=default_branches,
        verbose=verbose,
    )
