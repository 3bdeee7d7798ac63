"""
Tag, branch and commit naming for TagPatch.
"""

from enum import Enum

from tagpatch.errors import ConfigError
from tagpatch.versions.resolver import Version

# Branches tried in order when leaving a version branch
DEFAULT_BRANCHES = ("main", "master")


class BranchScheme(str, Enum):
    """How the working branch for a version is named."""

    # pkg@1.2, reused across runs
    MINOR_LINE = "minor"

    # patch/pkg@1.2.6, one per target release
    PATCH_RELEASE = "patch"

    @classmethod
    def from_name(cls, name: str) -> "BranchScheme":
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(scheme.value for scheme in cls)
            raise ConfigError(f"Unknown branch scheme {name!r} (expected one of: {choices})") from None


def tag_name(package_name: str, version: Version) -> str:
    return f"{package_name}@{version}"


def branch_name(package_name: str, version: Version, scheme: BranchScheme) -> str:
    """
    Compute the working branch name for a version.

    Args:
        package_name: Package being patched
        version: Source release (the tag that gets checked out)
        scheme: Naming scheme for this run

    Returns:
        Branch name
    """
    if scheme is BranchScheme.PATCH_RELEASE:
        return f"patch/{package_name}@{version.next_patch()}"
    return f"{package_name}@{version.major}.{version.minor}"


def commit_message(package_name: str, version: Version) -> str:
    return (
        f"Security patch for {tag_name(package_name, version)}\n\n"
        f"Applied updates to version {version}"
    )
