"""
Version Resolution for TagPatch.

Turns the package's release tags into the list of minor lines to patch:
- Malformed tags are dropped
- Only the latest patch release of each minor line survives
- Optional inclusive lower bound
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from tagpatch.errors import ConfigError, GitOperationError, ResolutionError

# Strict release suffix: exactly three dot-separated integers
VERSION_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")

# Lower bound: one to three components
BOUND_PATTERN = re.compile(r"([0-9]+)(?:\.([0-9]+))?(?:\.([0-9]+))?")


@dataclass(frozen=True, order=True)
class Version:
    """A release version, ordered component-wise."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> Optional["Version"]:
        """Parse a strict `<int>.<int>.<int>` string, or return None."""
        match = VERSION_PATTERN.fullmatch(text)
        if not match:
            return None
        return cls(*(int(part) for part in match.groups()))

    @classmethod
    def parse_bound(cls, text: str) -> "Version":
        """
        Parse a lower-bound version.

        Missing trailing components default to zero, so "1.5" is 1.5.0.

        Raises:
            ConfigError: If the text is not a version
        """
        match = BOUND_PATTERN.fullmatch(text.strip())
        if not match:
            raise ConfigError(f"Invalid start version: {text!r}")
        return cls(*(int(part or 0) for part in match.groups()))

    @property
    def minor_line(self) -> tuple[int, int]:
        return (self.major, self.minor)

    def next_patch(self) -> "Version":
        return Version(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def select_versions(
    tags: Iterable[str],
    package_name: str,
    start_version: Optional[Version] = None,
) -> list[Version]:
    """
    Pick the versions to patch from a list of tag names.

    Args:
        tags: Tag names, e.g. "pkg@1.2.3"
        package_name: Package whose tags are considered
        start_version: Inclusive lower bound

    Returns:
        Latest patch release of each minor line, ascending
    """
    prefix = f"{package_name}@"
    latest: dict[tuple[int, int], Version] = {}

    for tag in tags:
        tag = tag.strip()
        if not tag.startswith(prefix):
            continue

        version = Version.parse(tag[len(prefix):])
        if version is None:
            continue

        current = latest.get(version.minor_line)
        if current is None or version.patch > current.patch:
            latest[version.minor_line] = version

    versions = sorted(latest.values())

    if start_version is not None:
        versions = [v for v in versions if v >= start_version]

    return versions


def resolve_versions(
    vcs,
    package_name: str,
    start_version: Union[Version, str, None] = None,
) -> list[Version]:
    """
    List the package's tags in the repository and select versions to patch.

    Args:
        vcs: Version control capability providing `list_tags`
        package_name: Package whose tags are considered
        start_version: Inclusive lower bound (Version or version string)

    Returns:
        Ordered versions to patch

    Raises:
        ResolutionError: If the tags cannot be listed
    """
    if isinstance(start_version, str):
        start_version = Version.parse_bound(start_version)

    try:
        tags = vcs.list_tags(f"{package_name}@*")
    except GitOperationError as e:
        raise ResolutionError(f"Could not list tags for {package_name}: {e}", cause=e) from e

    return select_versions(tags, package_name, start_version)
