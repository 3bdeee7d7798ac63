"""
TagPatch

Backports literal file patches to the latest release of every minor
line of a package, one branch per line.
"""

__version__ = "0.1.0"
__author__ = "TagPatch Team"

from tagpatch.state import VersionState
from tagpatch.graph import BranchWorkflow

__all__ = ["VersionState", "BranchWorkflow", "__version__"]
