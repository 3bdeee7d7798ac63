"""
LangGraph Orchestration for TagPatch.

Implements the per-version branch lifecycle as a state machine:
    checkout_tag -> enter_branch -> apply_patches
        -> discard_branch                      (dry run / show only)
        -> detect_changes -> prune_branch      (no diff)
                          -> commit_and_push   (diff)

Git failures raise out of the graph and abort the run. Versions
already committed and pushed are left as they are.
"""

from typing import Literal, Optional, Sequence

from langgraph.graph import END, StateGraph
from rich.console import Console
from rich.markup import escape

from tagpatch.patching.apply import DocumentAction, PatchEngine, PatchMode
from tagpatch.patching.patchset import PatchSet
from tagpatch.state import Phase, VersionState
from tagpatch.vcs.diffstat import summarize_diff
from tagpatch.versions.naming import (
    DEFAULT_BRANCHES,
    BranchScheme,
    branch_name,
    commit_message,
    tag_name,
)
from tagpatch.versions.resolver import Version

console = Console()


def created_paths(state: VersionState) -> list[str]:
    """Target paths of the documents that created a new file."""
    return [d.target_path for d in state.documents if d.action is DocumentAction.CREATED]


class BranchWorkflow:
    """
    Drives git through checkout, patch, verify, commit/push and cleanup
    for each resolved version.

    Args:
        vcs: Version control capability (GitRepository or compatible)
        patch_set: Patch documents applied to every version
        package_name: Package whose tags are patched
        mode: Patch mode; anything but APPLY discards the branch afterwards
        branch_scheme: Branch naming scheme for the whole run
        default_branches: Branches tried in order when leaving a version
        engine: Patch engine (built on the repository root by default)
    """

    def __init__(
        self,
        vcs,
        patch_set: PatchSet,
        package_name: str,
        mode: PatchMode = PatchMode.APPLY,
        branch_scheme: BranchScheme = BranchScheme.MINOR_LINE,
        default_branches: Sequence[str] = DEFAULT_BRANCHES,
        engine: Optional[PatchEngine] = None,
    ):
        self.vcs = vcs
        self.patch_set = patch_set
        self.package_name = package_name
        self.mode = mode
        self.branch_scheme = branch_scheme
        self.default_branches = tuple(default_branches)
        self.engine = engine or PatchEngine(vcs.root, vcs.current_branch)
        self.graph = self.build_graph()

    # ========================================================================
    # Node Functions
    # ========================================================================

    def checkout_tag(self, state: VersionState) -> dict:
        """Init -> CheckedOutTag."""
        tag = tag_name(self.package_name, state.version)
        next_tag = tag_name(self.package_name, state.version.next_patch())

        console.print("[cyan]==========================================[/cyan]")
        console.print(f"[cyan]Processing: {escape(tag)} -> {escape(next_tag)}[/cyan]")
        console.print("[cyan]==========================================[/cyan]")

        console.print(f"Checking out {escape(tag)}...")
        self.vcs.checkout_detached(tag)

        return {"tag": tag, "phase": Phase.CHECKED_OUT_TAG}

    def enter_branch(self, state: VersionState) -> dict:
        """CheckedOutTag -> OnBranch: reuse the branch or create it here."""
        name = branch_name(self.package_name, state.version, self.branch_scheme)

        if self.vcs.branch_exists(name):
            console.print(f"Switching to existing branch {escape(name)}...")
            self.vcs.switch_branch(name)
            reused = True
        else:
            console.print(f"Creating branch {escape(name)}...")
            self.vcs.create_branch(name)
            reused = False

        return {"branch_name": name, "branch_reused": reused, "phase": Phase.ON_BRANCH}

    def apply_patches(self, state: VersionState) -> dict:
        """OnBranch -> Patched."""
        documents = self.engine.apply_patch_set(self.patch_set, self.mode)
        return {"documents": documents, "phase": Phase.PATCHED}

    def discard_branch(self, state: VersionState) -> dict:
        """Patched -> DiscardedDryRun: nothing is committed or pushed."""
        label = "DRY RUN" if self.mode is PatchMode.DRY_RUN else "SHOW PATCHES"
        console.print(f"[yellow]{label}: Skipping commit/push steps[/yellow]")

        self._leave_branch(state.branch_name)
        console.print()

        return {"phase": Phase.DISCARDED_DRY_RUN}

    def detect_changes(self, state: VersionState) -> dict:
        """A version changed if tracked files differ or a patch created a file."""
        return {"has_diff": bool(created_paths(state)) or self.vcs.is_dirty()}

    def prune_branch(self, state: VersionState) -> dict:
        """Patched -> SkippedNoDiff."""
        console.print(f"[bright_black]No changes to commit for {escape(state.tag)}, skipping...[/bright_black]")
        self._leave_branch(state.branch_name)
        return {"phase": Phase.SKIPPED_NO_DIFF}

    def commit_and_push(self, state: VersionState) -> dict:
        """Patched -> Committed. Failures here abort the whole run."""
        console.print("Committing changes...")
        self.vcs.stage_all(created_paths(state))

        stats = summarize_diff(self.vcs.staged_diff())
        if stats is not None:
            console.print(f"[dim]{stats}[/dim]")

        sha = self.vcs.commit(commit_message(self.package_name, state.version))

        console.print("Pushing branch...")
        self.vcs.push(state.branch_name)
        console.print()

        return {
            "diff_stats": stats,
            "commit_sha": sha,
            "pushed": True,
            "phase": Phase.COMMITTED,
        }

    def _leave_branch(self, name: str) -> None:
        if self.vcs.checkout_default(self.default_branches) is None:
            # The branch cannot be deleted while checked out
            self.vcs.detach_head()
        self.vcs.delete_branch(name)

    # ========================================================================
    # Conditional Edges
    # ========================================================================

    def route_after_patches(self, state: VersionState) -> Literal["discard", "inspect"]:
        if not self.mode.writes:
            return "discard"
        return "inspect"

    def route_after_detect(self, state: VersionState) -> Literal["commit", "prune"]:
        if state.has_diff:
            return "commit"
        return "prune"

    # ========================================================================
    # Graph Builder
    # ========================================================================

    def build_graph(self):
        """
        Build the per-version state machine.

        Returns:
            Compiled LangGraph state machine
        """
        graph = StateGraph(VersionState)

        graph.add_node("checkout_tag", self.checkout_tag)
        graph.add_node("enter_branch", self.enter_branch)
        graph.add_node("apply_patches", self.apply_patches)
        graph.add_node("discard_branch", self.discard_branch)
        graph.add_node("detect_changes", self.detect_changes)
        graph.add_node("prune_branch", self.prune_branch)
        graph.add_node("commit_and_push", self.commit_and_push)

        graph.set_entry_point("checkout_tag")

        graph.add_edge("checkout_tag", "enter_branch")
        graph.add_edge("enter_branch", "apply_patches")

        graph.add_conditional_edges(
            "apply_patches",
            self.route_after_patches,
            {
                "discard": "discard_branch",
                "inspect": "detect_changes",
            }
        )

        graph.add_conditional_edges(
            "detect_changes",
            self.route_after_detect,
            {
                "commit": "commit_and_push",
                "prune": "prune_branch",
            }
        )

        graph.add_edge("discard_branch", END)
        graph.add_edge("prune_branch", END)
        graph.add_edge("commit_and_push", END)

        return graph.compile()

    # ========================================================================
    # Run
    # ========================================================================

    def run_version(self, version: Version) -> VersionState:
        """Run the state machine for one version."""
        result = self.graph.invoke(VersionState(version=version))
        if isinstance(result, dict):
            result = VersionState(**result)
        return result

    def run(self, versions: Sequence[Version]) -> list[VersionState]:
        """
        Process versions in order, then return to the default branch.

        Raises:
            GitOperationError: On the first git failure; later versions are
                not processed
        """
        results = [self.run_version(version) for version in versions]

        console.print("Returning to main branch...")
        self.vcs.checkout_default(self.default_branches)

        return results
