"""
TagPatch CLI Entry Point.

Usage:
    tagpatch @sveltejs/kit
    tagpatch @sveltejs/kit 1.5.0
    tagpatch --dry-run --repo /path/to/repo @sveltejs/kit 1.5.0
"""

import argparse
import sys
import time
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from tagpatch import __version__
from tagpatch.config import TagpatchConfig, load_config
from tagpatch.errors import ConfigError, TagpatchError
from tagpatch.graph import BranchWorkflow
from tagpatch.metrics import print_report, summarize
from tagpatch.patching import PatchMode, PatchSet
from tagpatch.vcs import GitRepository
from tagpatch.versions import resolve_versions

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tagpatch",
        description="TagPatch - backport file patches to every minor release line of a package",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tagpatch @sveltejs/kit
  tagpatch @sveltejs/kit 1.5.0
  tagpatch --dry-run --repo /path/to/repo @sveltejs/kit 1.5.0

Patches are files under the patch directory; each one targets the file
at the same relative path in the repository.
        """,
    )

    parser.add_argument(
        "package",
        nargs="?",
        help="Package to patch, e.g. @scope/name (required)",
    )
    parser.add_argument(
        "start_version",
        nargs="?",
        help="Minimum version to start patching from (optional)",
    )
    parser.add_argument(
        "--repo",
        help="Path to git repository (default: current directory)",
    )
    parser.add_argument(
        "--patches",
        help="Patch directory (default: $TAGPATCH_PATCH_DIR or ./patches)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Test patches without making changes (shows patch details)",
    )
    parser.add_argument(
        "--show-patches",
        action="store_true",
        help="Display parsed find/replace blocks without applying",
    )
    parser.add_argument(
        "--branch-scheme",
        choices=["minor", "patch"],
        help="Branch per minor line (minor) or per target release (patch)",
    )
    parser.add_argument(
        "--remote",
        help="Remote to push branches to (default: $TAGPATCH_REMOTE or origin)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Echo git commands",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce output verbosity",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"TagPatch {__version__}",
    )

    return parser


def print_mode_banner(config: TagpatchConfig) -> None:
    if config.mode is PatchMode.APPLY:
        return

    notice = "DRY RUN MODE" if config.mode is PatchMode.DRY_RUN else "SHOW PATCHES MODE"
    console.print("[yellow]==========================================[/yellow]")
    console.print(f"[yellow]{notice} - No changes will be made[/yellow]")
    console.print("[yellow]==========================================[/yellow]")
    console.print()


def run(config: TagpatchConfig) -> list:
    """
    Resolve versions and run the branch workflow for each.

    Raises:
        TagpatchError: On any setup, resolution or git failure
    """
    vcs = GitRepository(config.repo_path, remote=config.remote, verbose=config.verbose)
    patch_set = PatchSet.load(config.patch_dir)

    versions = resolve_versions(vcs, config.package_name, config.start_version)

    console.print("[cyan]Found versions to patch:[/cyan]")
    for version in versions:
        console.print(str(version))
    console.print()

    print_mode_banner(config)

    workflow = BranchWorkflow(
        vcs,
        patch_set,
        config.package_name,
        mode=config.mode,
        branch_scheme=config.branch_scheme,
        default_branches=config.default_branches,
    )
    return workflow.run(versions)


def main(argv: Optional[list[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.package:
        console.print("[red]Error: Package name is required[/red]")
        console.print()
        parser.print_help()
        sys.exit(1)

    try:
        config = load_config(
            args.package,
            start_version=args.start_version,
            repo_path=args.repo,
            patch_dir=args.patches,
            dry_run=args.dry_run,
            show_patches=args.show_patches,
            branch_scheme=args.branch_scheme,
            remote=args.remote,
            verbose=args.verbose,
        )
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    if not args.quiet:
        console.print(Panel.fit(
            f"[bold]Package:[/bold] {escape(config.package_name)}\n"
            f"[bold]Start Version:[/bold] {config.start_version or 'all'}\n"
            f"[bold]Repository:[/bold] {escape(str(config.repo_path))}\n"
            f"[bold]Patches:[/bold] {escape(str(config.patch_dir))}\n"
            f"[bold]Branch Scheme:[/bold] {config.branch_scheme.value}",
            title=f"TagPatch v{__version__}",
        ))

    start_time = time.time()

    try:
        states = run(config)

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)

    except TagpatchError as e:
        console.print(f"\n[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    duration = time.time() - start_time

    if states and not args.quiet:
        console.print()
        print_report(states)

    stats = summarize(states)
    console.print()
    console.print(Panel.fit(
        f"[bold green]All versions patched successfully![/bold green]\n\n"
        f"[bold]Versions:[/bold] {stats['versions']}\n"
        f"[bold]Committed:[/bold] {stats['committed']}\n"
        f"[bold]Skipped (no changes):[/bold] {stats['skipped']}\n"
        f"[bold]Discarded (dry run):[/bold] {stats['discarded']}\n"
        f"[bold]Documents failed:[/bold] {stats['documents_failed']}\n"
        f"[bold]Duration:[/bold] {duration:.1f}s",
        title="Success",
        border_style="green",
    ))
    sys.exit(0)


if __name__ == "__main__":
    main()
