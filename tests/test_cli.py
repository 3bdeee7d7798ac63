"""
Tests for the TagPatch command line and run configuration.
"""

from pathlib import Path

import pytest

from tagpatch import __version__
from tagpatch.config import load_config
from tagpatch.errors import ConfigError
from tagpatch.main import main
from tagpatch.patching import PatchMode
from tagpatch.versions import BranchScheme, Version

ENV_VARS = ("TAGPATCH_PATCH_DIR", "TAGPATCH_REMOTE", "TAGPATCH_BRANCH_SCHEME", "TAGPATCH_DEFAULT_BRANCHES")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def run_main(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestLoadConfig:
    def test_defaults(self):
        config = load_config("@sveltejs/kit")

        assert config.package_name == "@sveltejs/kit"
        assert config.start_version is None
        assert config.mode is PatchMode.APPLY
        assert config.branch_scheme is BranchScheme.MINOR_LINE
        assert config.remote == "origin"
        assert config.default_branches == ("main", "master")
        assert config.patch_dir == Path("patches").resolve()

    def test_default_branches_shared_with_workflow(self):
        import tagpatch.config
        from tagpatch.versions.naming import DEFAULT_BRANCHES

        assert tagpatch.config.DEFAULT_BRANCHES is DEFAULT_BRANCHES
        assert not hasattr(tagpatch.config, "BranchWorkflow")

    def test_start_version_bound(self):
        assert load_config("pkg", start_version="1.5").start_version == Version(1, 5, 0)

    @pytest.mark.parametrize(
        "dry_run,show_patches,expected",
        [
            (False, False, PatchMode.APPLY),
            (True, False, PatchMode.DRY_RUN),
            (False, True, PatchMode.SHOW_ONLY),
            (True, True, PatchMode.SHOW_ONLY),
        ],
    )
    def test_mode_selection(self, dry_run, show_patches, expected):
        assert load_config("pkg", dry_run=dry_run, show_patches=show_patches).mode is expected

    def test_environment_overrides_defaults(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TAGPATCH_PATCH_DIR", str(tmp_path / "env-patches"))
        monkeypatch.setenv("TAGPATCH_REMOTE", "upstream")
        monkeypatch.setenv("TAGPATCH_BRANCH_SCHEME", "patch")
        monkeypatch.setenv("TAGPATCH_DEFAULT_BRANCHES", "trunk, main")

        config = load_config("pkg")

        assert config.patch_dir == (tmp_path / "env-patches").resolve()
        assert config.remote == "upstream"
        assert config.branch_scheme is BranchScheme.PATCH_RELEASE
        assert config.default_branches == ("trunk", "main")

    def test_flags_override_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TAGPATCH_REMOTE", "upstream")
        monkeypatch.setenv("TAGPATCH_BRANCH_SCHEME", "patch")

        config = load_config("pkg", remote="fork", branch_scheme="minor", patch_dir=str(tmp_path))

        assert config.remote == "fork"
        assert config.branch_scheme is BranchScheme.MINOR_LINE
        assert config.patch_dir == tmp_path.resolve()

    @pytest.mark.parametrize("kwargs", [{"start_version": "one"}, {"branch_scheme": "weekly"}])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            load_config("pkg", **kwargs)

    def test_blank_package(self):
        with pytest.raises(ConfigError):
            load_config("  ")

    def test_empty_default_branches(self, monkeypatch):
        monkeypatch.setenv("TAGPATCH_DEFAULT_BRANCHES", " , ")
        with pytest.raises(ConfigError):
            load_config("pkg")


class TestMain:
    def test_missing_package(self, capsys):
        assert run_main([]) == 1
        assert "Package name is required" in capsys.readouterr().out

    def test_version_flag(self, capsys):
        assert run_main(["--version"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_invalid_start_version(self):
        assert run_main(["pkg", "not.a.version"]) == 1

    def test_not_a_repository(self, tmp_path, patch_dir):
        plain = tmp_path / "plain"
        plain.mkdir()
        assert run_main(["pkg", "--repo", str(plain), "--patches", str(patch_dir)]) == 1

    def test_missing_patch_directory(self, release_repo, tmp_path):
        argv = ["pkg", "--repo", release_repo.working_tree_dir, "--patches", str(tmp_path / "nope")]
        assert run_main(argv) == 1

    def test_dry_run_changes_nothing(self, release_repo, origin_repo, patch_dir, capsys):
        argv = ["pkg", "--dry-run", "--repo", release_repo.working_tree_dir, "--patches", str(patch_dir)]

        assert run_main(argv) == 0

        out = capsys.readouterr().out
        assert "DRY RUN MODE" in out
        assert "1.2.5" in out and "1.3.0" in out
        assert sorted(h.name for h in release_repo.heads) == ["main"]
        assert list(origin_repo.heads) == []
        assert release_repo.git.status("--porcelain") == ""

    def test_apply_pushes_branch(self, release_repo, origin_repo, patch_dir):
        argv = ["pkg", "1.2", "--quiet", "--repo", release_repo.working_tree_dir, "--patches", str(patch_dir)]

        assert run_main(argv) == 0

        assert [h.name for h in origin_repo.heads] == ["pkg@1.2"]
        assert release_repo.active_branch.name == "main"

    def test_start_version_above_all_tags(self, release_repo, origin_repo, patch_dir):
        argv = ["pkg", "2.0.0", "--repo", release_repo.working_tree_dir, "--patches", str(patch_dir)]

        assert run_main(argv) == 0
        assert list(origin_repo.heads) == []
