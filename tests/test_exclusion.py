"""Tests for the exclusion module."""

from pathlib import Path

from nixscope.exclusion import DEFAULT_SKIP_DIRS, FileExcluder


class TestDefaultExcludes:
    """Tests for default exclusion patterns."""

    def test_default_skip_dirs(self) -> None:
        """node_modules is skipped by default."""
        assert "node_modules" in DEFAULT_SKIP_DIRS

    def test_excludes_hidden_entries(self, tmp_path: Path) -> None:
        """Should exclude hidden files and directories."""
        excluder = FileExcluder(tmp_path)

        assert excluder.should_exclude(tmp_path / ".git" / "config")
        assert excluder.should_exclude(tmp_path / "hosts" / ".secret.nix")

    def test_excludes_node_modules(self, tmp_path: Path) -> None:
        """Should exclude node_modules at any depth."""
        excluder = FileExcluder(tmp_path)

        assert excluder.should_exclude(tmp_path / "tui" / "node_modules" / "x" / "a.nix")

    def test_does_not_exclude_config_files(self, tmp_path: Path) -> None:
        """Should not exclude normal configuration files."""
        excluder = FileExcluder(tmp_path)

        assert not excluder.should_exclude(tmp_path / "hosts" / "shared" / "default.nix")
        assert not excluder.should_exclude(tmp_path / "flake.nix")

    def test_outside_root(self, tmp_path: Path) -> None:
        """Paths outside the root are never excluded."""
        excluder = FileExcluder(tmp_path / "repo")

        assert not excluder.should_exclude(tmp_path / "other" / "a.nix")

    def test_custom_skip_dirs(self, tmp_path: Path) -> None:
        """skip_dirs replaces the dependency cache list."""
        excluder = FileExcluder(tmp_path, skip_dirs=("result",))

        assert excluder.should_exclude(tmp_path / "result" / "a.nix")
        assert not excluder.should_exclude(tmp_path / "node_modules" / "a.nix")


class TestGitignore:
    """Tests for .gitignore handling."""

    def test_gitignore_ignored_by_default(self, tmp_path: Path) -> None:
        """.gitignore does not hide files unless asked."""
        (tmp_path / ".gitignore").write_text("secrets/\n")
        excluder = FileExcluder(tmp_path)

        assert not excluder.should_exclude(tmp_path / "secrets" / "a.nix")

    def test_respect_gitignore(self, tmp_path: Path) -> None:
        """With respect_gitignore, .gitignore patterns apply."""
        (tmp_path / ".gitignore").write_text("# comment\nsecrets/\n*.local.nix\n")
        excluder = FileExcluder(tmp_path, respect_gitignore=True)

        assert excluder.should_exclude(tmp_path / "secrets" / "a.nix")
        assert excluder.should_exclude(tmp_path / "hosts" / "x.local.nix")
        assert not excluder.should_exclude(tmp_path / "hosts" / "x.nix")

    def test_extra_excludes(self, tmp_path: Path) -> None:
        """Patterns from the config file are applied after the defaults."""
        excluder = FileExcluder(tmp_path, extra_excludes=["archive/"])

        assert excluder.should_exclude(tmp_path / "archive" / "b.nix")
        assert not excluder.should_exclude(tmp_path / "a.nix")
        assert excluder.patterns[-1] == "archive/"
        assert "secrets/" not in excluder.patterns
