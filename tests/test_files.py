"""Tests for the configuration file browser."""

from pathlib import Path

from nixscope.analysis.files import build_file_tree


class TestBuildFileTree:
    """Tests for build_file_tree function."""

    def test_manifest_first_then_browse_dirs(self, nix_repo: Path):
        """Manifest comes first, then hosts, modules and home configurations."""
        tree = build_file_tree(nix_repo)

        assert tree.is_dir
        assert [child.name for child in tree.children] == [
            "flake.nix",
            "hosts",
            "modules",
            "home-configurations",
        ]

    def test_file_nodes_carry_import_counts(self, nix_repo: Path):
        """File nodes record how many imports they declare."""
        tree = build_file_tree(nix_repo)
        hosts = tree.children[1]
        shared = next(child for child in hosts.children if child.name == "shared")
        default = next(child for child in shared.children if child.name == "default.nix")

        assert default.import_count == 2
        assert default.size > 0

    def test_skips_missing_dirs(self, tmp_path: Path):
        """Missing directories are left out."""
        (tmp_path / "modules").mkdir()
        (tmp_path / "modules" / "a.nix").write_text("{ }")
        (tmp_path / "modules" / "notes.md").write_text("hi")

        tree = build_file_tree(tmp_path)

        assert [child.name for child in tree.children] == ["modules"]
        assert [child.name for child in tree.children[0].children] == ["a.nix"]

    def test_to_dict(self, nix_repo: Path):
        """Should serialize directories and files."""
        data = build_file_tree(nix_repo).to_dict()

        assert data["type"] == "directory"
        assert data["children"][0] == {
            "name": "flake.nix",
            "type": "file",
            "imports": 0,
            "size": (nix_repo / "flake.nix").stat().st_size,
        }
