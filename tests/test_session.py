"""Tests for InspectionSession."""

import json
from pathlib import Path

from nixscope.config import resolve_config
from nixscope.output.json_writer import load_inspection, write_inspection
from nixscope.session import InspectionSession


class TestInspectionSession:
    """Tests for a full inspection pass."""

    def test_refresh_builds_everything(self, nix_repo: Path):
        """A refresh fills index, order, tree, packages and file tree."""
        session = InspectionSession(nix_repo, "batman")

        result = session.refresh()

        assert result is session.result
        assert len(result.index) == 9
        assert result.module_order.roots == [
            "hosts/shared/default.nix",
            "hosts/macbook/default.nix",
        ]
        assert result.composite_tree.file == "hosts/shared/default.nix"
        assert result.packages.formulas == ["jq", "wget"]
        assert result.packages.casks == ["arc", "firefox", "raycast"]
        assert result.packages.system_packages == ["curl", "git"]
        assert result.file_tree.children[0].name == "flake.nix"

    def test_refresh_ignored_while_running(self, nix_repo: Path):
        """A refresh requested during another is ignored."""
        session = InspectionSession(nix_repo, "batman")
        session._in_flight = True

        assert session.refresh() is None
        assert session.result is None

    def test_refresh_rereads_disk(self, nix_repo: Path):
        """Each refresh sees the current files."""
        session = InspectionSession(nix_repo, "batman")
        session.refresh()
        (nix_repo / "modules" / "extra.nix").write_text("{ imports = [ ./darwin ]; }")

        result = session.refresh()

        assert "modules/extra.nix" in [entry.file for entry in result.index]
        assert session.busy is False

    def test_config_excludes_and_patterns(self, nix_repo: Path):
        """Config excludes and extra patterns flow into the pass."""
        (nix_repo / "hosts" / "shared" / "fonts.nix").write_text(
            "{ pkgs, ... }: { fonts.packages = with pkgs; [ fira-code ]; }"
        )
        config = resolve_config(
            {
                "index": {"exclude": ["home-configurations/"]},
                "packages": {
                    "patterns": [
                        {
                            "name": "fonts",
                            "block": r"fonts\.packages\s*=\s*with\s+pkgs;\s*\[(.*?)\]",
                            "item": r"[\w-]+",
                        }
                    ]
                },
            }
        )

        result = InspectionSession(nix_repo, "batman", config).refresh()

        assert "home-configurations/batman.nix" not in [entry.file for entry in result.index]
        assert "fira-code" in result.packages.system_packages

    def test_no_roots(self, tmp_path: Path):
        """A repository without host roots has no composite tree."""
        (tmp_path / "flake.nix").write_text("{ }")

        result = InspectionSession(tmp_path, "batman").refresh()

        assert result.composite_tree is None
        assert result.module_order.roots == []
        assert [entry.file for entry in result.index] == ["flake.nix"]


class TestJsonWriter:
    """Tests for the JSON export."""

    def test_write_and_load(self, nix_repo: Path, tmp_path: Path):
        """Should write a JSON document with every section."""
        result = InspectionSession(nix_repo, "batman").refresh()
        output = tmp_path / "inspection.json"

        write_inspection(result, output)
        data = load_inspection(output)

        assert set(data) == {"metadata", "module_order", "composite_tree", "index", "packages", "file_tree"}
        assert data["metadata"]["hostname"] == "batman"
        assert data["metadata"]["files_indexed"] == 9
        assert data["module_order"]["machine_type"] == "macbook"
        assert data["composite_tree"]["file"] == "hosts/shared/default.nix"
        assert "packages" not in data["composite_tree"]["children"][1]

    def test_tree_omits_empty_packages(self, nix_repo: Path, tmp_path: Path):
        """Nodes without packages have no packages key."""
        result = InspectionSession(nix_repo, "batman").refresh()
        output = tmp_path / "inspection.json"
        write_inspection(result, output)

        with open(output) as f:
            data = json.load(f)

        fonts = data["composite_tree"]["children"][1]
        assert fonts["file"] == "hosts/shared/fonts.nix"
        assert fonts["children"] == []
        assert "cycle" not in fonts

    def test_creates_parent_directories(self, nix_repo: Path, tmp_path: Path):
        """Should create missing directories above the output file."""
        result = InspectionSession(nix_repo, "batman").refresh()
        output = tmp_path / "new" / "dir" / "out.json"

        write_inspection(result, output)

        assert load_inspection(output)["metadata"]["hostname"] == "batman"
