"""Tests for the system status probes."""

import subprocess
from pathlib import Path

from nixscope import sysinfo
from nixscope.sysinfo import collect_system_info, run_probe


class TestRunProbe:
    """Tests for run_probe function."""

    def test_missing_command(self):
        """A missing binary yields None."""
        assert run_probe(["nixscope-definitely-not-a-command"]) is None

    def test_nonzero_exit(self, monkeypatch):
        """A failing command yields None."""

        def fake_run(args, **kwargs):
            return subprocess.CompletedProcess(args, 1, stdout="", stderr="boom")

        monkeypatch.setattr(sysinfo.subprocess, "run", fake_run)

        assert run_probe(["git", "status"]) is None

    def test_timeout(self, monkeypatch):
        """A hanging command yields None."""

        def fake_run(args, **kwargs):
            raise subprocess.TimeoutExpired(args, kwargs["timeout"])

        monkeypatch.setattr(sysinfo.subprocess, "run", fake_run)

        assert run_probe(["brew", "outdated"]) is None


class TestCollectSystemInfo:
    """Tests for collect_system_info function."""

    def test_defaults_without_tools(self, monkeypatch, tmp_path: Path):
        """Without any tool every field keeps its default."""
        monkeypatch.setattr(sysinfo, "_find_tool", lambda name, fallback=None: None)
        monkeypatch.setattr(sysinfo, "SYSTEM_BIN_DIR", tmp_path / "missing")
        monkeypatch.setattr(sysinfo, "detect_hostname", lambda: "batman")

        info = collect_system_info(tmp_path)

        assert info.hostname == "batman"
        assert info.generation == "N/A"
        assert info.branch == "N/A"
        assert info.uncommitted == 0
        assert info.packages.total == 0

    def test_parses_probe_output(self, monkeypatch, tmp_path: Path):
        """Probe output is turned into counts."""
        outputs = {
            ("darwin-rebuild", "--list-generations"): "  41   2026-01-01\n  42   2026-02-01 (current)",
            ("git", "branch"): "main",
            ("git", "status"): " M flake.nix\n?? hosts/new.nix",
            ("brew", "list", "--cask"): "arc\nraycast\nzed",
            ("brew", "list", "--formula"): "git\njq",
            ("brew", "outdated"): "jq",
        }

        def fake_probe(args, cwd=None):
            for key, value in outputs.items():
                if args[0] == key[0] and all(part in args for part in key[1:]):
                    return value
            return None

        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        for name in ("git", "vim"):
            (bin_dir / name).write_text("")

        monkeypatch.setattr(sysinfo, "_find_tool", lambda name, fallback=None: name)
        monkeypatch.setattr(sysinfo, "run_probe", fake_probe)
        monkeypatch.setattr(sysinfo, "SYSTEM_BIN_DIR", bin_dir)

        info = collect_system_info(tmp_path)

        assert info.generation == "42"
        assert info.branch == "main"
        assert info.uncommitted == 2
        assert info.packages.gui_apps == 3
        assert info.packages.brew_cli == 2
        assert info.packages.nix_cli == 2
        assert info.updates == 1
