"""System status probes for the dashboard header.

Every probe shells out with a timeout. A probe that fails leaves its field
at the default value, so collecting never raises.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from nixscope.analysis.hosts import detect_hostname
from nixscope.logging import get_logger
from nixscope.models.system import PackageCounts, SystemInfo

logger = get_logger("sysinfo")

PROBE_TIMEOUT = 10

# Locations used when the tools are not on PATH
DARWIN_REBUILD_FALLBACK = "/run/current-system/sw/bin/darwin-rebuild"
BREW_FALLBACK = "/opt/homebrew/bin/brew"
SYSTEM_BIN_DIR = Path("/run/current-system/sw/bin")


def _find_tool(name: str, fallback: str | None = None) -> str | None:
    found = shutil.which(name)
    if found:
        return found
    if fallback and Path(fallback).exists():
        return fallback
    return None


def run_probe(args: list[str], cwd: Path | None = None) -> str | None:
    """Run a command and return its stripped stdout, or None on failure."""
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            cwd=cwd,
            timeout=PROBE_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Probe %s failed: %s", args[0], e)
        return None
    if result.returncode != 0:
        logger.debug("Probe %s exited with %d", " ".join(args), result.returncode)
        return None
    return result.stdout.strip()


def _count_lines(output: str | None) -> int:
    if not output:
        return 0
    return len([line for line in output.splitlines() if line.strip()])


def _generation() -> str:
    tool = _find_tool("darwin-rebuild", DARWIN_REBUILD_FALLBACK)
    if tool is None:
        return "N/A"
    output = run_probe([tool, "--list-generations"])
    lines = [line for line in (output or "").splitlines() if line.strip()]
    if not lines:
        return "N/A"
    return lines[-1].split()[0]


def _git_status(config_dir: Path) -> tuple[str, int]:
    git = _find_tool("git")
    if git is None:
        return "N/A", 0
    branch = run_probe([git, "-C", str(config_dir), "branch", "--show-current"])
    status = run_probe([git, "-C", str(config_dir), "status", "--porcelain"])
    return branch or "N/A", _count_lines(status)


def _brew_counts() -> tuple[int, int, int]:
    brew = _find_tool("brew", BREW_FALLBACK)
    if brew is None:
        return 0, 0, 0
    casks = _count_lines(run_probe([brew, "list", "--cask"]))
    formulas = _count_lines(run_probe([brew, "list", "--formula"]))
    outdated = _count_lines(run_probe([brew, "outdated"]))
    return casks, formulas, outdated


def _nix_binary_count() -> int:
    try:
        return sum(1 for _ in SYSTEM_BIN_DIR.iterdir())
    except OSError:
        return 0


def collect_system_info(config_dir: Path) -> SystemInfo:
    """Probe hostname, generation, git state and package counts."""
    branch, uncommitted = _git_status(config_dir)
    casks, formulas, outdated = _brew_counts()
    return SystemInfo(
        hostname=detect_hostname(),
        generation=_generation(),
        branch=branch,
        uncommitted=uncommitted,
        packages=PackageCounts(
            gui_apps=casks,
            brew_cli=formulas,
            nix_cli=_nix_binary_count(),
        ),
        updates=outdated,
    )
