"""Centralized path management for nixscope."""

from pathlib import Path

from nixscope.exceptions import ProjectRootNotFoundError

# Directory name for nixscope files inside the configuration repository
NIXSCOPE_DIR = ".nixscope"

# File names within the .nixscope directory
CONFIG_FILE = "config.toml"
EXPORT_FILE = "inspection.json"

# Manifest that marks the root of a configuration repository
MANIFEST_FILE = "flake.nix"


def find_project_root(start: Path, manifest: str = MANIFEST_FILE) -> Path:
    """Walk up from start to the first directory holding the manifest."""
    start = start.resolve()
    candidates = [start] if start.is_dir() else []
    candidates.extend(start.parents)

    for candidate in candidates:
        if (candidate / manifest).is_file():
            return candidate

    raise ProjectRootNotFoundError(str(start), manifest)


def get_nixscope_dir(project_path: Path) -> Path:
    """Get the .nixscope directory path for a project."""
    return project_path / NIXSCOPE_DIR


def ensure_nixscope_dir(project_path: Path) -> Path:
    """Ensure .nixscope directory exists and return its path."""
    nixscope_dir = get_nixscope_dir(project_path)
    nixscope_dir.mkdir(parents=True, exist_ok=True)
    return nixscope_dir


def get_config_path(project_path: Path) -> Path:
    """Get the config.toml path for a project."""
    return get_nixscope_dir(project_path) / CONFIG_FILE


def get_export_path(project_path: Path) -> Path:
    """Get the inspection.json path for a project."""
    return get_nixscope_dir(project_path) / EXPORT_FILE


def relative_to_root(path: Path, project_root: Path) -> str:
    """Render path relative to the project root, or absolute when outside it."""
    try:
        return path.relative_to(project_root).as_posix()
    except ValueError:
        return path.as_posix()
