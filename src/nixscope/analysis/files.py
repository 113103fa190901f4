"""Configuration file browser tree."""

from __future__ import annotations

from pathlib import Path

from nixscope.analysis.imports import file_imports
from nixscope.config import DEFAULT_SETTINGS, AnalyzerSettings
from nixscope.logging import get_logger
from nixscope.models.config_graph import FileTreeNode

logger = get_logger("files")


def _file_node(path: Path) -> FileTreeNode:
    try:
        size = path.stat().st_size
    except OSError:
        size = 0
    return FileTreeNode(
        name=path.name,
        path=path,
        is_dir=False,
        import_count=len(file_imports(path)),
        size=size,
    )


def _dir_node(path: Path, name: str, extension: str) -> FileTreeNode:
    node = FileTreeNode(name=name, path=path, is_dir=True)
    try:
        entries = sorted(path.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.debug("Cannot list %s: %s", path, e)
        return node

    for entry in entries:
        if entry.name.startswith("."):
            continue
        if entry.is_dir() and not entry.is_symlink():
            node.children.append(_dir_node(entry, entry.name, extension))
        elif entry.is_file() and entry.name.endswith(extension):
            node.children.append(_file_node(entry))
    return node


def build_file_tree(
    project_root: Path,
    settings: AnalyzerSettings = DEFAULT_SETTINGS,
) -> FileTreeNode:
    """Manifest first, then the hosts/modules/home directories that exist."""
    tree = FileTreeNode(name=project_root.name, path=project_root, is_dir=True)

    manifest = project_root / settings.manifest
    if manifest.is_file():
        tree.children.append(_file_node(manifest))

    for name in settings.browse_dirs:
        directory = project_root / name
        if directory.is_dir():
            tree.children.append(_dir_node(directory, name, settings.extension))

    return tree
