"""Data models for nixscope."""

from nixscope.models.config_graph import (
    ConfigFile,
    DependencyIndexEntry,
    FileTreeNode,
    HostModuleOrder,
    ImportEdge,
    ImportTreeNode,
    PackageSet,
)
from nixscope.models.system import PackageCounts, SystemInfo

__all__ = [
    # Config graph models
    "ConfigFile",
    "DependencyIndexEntry",
    "FileTreeNode",
    "HostModuleOrder",
    "ImportEdge",
    "ImportTreeNode",
    "PackageSet",
    # System models
    "PackageCounts",
    "SystemInfo",
]
