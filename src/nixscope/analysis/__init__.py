"""Configuration dependency analysis."""

from nixscope.analysis.files import build_file_tree
from nixscope.analysis.hosts import (
    ModuleOrderResolver,
    build_composite_import_tree,
    detect_hostname,
    find_machine_type,
    resolve_module_order,
)
from nixscope.analysis.imports import ImportTreeBuilder, extract_imports, resolve_import_path
from nixscope.analysis.index import build_flat_index, collect_packages, iter_config_files
from nixscope.analysis.packages import PackageExtractor, PackagePattern, extract_packages
from nixscope.analysis.sanitize import sanitize

__all__ = [
    "ImportTreeBuilder",
    "ModuleOrderResolver",
    "PackageExtractor",
    "PackagePattern",
    "build_composite_import_tree",
    "build_file_tree",
    "build_flat_index",
    "collect_packages",
    "detect_hostname",
    "extract_imports",
    "extract_packages",
    "find_machine_type",
    "iter_config_files",
    "resolve_import_path",
    "resolve_module_order",
    "sanitize",
]
