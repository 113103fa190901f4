"""Output modules for CLI display and file writing."""

from nixscope.output.json_writer import load_inspection, write_inspection
from nixscope.output.tables import (
    build_index_table,
    build_module_order_table,
    build_package_panels,
    build_system_panel,
)
from nixscope.output.tree import build_file_browser_tree, build_import_tree, display_tree

__all__ = [
    "build_file_browser_tree",
    "build_import_tree",
    "build_index_table",
    "build_module_order_table",
    "build_package_panels",
    "build_system_panel",
    "display_tree",
    "load_inspection",
    "write_inspection",
]
