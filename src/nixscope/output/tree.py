"""Rich tree visualization for import trees and the file browser."""

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from nixscope.models.config_graph import FileTreeNode, ImportTreeNode, PackageSet

console = Console()


def _package_summary(packages: PackageSet) -> str:
    parts = []
    if packages.formulas:
        parts.append(f"{len(packages.formulas)} formulas")
    if packages.casks:
        parts.append(f"{len(packages.casks)} casks")
    if packages.system_packages:
        parts.append(f"{len(packages.system_packages)} nix")
    return ", ".join(parts)


def _import_label(node: ImportTreeNode) -> Text:
    label = Text()
    if node.cycle:
        label.append("↻ ", style="red bold")
        label.append(node.file, style="red")
        label.append(" (cycle)", style="dim")
        return label

    style = "bold magenta" if node.depth == 0 else "magenta"
    label.append(node.file, style=style)
    if node.packages is not None:
        label.append(f"  [{_package_summary(node.packages)}]", style="green")
    return label


def build_import_tree(node: ImportTreeNode, show_packages: bool = False) -> Tree:
    """Build a Rich tree mirroring an import tree."""
    root = Tree(_import_label(node), guide_style="dim")
    _add_import_children(root, node, show_packages)
    return root


def _add_import_children(parent: Tree, node: ImportTreeNode, show_packages: bool) -> None:
    if show_packages and node.packages is not None:
        for category, names in node.packages.to_dict().items():
            if names:
                parent.add(f"[dim]{category}:[/] [green]{', '.join(names)}[/]")
    for child in node.children:
        branch = parent.add(_import_label(child))
        _add_import_children(branch, child, show_packages)


def build_file_browser_tree(node: FileTreeNode) -> Tree:
    """Build a Rich tree of configuration files with their import counts."""
    root = Tree(f"[bold]{node.name}/[/]", guide_style="dim")
    _add_file_children(root, node)
    return root


def _add_file_children(parent: Tree, node: FileTreeNode) -> None:
    for child in node.children:
        if child.is_dir:
            branch = parent.add(f"[bold blue]{child.name}/[/]")
            _add_file_children(branch, child)
            continue
        label = Text(child.name, style="magenta")
        if child.import_count:
            label.append(f" ({child.import_count})", style="dim")
        parent.add(label)


def display_tree(tree: Tree) -> None:
    """Display the tree to console."""
    console.print()
    console.print(tree)
    console.print()
