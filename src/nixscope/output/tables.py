"""Rich tables and panels for the index, packages and system status."""

from rich.columns import Columns
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from nixscope.models.config_graph import DependencyIndexEntry, HostModuleOrder, PackageSet
from nixscope.models.system import SystemInfo

# Names shown per package panel before collapsing into "... and N more"
PACKAGE_PREVIEW = 10


def build_index_table(
    index: list[DependencyIndexEntry],
    limit: int | None = None,
    selected: int | None = None,
    offset: int = 0,
    total: int | None = None,
) -> Table:
    """Table of files ranked by how many imports they declare."""
    count = total if total is not None else len(index)
    table = Table(title=f"File Dependencies ({count} files)", expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("File", style="cyan")
    table.add_column("Imports", justify="right")
    table.add_column("Declared imports", style="magenta")

    shown = index if limit is None else index[:limit]
    for position, entry in enumerate(shown):
        is_selected = position == selected
        marker = "▶" if is_selected else str(offset + position + 1)
        table.add_row(
            marker,
            Text(entry.file, style="bold cyan" if is_selected else "cyan"),
            str(len(entry.imports)),
            "\n".join(entry.imports) if entry.imports else "[dim]-[/]",
        )
    return table


def build_module_order_table(order: HostModuleOrder) -> Table:
    """Root files in load order for one host."""
    machine = order.machine_type or "unmapped"
    table = Table(title=f"Module order for {order.hostname} ({machine})")
    table.add_column("Order", justify="right", style="dim")
    table.add_column("Root file", style="magenta")
    for position, root in enumerate(order.roots, 1):
        table.add_row(str(position), root)
    return table


def _package_panel(title: str, names: list[str], color: str) -> Panel:
    lines = [Text(f"Total: {len(names)}", style="dim")]
    lines.extend(Text(f"• {name}") for name in names[:PACKAGE_PREVIEW])
    if len(names) > PACKAGE_PREVIEW:
        lines.append(Text(f"... and {len(names) - PACKAGE_PREVIEW} more", style="dim"))
    return Panel(Group(*lines), title=title, border_style=color)


def build_package_panels(packages: PackageSet) -> Columns:
    """One panel per package source."""
    return Columns(
        [
            _package_panel("Homebrew Formulas (CLI)", packages.formulas, "cyan"),
            _package_panel("Homebrew Casks (GUI)", packages.casks, "magenta"),
            _package_panel("Nix Packages", packages.system_packages, "green"),
        ]
    )


def build_system_panel(info: SystemInfo) -> Panel:
    """System status block of the dashboard."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="dim")
    table.add_column(style="bold")
    table.add_column(style="dim")
    table.add_column(style="bold")

    updates_style = "yellow" if info.updates else "green"
    table.add_row("Hostname", info.hostname, "Total packages", str(info.packages.total))
    table.add_row("Generation", info.generation, "Updates", Text(str(info.updates), style=updates_style))
    table.add_row("Branch", info.branch, "GUI apps", str(info.packages.gui_apps))
    table.add_row("", "", "Brew CLI", str(info.packages.brew_cli))
    table.add_row("", "", "Nix packages", str(info.packages.nix_cli))

    if info.uncommitted:
        plural = "s" if info.uncommitted > 1 else ""
        status = Text(f"⚠ {info.uncommitted} uncommitted change{plural}", style="yellow")
    else:
        status = Text("✓ Clean working tree", style="green")

    return Panel(Group(table, Text(), status), title="System Status", border_style="cyan")
