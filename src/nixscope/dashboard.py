"""Interactive terminal dashboard.

The current screen is a single ViewState value. ``next_state`` is the only
place screens change and ``Dashboard.render`` the only place they are drawn.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Callable

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text

from nixscope.logging import get_logger
from nixscope.models.system import SystemInfo
from nixscope.output.tables import (
    build_index_table,
    build_module_order_table,
    build_package_panels,
    build_system_panel,
)
from nixscope.output.tree import build_file_browser_tree, build_import_tree
from nixscope.session import InspectionSession

logger = get_logger("dashboard")


class ViewState(Enum):
    """Screens of the dashboard."""

    DASHBOARD = auto()
    INSPECTOR = auto()
    PACKAGES = auto()
    FILES = auto()
    DEPENDENCIES = auto()
    IMPORT_TREE = auto()
    EXIT = auto()


INSPECTOR_VIEWS = {
    "1": ViewState.PACKAGES,
    "2": ViewState.FILES,
    "3": ViewState.DEPENDENCIES,
    "4": ViewState.IMPORT_TREE,
}

# Rows of the dependency list visible around the selection
DEPENDENCY_WINDOW = 10


def next_state(state: ViewState, key: str) -> ViewState:
    """Screen reached by pressing key on state."""
    if state is ViewState.DASHBOARD:
        if key == "q":
            return ViewState.EXIT
        if key == "i":
            return ViewState.INSPECTOR
        return state

    if state is ViewState.INSPECTOR:
        if key in ("0", "q"):
            return ViewState.DASHBOARD
        return INSPECTOR_VIEWS.get(key, state)

    if state in INSPECTOR_VIEWS.values():
        if key == "0":
            return ViewState.INSPECTOR
        if key == "q":
            return ViewState.DASHBOARD
        return state

    return state


def _menu_line(key: str, label: str, color: str, hint: str = "") -> Text:
    line = Text()
    line.append(f"[{key}]", style=f"bold {color}")
    line.append(f"  {label}")
    if hint:
        line.append(f"\n      {hint}", style="dim")
    return line


class Dashboard:
    """Key-driven loop over the dashboard screens."""

    def __init__(
        self,
        session: InspectionSession,
        system_info: Callable[[], SystemInfo],
        console: Console | None = None,
    ) -> None:
        self.session = session
        self.system_info = system_info
        self.console = console or Console()
        self.state = ViewState.DASHBOARD
        self.selected = 0

    def handle_key(self, key: str) -> None:
        """Apply one key press."""
        key = key.strip().lower()
        if key == "r":
            self.session.refresh()
            return
        if self.state is ViewState.DEPENDENCIES and key in ("j", "k"):
            self._move_selection(1 if key == "j" else -1)
            return

        previous = self.state
        self.state = next_state(self.state, key)
        if self.state is not previous:
            self.selected = 0
            logger.debug("View %s -> %s", previous.name, self.state.name)
        if self.state in INSPECTOR_VIEWS.values() and self.session.result is None:
            self.session.refresh()

    def _move_selection(self, step: int) -> None:
        result = self.session.result
        count = len(result.index) if result else 0
        self.selected = max(0, min(count - 1, self.selected + step))

    def render(self) -> RenderableType:
        """Renderable for the current screen."""
        renderers: dict[ViewState, Callable[[], RenderableType]] = {
            ViewState.DASHBOARD: self._render_dashboard,
            ViewState.INSPECTOR: self._render_inspector,
            ViewState.PACKAGES: self._render_packages,
            ViewState.FILES: self._render_files,
            ViewState.DEPENDENCIES: self._render_dependencies,
            ViewState.IMPORT_TREE: self._render_import_tree,
        }
        renderer = renderers.get(self.state)
        return renderer() if renderer else Text()

    def _render_dashboard(self) -> RenderableType:
        return Group(
            Panel.fit("[bold magenta]nixscope[/]  [dim]Interactive Configuration Manager[/]"),
            build_system_panel(self.system_info()),
            _menu_line("i", "Inspect configuration", "cyan"),
            _menu_line("q", "Quit", "red"),
        )

    def _render_inspector(self) -> RenderableType:
        return Panel(
            Group(
                Text("What would you like to inspect?", style="bold cyan"),
                Text(),
                _menu_line("1", "View all declared packages", "green",
                           "Homebrew formulas, casks and Nix packages"),
                _menu_line("2", "Browse configuration files", "yellow",
                           "Hosts, modules and home configurations"),
                _menu_line("3", "View file dependencies", "magenta",
                           "Which files import which"),
                _menu_line("4", f"Import tree for {self.session.hostname}", "blue",
                           "Modules loaded for this host, in order"),
                Text(),
                _menu_line("r", "Refresh", "cyan"),
                _menu_line("0", "Back to dashboard", "red"),
            ),
            title="Configuration Inspector",
            border_style="cyan",
        )

    def _footer(self, extra: str = "") -> Text:
        return Text(f"{extra}[0] Back to inspector  [r] Refresh  [q] Dashboard", style="dim")

    def _render_packages(self) -> RenderableType:
        result = self.session.result
        if result is None:
            return Text("No inspection yet", style="dim")
        return Group(build_package_panels(result.packages), self._footer())

    def _render_files(self) -> RenderableType:
        result = self.session.result
        if result is None or result.file_tree is None:
            return Text("No inspection yet", style="dim")
        return Group(
            build_file_browser_tree(result.file_tree),
            Text("Numbers (n) show how many files each file imports", style="dim"),
            self._footer(),
        )

    def _render_dependencies(self) -> RenderableType:
        result = self.session.result
        if result is None:
            return Text("No inspection yet", style="dim")
        start = max(0, self.selected - DEPENDENCY_WINDOW)
        window = result.index[start : self.selected + DEPENDENCY_WINDOW]
        return Group(
            build_index_table(window, selected=self.selected - start, offset=start, total=len(result.index)),
            self._footer("[j/k] Navigate  "),
        )

    def _render_import_tree(self) -> RenderableType:
        result = self.session.result
        if result is None:
            return Text("No inspection yet", style="dim")
        parts: list[RenderableType] = []
        if result.module_order is not None:
            parts.append(build_module_order_table(result.module_order))
        if result.composite_tree is None:
            parts.append(Text(f"No root file found for host {result.hostname}", style="yellow"))
        else:
            parts.append(build_import_tree(result.composite_tree))
        parts.append(self._footer())
        return Group(*parts)

    def run(self) -> None:
        """Draw, read a key, repeat until the user quits."""
        while self.state is not ViewState.EXIT:
            self.console.clear()
            self.console.print(self.render())
            key = Prompt.ask("[dim]>[/]", console=self.console, default="", show_default=False)
            self.handle_key(key)
