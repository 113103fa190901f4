"""nixscope CLI - inspect the module graph of a nix configuration repository."""

from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from nixscope import __version__
from nixscope.analysis.files import build_file_tree
from nixscope.analysis.hosts import ModuleOrderResolver, assemble_composite_tree, detect_hostname
from nixscope.analysis.imports import ImportTreeBuilder
from nixscope.analysis.index import build_flat_index, collect_packages
from nixscope.analysis.packages import PackageExtractor
from nixscope.config import NixscopeConfig, load_config, resolve_config
from nixscope.dashboard import Dashboard
from nixscope.exceptions import NixscopeError
from nixscope.exclusion import FileExcluder
from nixscope.logging import configure_logging
from nixscope.output.json_writer import write_inspection
from nixscope.output.tables import build_index_table, build_module_order_table, build_package_panels
from nixscope.output.tree import build_file_browser_tree, build_import_tree, display_tree
from nixscope.paths import ensure_nixscope_dir, find_project_root, get_config_path, get_export_path
from nixscope.session import InspectionSession
from nixscope.sysinfo import collect_system_info

app = typer.Typer(
    name="nixscope",
    help="Inspect hosts, modules and packages of a nix configuration repository",
    no_args_is_help=False,
    rich_markup_mode="rich",
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"nixscope version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
) -> None:
    """Inspect hosts, modules and packages of a nix configuration repository."""
    configure_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        # Default to the interactive dashboard
        ctx.invoke(dashboard, path=Path("."), host=None)


def _load_project(path: Path) -> tuple[Path, NixscopeConfig]:
    """Find the project root and its config, exiting on failure."""
    try:
        root = find_project_root(path)
        config = resolve_config(load_config(get_config_path(root)))
        # Compile configured package patterns now so bad regexes fail here
        PackageExtractor.with_extra(config.package_patterns)
    except NixscopeError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)
    return root, config


def _builder(root: Path, config: NixscopeConfig) -> ImportTreeBuilder:
    extractor = PackageExtractor.with_extra(config.package_patterns)
    return ImportTreeBuilder(root, config.settings, extractor)


def _excluder(root: Path, config: NixscopeConfig) -> FileExcluder:
    return FileExcluder(
        root,
        skip_dirs=config.settings.skip_dirs,
        extra_excludes=config.index_excludes,
        respect_gitignore=config.respect_gitignore,
    )


@app.command()
def dashboard(
    path: Path = typer.Argument(
        Path("."),
        help="Path inside the configuration repository",
    ),
    host: Optional[str] = typer.Option(
        None,
        "--host",
        "-h",
        help="Host to inspect (default: this machine)",
    ),
) -> None:
    """Open the interactive dashboard (default command)."""
    root, config = _load_project(path)
    session = InspectionSession(root, host or detect_hostname(), config)
    Dashboard(session, lambda: collect_system_info(root), console).run()


@app.command()
def index(
    path: Path = typer.Argument(
        Path("."),
        help="Path inside the configuration repository",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        help="Only show the N most connected files",
    ),
) -> None:
    """Show every configuration file ranked by its import count."""
    root, config = _load_project(path)
    entries = build_flat_index(root, config.settings, _excluder(root, config))
    console.print(build_index_table(entries, limit=limit))


@app.command()
def order(
    path: Path = typer.Argument(
        Path("."),
        help="Path inside the configuration repository",
    ),
    host: Optional[str] = typer.Option(
        None,
        "--host",
        "-h",
        help="Host to resolve (default: this machine)",
    ),
) -> None:
    """Show the root files that apply to a host, in load order."""
    root, config = _load_project(path)
    module_order = ModuleOrderResolver(root, config.settings).resolve(host or detect_hostname())
    if not module_order.roots:
        console.print(f"[yellow]No root file found for host {module_order.hostname}[/]")
        raise typer.Exit(1)
    console.print(build_module_order_table(module_order))


@app.command()
def tree(
    path: Path = typer.Argument(
        Path("."),
        help="Path inside the configuration repository",
    ),
    host: Optional[str] = typer.Option(
        None,
        "--host",
        "-h",
        help="Host to expand (default: this machine)",
    ),
    packages: bool = typer.Option(
        False,
        "--packages",
        "-p",
        help="List declared packages under each file",
    ),
    mark_cycles: bool = typer.Option(
        False,
        "--mark-cycles",
        help="Show pruned import cycles instead of hiding them",
    ),
) -> None:
    """Show the composite import tree for a host."""
    root, config = _load_project(path)
    if mark_cycles:
        config.settings = replace(config.settings, mark_cycles=True)

    hostname = host or detect_hostname()
    module_order = ModuleOrderResolver(root, config.settings).resolve(hostname)
    composite = assemble_composite_tree(_builder(root, config), module_order.roots)
    if composite is None:
        console.print(f"[yellow]No root file found for host {hostname}[/]")
        raise typer.Exit(1)

    console.print(build_module_order_table(module_order))
    display_tree(build_import_tree(composite, show_packages=packages))


@app.command("packages")
def packages_command(
    path: Path = typer.Argument(
        Path("."),
        help="Path inside the configuration repository",
    ),
    file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        help="Only show packages declared in this file",
    ),
) -> None:
    """Show declared Homebrew formulas, casks and Nix packages."""
    root, config = _load_project(path)
    extractor = PackageExtractor.with_extra(config.package_patterns)

    if file is not None:
        try:
            content = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            console.print(f"[red]Cannot read {file}:[/] {e}")
            raise typer.Exit(1)
        found = extractor.extract(content)
    else:
        found = collect_packages(root, config.settings, _excluder(root, config), extractor)

    console.print(build_package_panels(found))


@app.command()
def files(
    path: Path = typer.Argument(
        Path("."),
        help="Path inside the configuration repository",
    ),
) -> None:
    """Browse hosts, modules and home configurations."""
    root, config = _load_project(path)
    display_tree(build_file_browser_tree(build_file_tree(root, config.settings)))
    console.print("[dim]Numbers (n) show how many files each file imports[/]")


@app.command()
def export(
    path: Path = typer.Argument(
        Path("."),
        help="Path inside the configuration repository",
    ),
    host: Optional[str] = typer.Option(
        None,
        "--host",
        "-h",
        help="Host to expand (default: this machine)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Path for JSON output (default: .nixscope/inspection.json)",
    ),
) -> None:
    """Run a full inspection and write it to JSON."""
    root, config = _load_project(path)
    if output is None:
        ensure_nixscope_dir(root)
        output = get_export_path(root)

    console.print(Panel.fit("[bold blue]nixscope - Configuration Inspection[/]"))
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Analyzing configuration structure...", total=None)
        session = InspectionSession(root, host or detect_hostname(), config)
        result = session.refresh()
        progress.update(task, completed=True)

    write_inspection(result, output)
    console.print(f"[dim]Files indexed:[/] {len(result.index)}")
    console.print(f"[dim]Roots:[/] {', '.join(result.module_order.roots) or 'none'}")
    console.print(f"\n[green]Inspection saved to:[/] {output}")
