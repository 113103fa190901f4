"""Host module-order resolution and composite tree assembly."""

from __future__ import annotations

import re
import socket
from pathlib import Path

from nixscope.analysis.imports import ImportTreeBuilder
from nixscope.analysis.sanitize import sanitize
from nixscope.config import DEFAULT_SETTINGS, AnalyzerSettings
from nixscope.logging import get_logger
from nixscope.models.config_graph import HostModuleOrder, ImportTreeNode

logger = get_logger("hosts")


def detect_hostname() -> str:
    """Short, lower-cased hostname of this machine."""
    return socket.gethostname().split(".")[0].lower() or "unknown"


def _block_body(text: str, open_brace: int) -> str | None:
    """Text between the brace at open_brace and its matching close."""
    depth = 0
    for i in range(open_brace, len(text)):
        if text[i] == "{":
            depth += 1
        elif text[i] == "}":
            depth -= 1
            if depth == 0:
                return text[open_brace + 1 : i]
    return None


def find_machine_type(
    manifest_text: str,
    hostname: str,
    field_name: str = DEFAULT_SETTINGS.machine_type_field,
) -> str | None:
    """Read the machine type declared for hostname in the manifest.

    Looks for a ``hostname = { ... }`` block, also written quoted
    (``"hostname" = {``) or as a dotted attribute (``hosts.hostname = {``),
    and the ``<field_name> = "value";`` inside it.
    """
    text = sanitize(manifest_text, strip_inline_strings=False)
    host_re = re.compile(
        rf'(?:(?<![\w."-])|(?<=[\w"]\.))"?{re.escape(hostname)}"?\s*=\s*\{{'
    )
    field_re = re.compile(rf'\b{re.escape(field_name)}\s*=\s*"([^"]+)"\s*;')

    for match in host_re.finditer(text):
        body = _block_body(text, match.end() - 1)
        if body is None:
            continue
        found = field_re.search(body)
        if found:
            return found.group(1)
    return None


class ModuleOrderResolver:
    """Chooses the root files that apply to a host, base first."""

    def __init__(self, project_root: Path, settings: AnalyzerSettings = DEFAULT_SETTINGS) -> None:
        self.project_root = project_root
        self.settings = settings

    def _has_root(self, host_type: str) -> bool:
        return (self.project_root / self.settings.root_file(host_type)).is_file()

    def _machine_type(self, hostname: str) -> str | None:
        manifest = self.project_root / self.settings.manifest
        try:
            content = manifest.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Cannot read manifest %s: %s", manifest, e)
            return None
        return find_machine_type(content, hostname, self.settings.machine_type_field)

    def _fallback_host_type(self) -> str | None:
        hosts_dir = self.project_root / self.settings.hosts_dir
        skipped = {self.settings.shared_host, *self.settings.reserved_host_dirs}
        try:
            entries = sorted(p for p in hosts_dir.iterdir() if p.is_dir())
        except OSError:
            return None
        for entry in entries:
            if entry.name in skipped or entry.name.startswith("."):
                continue
            if self._has_root(entry.name):
                return entry.name
        return None

    def resolve(self, hostname: str) -> HostModuleOrder:
        """Resolve the module order for hostname.

        Steps add roots cumulatively: the shared base, the machine type from
        the manifest, the literal hostname, and as a last resort the first
        host directory with a root file.
        """
        order = HostModuleOrder(hostname=hostname)
        shared = self.settings.shared_host

        if self._has_root(shared):
            order.roots.append(self.settings.root_file(shared))
        base_count = len(order.roots)

        machine_type = self._machine_type(hostname)
        order.machine_type = machine_type
        if machine_type and machine_type != shared and self._has_root(machine_type):
            order.roots.append(self.settings.root_file(machine_type))

        if hostname not in (shared, machine_type) and self._has_root(hostname):
            order.roots.append(self.settings.root_file(hostname))

        if len(order.roots) == base_count:
            fallback = self._fallback_host_type()
            if fallback:
                order.roots.append(self.settings.root_file(fallback))

        logger.debug("Module order for %s: %s", hostname, order.roots)
        return order


def resolve_module_order(
    project_root: Path,
    hostname: str,
    settings: AnalyzerSettings = DEFAULT_SETTINGS,
) -> list[str]:
    """Ordered root files (relative to project_root) for hostname."""
    return ModuleOrderResolver(project_root, settings).resolve(hostname).roots


def assemble_composite_tree(
    builder: ImportTreeBuilder,
    roots: list[str],
) -> ImportTreeNode | None:
    """Expand each root and hang later roots under the first one.

    Later roots are siblings in the real configuration; nesting them under
    the base keeps a single rooted tree.
    """
    base: ImportTreeNode | None = None
    for root in roots:
        path = builder.project_root / root
        if base is None:
            base = builder.build(path)
            continue
        extra = builder.build(path, depth=1)
        if extra is not None:
            base.children.append(extra)
    return base


def build_composite_import_tree(
    project_root: Path,
    hostname: str,
    settings: AnalyzerSettings = DEFAULT_SETTINGS,
    builder: ImportTreeBuilder | None = None,
) -> ImportTreeNode | None:
    """Composite import tree for hostname, or None when no root exists."""
    builder = builder or ImportTreeBuilder(project_root, settings)
    roots = resolve_module_order(project_root, hostname, settings)
    return assemble_composite_tree(builder, roots)
