"""One inspection pass over a configuration repository."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from nixscope import __version__
from nixscope.analysis.files import build_file_tree
from nixscope.analysis.hosts import ModuleOrderResolver, assemble_composite_tree
from nixscope.analysis.imports import ImportTreeBuilder
from nixscope.analysis.index import build_flat_index, collect_packages
from nixscope.analysis.packages import PackageExtractor
from nixscope.config import NixscopeConfig
from nixscope.exclusion import FileExcluder
from nixscope.logging import get_logger
from nixscope.models.config_graph import (
    DependencyIndexEntry,
    FileTreeNode,
    HostModuleOrder,
    ImportTreeNode,
    PackageSet,
)

logger = get_logger("session")


@dataclass
class InspectionResult:
    """Everything one inspection pass produced."""

    project_root: Path
    hostname: str
    inspected_at: datetime
    duration_ms: int
    index: list[DependencyIndexEntry] = field(default_factory=list)
    module_order: HostModuleOrder | None = None
    composite_tree: ImportTreeNode | None = None
    packages: PackageSet = field(default_factory=PackageSet)
    file_tree: FileTreeNode | None = None

    def to_dict(self) -> dict:
        return {
            "metadata": {
                "project": str(self.project_root),
                "hostname": self.hostname,
                "inspected_at": self.inspected_at.isoformat(),
                "nixscope_version": __version__,
                "files_indexed": len(self.index),
                "duration_ms": self.duration_ms,
            },
            "module_order": self.module_order.to_dict() if self.module_order else None,
            "composite_tree": self.composite_tree.to_dict() if self.composite_tree else None,
            "index": [entry.to_dict() for entry in self.index],
            "packages": self.packages.to_dict(),
            "file_tree": self.file_tree.to_dict() if self.file_tree else None,
        }


class InspectionSession:
    """Owns the latest inspection result and rebuilds it on refresh.

    A refresh runs to completion before its result replaces the previous
    one. A refresh requested while another is running is ignored.
    """

    def __init__(
        self,
        project_root: Path,
        hostname: str,
        config: NixscopeConfig | None = None,
    ) -> None:
        self.project_root = project_root
        self.hostname = hostname
        self.config = config or NixscopeConfig()
        self.result: InspectionResult | None = None
        self._in_flight = False

    @property
    def busy(self) -> bool:
        return self._in_flight

    def refresh(self) -> InspectionResult | None:
        """Run a full inspection pass; None if one is already running."""
        if self._in_flight:
            logger.debug("Refresh ignored: inspection already running")
            return None

        self._in_flight = True
        try:
            self.result = self._inspect()
        finally:
            self._in_flight = False
        return self.result

    def _inspect(self) -> InspectionResult:
        start = time.perf_counter()
        settings = self.config.settings
        excluder = FileExcluder(
            self.project_root,
            skip_dirs=settings.skip_dirs,
            extra_excludes=self.config.index_excludes,
            respect_gitignore=self.config.respect_gitignore,
        )
        extractor = PackageExtractor.with_extra(self.config.package_patterns)
        builder = ImportTreeBuilder(self.project_root, settings, extractor)

        module_order = ModuleOrderResolver(self.project_root, settings).resolve(self.hostname)
        composite = assemble_composite_tree(builder, module_order.roots)
        index = build_flat_index(self.project_root, settings, excluder)
        packages = collect_packages(self.project_root, settings, excluder, extractor)
        file_tree = build_file_tree(self.project_root, settings)

        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.debug("Inspected %d files in %d ms", len(index), duration_ms)

        return InspectionResult(
            project_root=self.project_root,
            hostname=self.hostname,
            inspected_at=datetime.now(),
            duration_ms=duration_ms,
            index=index,
            module_order=module_order,
            composite_tree=composite,
            packages=packages,
            file_tree=file_tree,
        )
