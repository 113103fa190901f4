"""Whole-repository scan: every configuration file and its raw imports."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from nixscope.analysis.imports import file_imports
from nixscope.analysis.packages import PackageExtractor
from nixscope.config import DEFAULT_SETTINGS, AnalyzerSettings
from nixscope.exclusion import FileExcluder
from nixscope.logging import get_logger
from nixscope.models.config_graph import DependencyIndexEntry, PackageSet
from nixscope.paths import relative_to_root

logger = get_logger("index")


def iter_config_files(
    project_root: Path,
    extension: str = DEFAULT_SETTINGS.extension,
    excluder: FileExcluder | None = None,
) -> Iterator[Path]:
    """Yield configuration files depth-first, entries in name order."""
    excluder = excluder or FileExcluder(project_root)

    def walk(directory: Path) -> Iterator[Path]:
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.debug("Cannot list %s: %s", directory, e)
            return
        for entry in entries:
            if excluder.should_exclude(entry):
                continue
            if entry.is_dir():
                if not entry.is_symlink():
                    yield from walk(entry)
            elif entry.is_file() and entry.name.endswith(extension):
                yield entry

    if project_root.is_dir():
        yield from walk(project_root)


def build_flat_index(
    project_root: Path,
    settings: AnalyzerSettings = DEFAULT_SETTINGS,
    excluder: FileExcluder | None = None,
) -> list[DependencyIndexEntry]:
    """One entry per configuration file, most imports first.

    Files without imports are kept so the index is a complete inventory;
    ties keep discovery order.
    """
    excluder = excluder or FileExcluder(project_root, skip_dirs=settings.skip_dirs)
    entries = [
        DependencyIndexEntry(
            file=relative_to_root(path, project_root),
            imports=file_imports(path),
        )
        for path in iter_config_files(project_root, settings.extension, excluder)
    ]
    return sorted(entries, key=lambda entry: len(entry.imports), reverse=True)


def collect_packages(
    project_root: Path,
    settings: AnalyzerSettings = DEFAULT_SETTINGS,
    excluder: FileExcluder | None = None,
    extractor: PackageExtractor | None = None,
) -> PackageSet:
    """Packages declared anywhere in the repository, sorted and de-duplicated."""
    excluder = excluder or FileExcluder(project_root, skip_dirs=settings.skip_dirs)
    extractor = extractor or PackageExtractor()
    return extractor.collect(iter_config_files(project_root, settings.extension, excluder))
