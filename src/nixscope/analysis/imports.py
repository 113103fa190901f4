"""Import extraction, path resolution and import tree building."""

from __future__ import annotations

import os
import re
from pathlib import Path

from nixscope.analysis.packages import PackageExtractor
from nixscope.analysis.sanitize import sanitize
from nixscope.config import DEFAULT_SETTINGS, AnalyzerSettings
from nixscope.logging import get_logger
from nixscope.models.config_graph import ConfigFile, ImportEdge, ImportTreeNode
from nixscope.paths import relative_to_root

logger = get_logger("imports")

# imports = [ ... ]  (non-greedy: an unterminated list never matches)
IMPORTS_BLOCK_RE = re.compile(r"\bimports\s*=\s*\[(.*?)\]", re.DOTALL)

# ./foo or ../foo/bar inside the imports list
RELATIVE_PATH_RE = re.compile(r"\.\.?/[^\s\]]+")

# import ./foo.nix
DIRECT_IMPORT_RE = re.compile(r"\bimport\s+(\.\.?/[^\s;)\]]+)")

# <./foo>
ANGLE_PATH_RE = re.compile(r"<(\.\.?/[^\s>]+)>")

# Punctuation that can cling to a path token
_TRIM_CHARS = "\"'`,;()[]{}"


def _clean_path(raw: str) -> str:
    return raw.strip().strip(_TRIM_CHARS)


def _is_comment(line: str) -> bool:
    return line.lstrip().startswith("#")


def extract_imports(sanitized: str) -> list[str]:
    """Extract relative import paths from sanitized configuration text.

    Recognizes an ``imports = [ ... ]`` list, ``import ./path`` statements
    and ``<./path>`` references. Results keep first-seen order and contain
    no duplicates or empty strings.
    """
    found: list[str] = []

    block = IMPORTS_BLOCK_RE.search(sanitized)
    if block:
        for line in block.group(1).splitlines():
            if _is_comment(line):
                continue
            found.extend(_clean_path(p) for p in RELATIVE_PATH_RE.findall(line))

    for line in sanitized.splitlines():
        if _is_comment(line):
            continue
        found.extend(_clean_path(p) for p in DIRECT_IMPORT_RE.findall(line))
        found.extend(_clean_path(p) for p in ANGLE_PATH_RE.findall(line))

    return list(dict.fromkeys(p for p in found if p))


def canonical_path(path: Path) -> Path:
    """Absolute path with symlinks and .. segments resolved.

    Falls back to lexical normalization when a symlink loop stops resolution.
    """
    try:
        return path.resolve()
    except (OSError, RuntimeError) as e:
        logger.debug("Cannot resolve %s: %s", path, e)
        return Path(os.path.normpath(path.absolute()))


def resolve_import_path(
    importer: Path,
    raw: str,
    default_entry: str = DEFAULT_SETTINGS.default_entry,
) -> Path:
    """Resolve a relative import against the importing file's directory.

    The result is canonical, so a file reached through a symlinked
    directory has a single identity. A directory target resolves to its
    default entry file. Existence of the result is not checked.
    """
    candidate = canonical_path(importer.parent / raw)
    if candidate.is_dir():
        return canonical_path(candidate / default_entry)
    return candidate


def read_config_file(path: Path, project_root: Path) -> ConfigFile | None:
    """Read a configuration file, or None when it cannot be read."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read %s: %s", path, e)
        return None
    return ConfigFile(
        path=path,
        relative_path=relative_to_root(path, project_root),
        content=content,
    )


def file_imports(path: Path) -> list[str]:
    """Raw import paths declared by one file; unreadable files declare none."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read %s: %s", path, e)
        return []
    return extract_imports(sanitize(content))


class ImportTreeBuilder:
    """Expands a file's imports into a tree, one branch per import path."""

    def __init__(
        self,
        project_root: Path,
        settings: AnalyzerSettings = DEFAULT_SETTINGS,
        package_extractor: PackageExtractor | None = None,
    ) -> None:
        self.project_root = canonical_path(project_root)
        self.settings = settings
        self.package_extractor = package_extractor or PackageExtractor()

    def edges(self, config_file: ConfigFile) -> list[ImportEdge]:
        """Resolve every import declared by a file to a candidate target."""
        return [
            ImportEdge(
                source=config_file.path,
                raw=raw,
                target=resolve_import_path(config_file.path, raw, self.settings.default_entry),
            )
            for raw in extract_imports(sanitize(config_file.content))
        ]

    def build(self, path: Path, depth: int = 0) -> ImportTreeNode | None:
        """Build the import tree rooted at path with an empty cycle guard."""
        return self.build_node(canonical_path(path), depth, frozenset())

    def build_node(
        self,
        path: Path,
        depth: int,
        visited: frozenset[Path],
    ) -> ImportTreeNode | None:
        """Build the node for path, or None for a cycle or a missing file.

        ``visited`` holds the ancestors on the current root-to-node path
        only. Each child gets its own extended copy, so a file may appear
        in unrelated sibling branches but never below itself.
        """
        if path in visited or not path.is_file():
            return None

        node = ImportTreeNode(file=relative_to_root(path, self.project_root), depth=depth)
        config_file = read_config_file(path, self.project_root)
        if config_file is None:
            return node

        packages = self.package_extractor.extract(config_file.content)
        if not packages.is_empty():
            node.packages = packages

        branch = visited | {path}
        seen: set[Path] = set()
        for edge in self.edges(config_file):
            if edge.target in seen:
                continue
            seen.add(edge.target)
            if edge.target in branch:
                logger.debug("Pruned cycle %s -> %s", node.file, edge.raw)
                if self.settings.mark_cycles:
                    node.children.append(
                        ImportTreeNode(
                            file=relative_to_root(edge.target, self.project_root),
                            depth=depth + 1,
                            cycle=True,
                        )
                    )
                continue
            child = self.build_node(edge.target, depth + 1, branch)
            if child is not None:
                node.children.append(child)

        return node
