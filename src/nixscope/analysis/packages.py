"""Package declaration extraction.

The recognized declaration shapes are rows of a pattern table so the set
can be audited, tested and extended from the config file.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from nixscope.analysis.sanitize import sanitize
from nixscope.exceptions import ConfigError
from nixscope.logging import get_logger
from nixscope.models.config_graph import PackageSet

logger = get_logger("packages")

CATEGORIES = ("formulas", "casks", "system_packages")

# "git" inside a string list
QUOTED_ITEM = r'"([^"]+)"'

# git, nodejs_20, python3Packages.pip inside an identifier list
IDENTIFIER_ITEM = r"[A-Za-z_][\w'-]*(?:\.[A-Za-z_][\w'-]*)*"


@dataclass(frozen=True)
class PackagePattern:
    """One recognized package declaration shape."""

    name: str
    category: str
    block: re.Pattern
    item: re.Pattern
    exclude: frozenset[str] = field(default_factory=frozenset)

    def find(self, text: str) -> list[str]:
        """Return the names declared by this shape, in order."""
        match = self.block.search(text)
        if not match:
            return []
        names: list[str] = []
        for found in self.item.finditer(match.group(1)):
            name = found.group(1) if found.groups() else found.group(0)
            if name and name not in self.exclude:
                names.append(name)
        return names

    @classmethod
    def from_config(cls, entry: dict) -> "PackagePattern":
        """Build a pattern from a [[packages.patterns]] table."""
        category = entry.get("category", "system_packages")
        if category not in CATEGORIES:
            raise ConfigError(f"Unknown package category: {category}")
        try:
            block = re.compile(entry["block"], re.DOTALL)
            item = re.compile(entry["item"])
        except re.error as e:
            raise ConfigError(f"Invalid regex in package pattern {entry['name']}: {e}") from e
        if block.groups < 1:
            raise ConfigError(f"Package pattern {entry['name']} needs a capture group for the list")
        return cls(
            name=entry["name"],
            category=category,
            block=block,
            item=item,
            exclude=frozenset(entry.get("exclude", [])),
        )


DEFAULT_PATTERNS: tuple[PackagePattern, ...] = (
    PackagePattern(
        name="formulas",
        category="formulas",
        block=re.compile(r"\b(?:brews|formulas)\s*=\s*\[(.*?)\]", re.DOTALL),
        item=re.compile(QUOTED_ITEM),
    ),
    PackagePattern(
        name="casks",
        category="casks",
        block=re.compile(r"\bcasks\s*=\s*\[(.*?)\]", re.DOTALL),
        item=re.compile(QUOTED_ITEM),
    ),
    PackagePattern(
        name="system_packages",
        category="system_packages",
        block=re.compile(
            r"\benvironment\.systemPackages\s*=\s*with\s+pkgs\s*;\s*\[(.*?)\]",
            re.DOTALL,
        ),
        item=re.compile(IDENTIFIER_ITEM),
        exclude=frozenset({"with", "pkgs"}),
    ),
)


class PackageExtractor:
    """Runs the pattern table over a file's text."""

    def __init__(self, patterns: Iterable[PackagePattern] | None = None) -> None:
        self.patterns = tuple(patterns) if patterns is not None else DEFAULT_PATTERNS

    @classmethod
    def with_extra(cls, entries: list[dict]) -> "PackageExtractor":
        """Default table plus patterns from the config file."""
        return cls(DEFAULT_PATTERNS + tuple(PackagePattern.from_config(e) for e in entries))

    def extract(self, content: str) -> PackageSet:
        """Extract declared packages from raw file content."""
        # Package names live in "..." literals, so only comments and blocks go
        text = sanitize(content, strip_inline_strings=False)
        found: dict[str, list[str]] = {category: [] for category in CATEGORIES}
        for pattern in self.patterns:
            found[pattern.category].extend(pattern.find(text))
        return PackageSet(**{c: list(dict.fromkeys(names)) for c, names in found.items()})

    def collect(self, files: Iterable[Path]) -> PackageSet:
        """Merge the packages of many files into sorted, duplicate-free lists."""
        merged: dict[str, set[str]] = {category: set() for category in CATEGORIES}
        for path in files:
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Cannot read %s: %s", path, e)
                continue
            packages = self.extract(content)
            for category in CATEGORIES:
                merged[category].update(getattr(packages, category))
        return PackageSet(**{c: sorted(names) for c, names in merged.items()})


def extract_packages(content: str) -> PackageSet:
    """Extract formulas, casks and system packages from file content."""
    return PackageExtractor().extract(content)
