"""Centralized file exclusion logic for repository walks.

Handles hidden entries, dependency-cache directories, extra patterns from
the config file and (optionally) .gitignore, using the pathspec library for
gitignore-style matching.
"""

from dataclasses import dataclass, field
from pathlib import Path

import pathspec

from nixscope.logging import get_logger

logger = get_logger("exclusion")


@dataclass
class ExclusionConfig:
    """Configuration for file exclusion."""

    default_patterns: list[str] = field(default_factory=list)
    gitignore_patterns: list[str] = field(default_factory=list)
    extra_patterns: list[str] = field(default_factory=list)


# Hidden entries are always skipped
HIDDEN_PATTERN = ".*"

# Dependency caches skipped by name unless the caller overrides them
DEFAULT_SKIP_DIRS = ("node_modules",)


class FileExcluder:
    """Handles file exclusion with gitignore-style pattern matching."""

    def __init__(
        self,
        project_root: Path,
        skip_dirs: tuple[str, ...] | list[str] = DEFAULT_SKIP_DIRS,
        extra_excludes: list[str] | None = None,
        respect_gitignore: bool = False,
    ) -> None:
        """Initialize the file excluder.

        Args:
            project_root: Root directory of the configuration repository.
            skip_dirs: Directory names that are never descended into.
            extra_excludes: Additional gitignore-style patterns.
            respect_gitignore: Also hide files matched by the root .gitignore.
        """
        self.project_root = project_root
        self._config = ExclusionConfig()
        self._config.default_patterns = [HIDDEN_PATTERN, *skip_dirs]

        if respect_gitignore:
            self._load_gitignore()

        if extra_excludes:
            self._config.extra_patterns = list(extra_excludes)

        self._spec = pathspec.GitIgnoreSpec.from_lines(self.patterns)

    def _load_gitignore(self) -> None:
        """Load .gitignore patterns."""
        gitignore_path = self.project_root / ".gitignore"
        if not gitignore_path.exists():
            return
        try:
            content = gitignore_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable %s: %s", gitignore_path, e)
            return
        self._config.gitignore_patterns = [
            line.strip()
            for line in content.splitlines()
            if line.strip() and not line.startswith("#")
        ]

    def should_exclude(self, path: Path) -> bool:
        """Check if a file or directory should be excluded.

        Args:
            path: Absolute path inside the project root.

        Returns:
            True if the path should be excluded, False otherwise.
        """
        try:
            rel_path = path.relative_to(self.project_root)
        except ValueError:
            return False

        if not rel_path.parts:
            return False

        rel_str = rel_path.as_posix()
        if path.is_dir():
            rel_str += "/"
        if self._spec.match_file(rel_str):
            return True

        # Also check each directory component so "node_modules" matches nested files
        for part in rel_path.parts[:-1]:
            if self._spec.match_file(part + "/"):
                return True

        return False

    @property
    def patterns(self) -> list[str]:
        """Return all loaded patterns."""
        return (
            self._config.default_patterns
            + self._config.gitignore_patterns
            + self._config.extra_patterns
        )
