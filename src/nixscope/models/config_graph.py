"""Data models for the configuration import graph."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class ConfigFile:
    """A configuration file read once for analysis."""

    path: Path  # absolute
    relative_path: str
    content: str


@dataclass(frozen=True)
class ImportEdge:
    """A resolved import from one file to a candidate target path."""

    source: Path
    raw: str  # e.g. "./modules/shell"
    target: Path  # not guaranteed to exist


@dataclass
class PackageSet:
    """Packages declared in one file (or merged across many)."""

    formulas: list[str] = field(default_factory=list)
    casks: list[str] = field(default_factory=list)
    system_packages: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.formulas or self.casks or self.system_packages)

    def total(self) -> int:
        return len(self.formulas) + len(self.casks) + len(self.system_packages)

    def to_dict(self) -> dict:
        return {
            "formulas": self.formulas,
            "casks": self.casks,
            "system_packages": self.system_packages,
        }


@dataclass
class ImportTreeNode:
    """One file's position within a root-to-leaf expansion path."""

    file: str  # relative to project root
    depth: int
    children: list["ImportTreeNode"] = field(default_factory=list)
    packages: PackageSet | None = None  # None when the file declares nothing
    cycle: bool = False  # only set for opt-in cycle markers

    def walk(self):
        """Yield this node and every descendant, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict:
        data: dict = {
            "file": self.file,
            "depth": self.depth,
            "children": [child.to_dict() for child in self.children],
        }
        if self.packages is not None:
            data["packages"] = self.packages.to_dict()
        if self.cycle:
            data["cycle"] = True
        return data


@dataclass
class DependencyIndexEntry:
    """Raw import declarations of one configuration file."""

    file: str
    imports: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"file": self.file, "imports": self.imports}


@dataclass
class HostModuleOrder:
    """Root files that apply to a host, base first."""

    hostname: str
    machine_type: str | None = None
    roots: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "hostname": self.hostname,
            "machine_type": self.machine_type,
            "roots": self.roots,
        }


@dataclass
class FileTreeNode:
    """A directory or configuration file in the file browser."""

    name: str
    path: Path
    is_dir: bool
    children: list["FileTreeNode"] = field(default_factory=list)
    import_count: int = 0
    size: int = 0

    def to_dict(self) -> dict:
        if self.is_dir:
            return {
                "name": self.name,
                "type": "directory",
                "children": [child.to_dict() for child in self.children],
            }
        return {
            "name": self.name,
            "type": "file",
            "imports": self.import_count,
            "size": self.size,
        }
