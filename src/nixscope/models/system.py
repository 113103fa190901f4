"""Data models for the system status view."""

from dataclasses import dataclass, field


@dataclass
class PackageCounts:
    """Installed package counts per source."""

    gui_apps: int = 0
    brew_cli: int = 0
    nix_cli: int = 0

    @property
    def total(self) -> int:
        return self.gui_apps + self.brew_cli + self.nix_cli


@dataclass
class SystemInfo:
    """Snapshot of the machine the dashboard runs on."""

    hostname: str = "unknown"
    generation: str = "N/A"
    branch: str = "N/A"
    uncommitted: int = 0
    packages: PackageCounts = field(default_factory=PackageCounts)
    updates: int = 0

    def to_dict(self) -> dict:
        return {
            "hostname": self.hostname,
            "generation": self.generation,
            "branch": self.branch,
            "uncommitted": self.uncommitted,
            "packages": {
                "gui_apps": self.packages.gui_apps,
                "brew_cli": self.packages.brew_cli,
                "nix_cli": self.packages.nix_cli,
            },
            "updates": self.updates,
        }
