"""Configuration loading for nixscope."""

from dataclasses import dataclass, field, fields
from pathlib import Path

import tomli

from nixscope.exceptions import ConfigError


@dataclass(frozen=True)
class AnalyzerSettings:
    """Layout conventions of the configuration repository."""

    extension: str = ".nix"
    default_entry: str = "default.nix"
    manifest: str = "flake.nix"
    hosts_dir: str = "hosts"
    shared_host: str = "shared"
    reserved_host_dirs: tuple[str, ...] = ("profiles",)
    machine_type_field: str = "machineType"
    browse_dirs: tuple[str, ...] = ("hosts", "modules", "home-configurations")
    skip_dirs: tuple[str, ...] = ("node_modules",)
    mark_cycles: bool = False

    def root_file(self, host_type: str) -> str:
        """Relative path of the root file for a host type."""
        return f"{self.hosts_dir}/{host_type}/{self.default_entry}"


DEFAULT_SETTINGS = AnalyzerSettings()


def load_config(config_path: Path) -> dict:
    """Load a nixscope config.toml file; a missing file is an empty config."""
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "rb") as f:
            return tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}", str(config_path)) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}", str(config_path)) from e


def get_analyzer_settings(config: dict) -> AnalyzerSettings:
    """Build analyzer settings from the [layout] and [tree] sections."""
    overrides: dict = {}
    layout = config.get("layout", {})
    known = {f.name: f for f in fields(AnalyzerSettings)}

    for key, value in layout.items():
        if key not in known:
            raise ConfigError(f"Unknown layout setting: {key}")
        default = getattr(DEFAULT_SETTINGS, key)
        if isinstance(default, tuple):
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"layout.{key} must be a list of strings")
            value = tuple(value)
        elif not isinstance(value, type(default)):
            raise ConfigError(f"layout.{key} must be of type {type(default).__name__}")
        overrides[key] = value

    mark_cycles = config.get("tree", {}).get("mark_cycles")
    if mark_cycles is not None:
        if not isinstance(mark_cycles, bool):
            raise ConfigError("tree.mark_cycles must be a boolean")
        overrides["mark_cycles"] = mark_cycles

    return AnalyzerSettings(**overrides)


def get_index_excludes(config: dict) -> list[str]:
    """Get extra gitignore-style exclude patterns for the repository walk."""
    excludes = config.get("index", {}).get("exclude", [])
    if not isinstance(excludes, list):
        raise ConfigError("index.exclude must be a list of patterns")
    return [str(pattern) for pattern in excludes]


def should_respect_gitignore(config: dict) -> bool:
    """Check if .gitignore patterns should hide files from the index."""
    return bool(config.get("index", {}).get("respect_gitignore", False))


def get_package_patterns(config: dict) -> list[dict]:
    """Get extra package declaration patterns from [[packages.patterns]]."""
    patterns = config.get("packages", {}).get("patterns", [])
    if not isinstance(patterns, list):
        raise ConfigError("packages.patterns must be an array of tables")
    for entry in patterns:
        if not isinstance(entry, dict) or not {"name", "block", "item"} <= entry.keys():
            raise ConfigError("each packages.patterns entry needs name, block and item")
    return patterns


@dataclass
class NixscopeConfig:
    """Everything a session needs from the config file."""

    settings: AnalyzerSettings = field(default_factory=AnalyzerSettings)
    index_excludes: list[str] = field(default_factory=list)
    respect_gitignore: bool = False
    package_patterns: list[dict] = field(default_factory=list)


def resolve_config(config: dict) -> NixscopeConfig:
    """Validate a raw config dict into a NixscopeConfig."""
    return NixscopeConfig(
        settings=get_analyzer_settings(config),
        index_excludes=get_index_excludes(config),
        respect_gitignore=should_respect_gitignore(config),
        package_patterns=get_package_patterns(config),
    )
