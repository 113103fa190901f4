"""Tests for the config module."""

from pathlib import Path

import pytest

from nixscope.config import (
    AnalyzerSettings,
    get_analyzer_settings,
    get_index_excludes,
    get_package_patterns,
    load_config,
    resolve_config,
    should_respect_gitignore,
)
from nixscope.exceptions import ConfigError


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_is_empty(self, tmp_path: Path):
        """A missing config file means defaults."""
        assert load_config(tmp_path / "config.toml") == {}

    def test_reads_toml(self, tmp_path: Path):
        """Should parse TOML."""
        path = tmp_path / "config.toml"
        path.write_text('[layout]\ndefault_entry = "entry.nix"\n')

        assert load_config(path) == {"layout": {"default_entry": "entry.nix"}}

    def test_invalid_toml(self, tmp_path: Path):
        """Should raise ConfigError for bad TOML."""
        path = tmp_path / "config.toml"
        path.write_text("[layout\n")

        with pytest.raises(ConfigError):
            load_config(path)


class TestAnalyzerSettings:
    """Tests for settings built from config."""

    def test_defaults(self):
        """Empty config gives the default layout."""
        settings = get_analyzer_settings({})

        assert settings == AnalyzerSettings()
        assert settings.root_file("shared") == "hosts/shared/default.nix"

    def test_overrides(self):
        """Layout values override defaults; lists become tuples."""
        settings = get_analyzer_settings(
            {
                "layout": {"hosts_dir": "machines", "reserved_host_dirs": ["profiles", "templates"]},
                "tree": {"mark_cycles": True},
            }
        )

        assert settings.hosts_dir == "machines"
        assert settings.reserved_host_dirs == ("profiles", "templates")
        assert settings.mark_cycles is True

    def test_unknown_key(self):
        """Unknown layout keys are rejected."""
        with pytest.raises(ConfigError):
            get_analyzer_settings({"layout": {"colour": "red"}})

    def test_wrong_type(self):
        """Values of the wrong type are rejected."""
        with pytest.raises(ConfigError):
            get_analyzer_settings({"layout": {"hosts_dir": 3}})
        with pytest.raises(ConfigError):
            get_analyzer_settings({"layout": {"browse_dirs": "hosts"}})
        with pytest.raises(ConfigError):
            get_analyzer_settings({"tree": {"mark_cycles": "yes"}})


class TestOtherSections:
    """Tests for index and packages sections."""

    def test_index_section(self):
        """Should read excludes and the gitignore flag."""
        config = {"index": {"exclude": ["result"], "respect_gitignore": True}}

        assert get_index_excludes(config) == ["result"]
        assert should_respect_gitignore(config) is True

    def test_index_defaults(self):
        """Defaults: no extra excludes, .gitignore not respected."""
        assert get_index_excludes({}) == []
        assert should_respect_gitignore({}) is False

    def test_package_patterns(self):
        """Should validate package pattern tables."""
        entry = {"name": "fonts", "block": "(.*)", "item": "\\w+"}

        assert get_package_patterns({"packages": {"patterns": [entry]}}) == [entry]
        with pytest.raises(ConfigError):
            get_package_patterns({"packages": {"patterns": [{"name": "x"}]}})

    def test_resolve_config(self):
        """Should gather every section."""
        config = resolve_config({"index": {"exclude": ["a"]}, "layout": {"extension": ".conf"}})

        assert config.settings.extension == ".conf"
        assert config.index_excludes == ["a"]
        assert config.package_patterns == []
