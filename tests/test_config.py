"""Tests for polyloc.config - ScanConfig validation and loading."""

import pytest

from polyloc.config import ScanConfig, load_config, normalize_languages
from polyloc.exceptions import ConfigurationError, InvalidConfigError, InvalidPathError


class TestScanConfig:
    def test_defaults(self):
        config = ScanConfig()
        assert config.parallel
        assert config.language_filter is None
        assert not config.extract_functions
        assert not config.estimate_complexity
        assert config.warn_size_threshold is None
        assert config.timestamp_source == "filesystem"
        assert config.max_workers >= 1

    def test_language_filter_normalized(self):
        config = ScanConfig(language_filter=["py", ".rs", "Python"])
        assert config.language_filter == frozenset({"python", "rust"})

    def test_language_filter_from_string(self):
        assert ScanConfig(language_filter="py, go").language_filter == frozenset({"python", "go"})

    def test_empty_filter_means_everything(self):
        assert ScanConfig(language_filter=[]).language_filter is None

    def test_unknown_language(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            ScanConfig(language_filter=["klingon"])
        assert exc_info.value.key == "language_filter"

    def test_complexity_requires_extraction(self):
        with pytest.raises(InvalidConfigError):
            ScanConfig(estimate_complexity=True)
        assert ScanConfig(extract_functions=True, estimate_complexity=True).estimate_complexity

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"workers": 0},
            {"warn_size_threshold": 0},
            {"timestamp_source": "svn"},
            {"parallel_min_files": -1},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfigError):
            ScanConfig(**kwargs)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            ScanConfig().parallel = False

    def test_explicit_workers(self):
        assert ScanConfig(workers=3).max_workers == 3


def test_normalize_languages():
    assert normalize_languages(["JS", "jsx", ".mjs"]) == frozenset({"javascript"})


class TestLoadConfig:
    def test_defaults_without_sources(self, isolated_config):
        assert load_config() == ScanConfig()

    def test_explicit_file(self, isolated_config):
        path = isolated_config / "custom.toml"
        path.write_text(
            'warn_size = 500\ndefault_types = ["py", "rs"]\nalways_extract_functions = true\n'
            'timestamp_source = "git"\nworkers = 2\n'
        )
        config = load_config(config_file=path)
        assert config.warn_size_threshold == 500
        assert config.language_filter == frozenset({"python", "rust"})
        assert config.extract_functions
        assert config.timestamp_source == "git"
        assert config.workers == 2

    def test_project_file_discovered(self, isolated_config):
        (isolated_config / "polyloc.toml").write_text("parallel = false\n")
        assert not load_config().parallel

    def test_global_file(self, isolated_config, monkeypatch):
        from polyloc import config as config_module

        global_path = isolated_config / "global.toml"
        global_path.write_text("warn_size = 10\nworkers = 8\n")
        monkeypatch.setattr(config_module, "GLOBAL_CONFIG_PATH", global_path)
        (isolated_config / "polyloc.toml").write_text("warn_size = 20\n")

        config = load_config()
        assert config.warn_size_threshold == 20
        assert config.workers == 8

    def test_missing_explicit_file(self, isolated_config):
        with pytest.raises(InvalidPathError):
            load_config(config_file=isolated_config / "missing.toml")

    def test_unknown_key(self, isolated_config):
        path = isolated_config / "bad.toml"
        path.write_text("colour = 'blue'\n")
        with pytest.raises(InvalidConfigError):
            load_config(config_file=path)

    def test_malformed_toml(self, isolated_config):
        path = isolated_config / "broken.toml"
        path.write_text("warn_size = = 3\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)

    def test_env_vars(self, isolated_config, monkeypatch):
        monkeypatch.setenv("POLYLOC_WORKERS", "3")
        monkeypatch.setenv("POLYLOC_PARALLEL", "false")
        monkeypatch.setenv("POLYLOC_LANGUAGE_FILTER", "py,rs")
        config = load_config()
        assert config.workers == 3
        assert not config.parallel
        assert config.language_filter == frozenset({"python", "rust"})

    def test_bad_env_value(self, isolated_config, monkeypatch):
        monkeypatch.setenv("POLYLOC_WORKERS", "many")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_overrides_win_and_none_is_ignored(self, isolated_config, monkeypatch):
        (isolated_config / "polyloc.toml").write_text("warn_size = 20\n")
        monkeypatch.setenv("POLYLOC_WORKERS", "3")
        config = load_config(workers=5, warn_size_threshold=None, extract_functions=True)
        assert config.workers == 5
        assert config.warn_size_threshold == 20
        assert config.extract_functions

    def test_unknown_override(self, isolated_config):
        with pytest.raises(ConfigurationError):
            load_config(colour="blue")
