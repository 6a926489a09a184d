"""Tests for config.py — TOML files, precedence, validation, masking."""

import os
import stat

import pytest

from tdcli import config
from tdcli.exceptions import ConfigError


def _write(path, text):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestLoadToml:
    def test_missing_file_is_empty(self, tmp_path):
        assert config.load_toml(str(tmp_path / "nope.toml")) == {}

    def test_keeps_known_string_keys(self, tmp_path):
        path = str(tmp_path / "c.toml")
        _write(path, 'api_key = "1/abc"\nregion = "eu"\ncolour = "red"\nformat = 3\n')
        assert config.load_toml(path) == {"api_key": "1/abc", "region": "eu"}

    def test_invalid_toml(self, tmp_path):
        path = str(tmp_path / "c.toml")
        _write(path, "api_key = \n")
        with pytest.raises(ConfigError, match="Invalid config file"):
            config.load_toml(path)


class TestFileConfig:
    def test_local_overrides_home(self):
        _write(config.home_config_path(), 'region = "eu"\nformat = "csv"\n')
        _write(os.path.join(os.getcwd(), ".tdcli.toml"), 'region = "tokyo"\n')
        assert config.load_file_config() == {"region": "tokyo", "format": "csv"}

    def test_first_local_file_wins(self):
        _write(os.path.join(os.getcwd(), "tdcli.toml"), 'region = "ap02"\n')
        _write(os.path.join(os.getcwd(), ".tdcli.toml"), 'region = "tokyo"\n')
        assert config.load_file_config() == {"region": "ap02"}

    def test_search_paths_in_priority_order(self):
        paths = config.config_search_paths()
        assert paths[0].endswith("tdcli.toml")
        assert paths[-1] == config.home_config_path()
        assert len(paths) == 3


class TestWriteConfig:
    def test_save_value_keeps_other_keys(self, tmp_path):
        path = str(tmp_path / "sub" / ".tdcli.toml")
        config.save_config_value(path, "region", "eu")
        config.save_config_value(path, "format", "json")
        assert config.load_toml(path) == {"region": "eu", "format": "json"}

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_owner_only_permissions(self, tmp_path):
        path = str(tmp_path / ".tdcli.toml")
        config.write_config(path, {"api_key": "1/abc"})
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    def test_unknown_key(self, tmp_path):
        with pytest.raises(ConfigError, match="Unknown config key"):
            config.save_config_value(str(tmp_path / "c.toml"), "colour", "red")


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveSettings:
    def test_defaults(self):
        assert config.resolve_settings() == {
            "api_key": "",
            "region": "us",
            "format": "table",
            "output": "",
        }

    def test_env_overrides_file(self, monkeypatch):
        _write(config.home_config_path(), 'region = "eu"\napi_key = "1/file"\n')
        monkeypatch.setenv("TD_REGION", "tokyo")
        settings = config.resolve_settings()
        assert settings["region"] == "tokyo"
        assert settings["api_key"] == "1/file"

    def test_flags_override_env(self, monkeypatch):
        monkeypatch.setenv("TD_FORMAT", "csv")
        monkeypatch.setenv("TD_OUTPUT", "env.csv")
        settings = config.resolve_settings(fmt="json", output="")
        assert settings["format"] == "json"
        assert settings["output"] == ""

    def test_empty_env_is_ignored(self, monkeypatch):
        monkeypatch.setenv("TD_REGION", "")
        assert config.resolve_settings()["region"] == "us"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    @pytest.mark.parametrize("key", ["12345/abcdef", "1/x"])
    def test_valid_api_keys(self, key):
        assert config.validate_api_key(key) == key

    @pytest.mark.parametrize("key", ["abcdef", "/abc", "123/", "1/2/3", ""])
    def test_invalid_api_keys(self, key):
        with pytest.raises(ConfigError, match="Expected format: account_id/api_key"):
            config.validate_api_key(key)

    def test_region(self):
        assert config.validate_region("ap02") == "ap02"
        with pytest.raises(ConfigError, match="Invalid region: mars"):
            config.validate_region("mars")

    def test_format(self):
        with pytest.raises(ConfigError, match="Invalid format"):
            config.validate_format("yaml")

    def test_endpoints(self):
        endpoints = config.endpoints_for("eu")
        assert set(endpoints) == {"api", "cdp", "workflow"}
        assert endpoints["api"].startswith("https://")

    def test_query_engine_precedence(self, monkeypatch):
        assert config.resolve_query_engine() == "trino"
        monkeypatch.setenv("TD_QUERY_ENGINE", "HIVE")
        assert config.resolve_query_engine() == "hive"
        assert config.resolve_query_engine("presto") == "presto"

    def test_query_engine_invalid(self, monkeypatch):
        monkeypatch.setenv("TD_QUERY_ENGINE", "spark")
        with pytest.raises(ConfigError, match="Invalid query engine: spark"):
            config.resolve_query_engine()


class TestMaskApiKey:
    def test_empty(self):
        assert config.mask_api_key("") == "(not set)"

    def test_short(self):
        assert config.mask_api_key("1/abcdef") == "***"

    def test_long(self):
        assert config.mask_api_key("12345/abcdefghij") == "1234***ghij"
