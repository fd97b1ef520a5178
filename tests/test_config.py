"""Tests for the connection descriptor and runtime configuration."""

from pathlib import Path

import pytest

from pgnav.domains.connections.domain.config import (
    DEFAULT_DATABASE,
    DEFAULT_PORT,
    DEFAULT_SSLMODE,
    ConnectionConfig,
    split_database_id,
)
from pgnav.shared.app.runtime import RuntimeConfig


class TestConnectionConfig:
    def test_defaults(self):
        config = ConnectionConfig(name="local", host="localhost")
        assert config.port == DEFAULT_PORT
        assert config.sslmode == DEFAULT_SSLMODE
        assert config.database == DEFAULT_DATABASE
        assert not config.has_credentials

    def test_has_credentials_needs_both_fields(self):
        assert not ConnectionConfig(name="a", host="h", username="u").has_credentials
        assert not ConnectionConfig(name="a", host="h", password="p").has_credentials
        assert ConnectionConfig(name="a", host="h", username="u", password="p").has_credentials

    def test_for_database_keeps_server_fields(self, server):
        target = server.for_database("sales")
        assert target.database == "sales"
        assert target.name == server.name
        assert target.password == server.password
        assert server.database == DEFAULT_DATABASE

    def test_database_id(self, server):
        assert server.database_id() == "prod/postgres"
        assert server.database_id("sales") == "prod/sales"

    def test_to_dict_omits_password_by_default(self, server):
        assert "password" not in server.to_dict()
        assert server.to_dict(include_passwords=True)["password"] == "secret"

    def test_from_dict_fills_defaults_and_rejects_unknown_sslmode(self):
        config = ConnectionConfig.from_dict({"name": "x", "host": "h", "sslmode": "bogus", "port": ""})
        assert config.port == DEFAULT_PORT
        assert config.sslmode == DEFAULT_SSLMODE
        assert config.database == DEFAULT_DATABASE

    def test_from_dict_round_trips_to_dict(self, server):
        assert ConnectionConfig.from_dict(server.to_dict(include_passwords=True)) == server


class TestSplitDatabaseId:
    def test_splits_on_first_separator(self):
        assert split_database_id("prod/sales") == ("prod", "sales")

    @pytest.mark.parametrize("value", ["prod", "/sales", "prod/", ""])
    def test_malformed(self, value):
        with pytest.raises(ValueError):
            split_database_id(value)


class TestRuntimeConfig:
    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PGNAV_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("PGNAV_MAX_ROWS", "50")
        monkeypatch.setenv("PGNAV_DEBUG", "1")
        monkeypatch.delenv("PGNAV_LOG_FILE", raising=False)
        runtime = RuntimeConfig.from_env()
        assert runtime.config_dir == tmp_path
        assert runtime.max_rows == 50
        assert runtime.debug_mode is True
        assert runtime.connections_path == tmp_path / "connections.json"
        assert runtime.log_path == tmp_path / "pgnav.log"

    @pytest.mark.parametrize("value", ["abc", "0", "-3", ""])
    def test_invalid_max_rows_falls_back(self, monkeypatch, value):
        monkeypatch.setenv("PGNAV_MAX_ROWS", value)
        assert RuntimeConfig.from_env().max_rows is None

    def test_log_file_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PGNAV_LOG_FILE", str(tmp_path / "custom.log"))
        assert RuntimeConfig.from_env().log_path == Path(tmp_path / "custom.log")
