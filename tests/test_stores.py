"""Tests for the JSON-backed stores."""

import json

import pytest

from pgnav.domains.connections.domain.config import ConnectionConfig
from pgnav.domains.connections.store.connections import ConnectionStore
from pgnav.domains.connections.store.state import StateStore
from pgnav.domains.shell.store.settings import SettingsStore
from pgnav.shared.core.errors import UnknownServerError


@pytest.fixture
def store(runtime):
    return ConnectionStore(runtime.connections_path)


class TestConnectionStore:
    def test_empty_when_missing(self, store):
        assert store.load_all() == []

    def test_save_and_get(self, store, server):
        store.save(server, save_password=True)
        assert store.get("prod") == server

    def test_sorted_by_name(self, store):
        store.save(ConnectionConfig(name="zeta", host="z"))
        store.save(ConnectionConfig(name="Alpha", host="a"))
        assert [config.name for config in store.load_all()] == ["Alpha", "zeta"]

    def test_password_not_written_unless_requested(self, store, server, runtime):
        store.save(server)
        on_disk = json.loads(runtime.connections_path.read_text())
        assert "password" not in on_disk["connections"][0]
        # Still available for the rest of the session.
        assert store.get("prod").password == "secret"
        assert ConnectionStore(runtime.connections_path).get("prod").password == ""

    def test_save_password_persists(self, store, server, runtime):
        store.save(server, save_password=True)
        assert ConnectionStore(runtime.connections_path).get("prod").password == "secret"

    def test_save_replaces_existing(self, store, server):
        store.save(server)
        store.save(server.with_credentials("other", "pw"))
        assert len(store.load_all()) == 1
        assert store.get("prod").username == "other"

    def test_remove(self, store, server):
        store.save(server)
        store.remove("prod")
        assert store.load_all() == []
        with pytest.raises(UnknownServerError):
            store.remove("prod")

    def test_get_unknown(self, store):
        with pytest.raises(UnknownServerError):
            store.get("missing")

    def test_corrupt_file_reads_as_empty(self, store, runtime):
        runtime.connections_path.parent.mkdir(parents=True)
        runtime.connections_path.write_text("{not json")
        assert store.load_all() == []


class TestStateStore:
    def test_persists_across_instances(self, runtime):
        StateStore(runtime.state_path).set_connected_database("prod/sales")
        assert StateStore(runtime.state_path).get_connected_database() == "prod/sales"

    def test_clear(self, runtime):
        store = StateStore(runtime.state_path)
        store.set_connected_database("prod/sales")
        store.set_connected_database(None)
        assert store.get_connected_database() is None


class TestSettingsStore:
    def test_defaults(self, runtime):
        settings = SettingsStore(runtime.settings_path)
        assert settings.get("firewall_command") == []
        assert settings.get("default_sslmode") == "prefer"

    def test_set_overrides_default(self, runtime):
        SettingsStore(runtime.settings_path).set("default_sslmode", "require")
        assert SettingsStore(runtime.settings_path).get("default_sslmode") == "require"
