"""Pytest fixtures for pgnav tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from pgnav.domains.connections.domain.config import ConnectionConfig
from pgnav.domains.connections.store.connections import InMemoryConnectionStore
from pgnav.domains.connections.store.state import InMemoryStateStore
from pgnav.domains.shell.store.settings import InMemorySettingsStore
from pgnav.shared.app.runtime import RuntimeConfig
from pgnav.shared.app.services import build_app_services

from .fakes import FakeAdapter, FakeRunner


@pytest.fixture
def server() -> ConnectionConfig:
    return ConnectionConfig(name="prod", host="db.example.com", username="admin", password="secret")


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def runtime(tmp_path: Path) -> RuntimeConfig:
    return RuntimeConfig(config_dir=tmp_path / "config")


@pytest.fixture
def services(runtime, server, fake_adapter, fake_runner):
    """Service container with in-memory stores and the fake adapter."""
    return build_app_services(
        runtime,
        connection_store=InMemoryConnectionStore([server]),
        settings_store=InMemorySettingsStore(),
        state_store=InMemoryStateStore(),
        adapter_factory=lambda: fake_adapter,
        process_runner=fake_runner,
    )
