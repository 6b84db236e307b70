"""Tests for settings, logging setup and engine wiring."""
from __future__ import annotations

import logging
from pathlib import Path

from field_notes.core.config import Settings
from field_notes.core.logging import setup_logging
from field_notes.remote.client import HttpRemoteClient
from field_notes.remote.connectivity import RemoteHealthProbe
from field_notes.sync.factory import create_sync_engine


class TestSettings:

    def test_defaults(self):
        config = Settings(_env_file=None)
        assert config.DATABASE_URL.startswith("sqlite")
        assert config.REMOTE_TIMEOUT == 10.0
        assert config.API_V1_STR == "/api/v1"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("REMOTE_BASE_URL", "http://notes.example/api/v1")
        monkeypatch.setenv("REMOTE_TIMEOUT", "2.5")
        config = Settings(_env_file=None)
        assert config.REMOTE_BASE_URL == "http://notes.example/api/v1"
        assert config.REMOTE_TIMEOUT == 2.5


class TestWiring:

    def test_create_sync_engine(self, tmp_path: Path):
        config = Settings(
            _env_file=None,
            DATABASE_URL=f"sqlite:///{tmp_path / 'local.db'}",
            REMOTE_BASE_URL="http://notes.example/api/v1/",
            REMOTE_TIMEOUT=4.0,
        )
        engine = create_sync_engine(config)

        assert isinstance(engine.remote, HttpRemoteClient)
        assert engine.remote.base_url == "http://notes.example/api/v1"
        assert engine.remote.timeout == 4.0
        assert isinstance(engine.is_online, RemoteHealthProbe)
        assert engine.is_online.health_url == "http://notes.example/api/v1/health"
        assert engine.store.list_notes() == []
        assert (tmp_path / "local.db").exists()


class TestLogging:

    def test_setup_logging_sets_level(self):
        setup_logging("DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert logging.getLogger("urllib3").level == logging.WARNING
        setup_logging("WARNING")
