import logging

import pytest

from filmigo_api.clients.movie_client import build_clients
from filmigo_api.clients.omdb_client import OmdbClient
from filmigo_api.config import Settings


def test_defaults(monkeypatch):
    for name in ("OMDB_API_KEY", "APP_MODE", "PORT", "HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    config = Settings(_env_file=None)
    assert config.PORT == 8080
    assert config.HOST == "0.0.0.0"
    assert config.HTTP_TIMEOUT == 10.0
    assert config.omdb_enabled is False
    assert config.is_release is False


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("OMDB_API_KEY", "abc123")
    monkeypatch.setenv("APP_MODE", "Release")
    monkeypatch.setenv("PORT", "9000")
    config = Settings(_env_file=None)
    assert config.omdb_enabled is True
    assert config.is_release is True
    assert config.PORT == 9000


@pytest.mark.parametrize("key", [None, "", "   "])
def test_blank_key_disables_omdb(key, caplog):
    caplog.set_level(logging.WARNING)
    clients = build_clients(Settings(_env_file=None, OMDB_API_KEY=key))
    assert clients.omdb is None
    assert clients.imdb is not None
    assert clients.justwatch is not None
    assert "OMDB_API_KEY not set" in caplog.text


def test_build_clients_passes_settings():
    config = Settings(_env_file=None, OMDB_API_KEY="abc123", HTTP_TIMEOUT=3.5, JUSTWATCH_COUNTRY="fr")
    clients = build_clients(config)
    assert isinstance(clients.omdb, OmdbClient)
    assert clients.omdb.api_key == "abc123"
    assert clients.imdb.timeout == 3.5
    assert clients.justwatch.country == "FR"


def test_client_bundle_is_immutable():
    clients = build_clients(Settings(_env_file=None, OMDB_API_KEY=None))
    with pytest.raises(AttributeError):
        clients.omdb = object()
