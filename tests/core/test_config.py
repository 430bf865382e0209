"""Config: numeric settings are parsed on use so bad values reach validate(), not import."""

import pytest

from flavor_sync.core.config import Config


def test_defaults_parse():
    assert Config.http_timeout_seconds() > 0
    assert isinstance(Config.port(), int)


def test_bad_timeout_is_reported_by_validate(monkeypatch):
    monkeypatch.setattr(Config, "FLAVOR_HTTP_TIMEOUT_SECONDS_ENV", "soon")
    with pytest.raises(ValueError, match="FLAVOR_HTTP_TIMEOUT_SECONDS"):
        Config.validate()


def test_non_positive_timeout_is_rejected(monkeypatch):
    monkeypatch.setattr(Config, "FLAVOR_HTTP_TIMEOUT_SECONDS_ENV", "0")
    with pytest.raises(ValueError, match="positive"):
        Config.http_timeout_seconds()


def test_bad_port_is_reported_by_validate(monkeypatch):
    monkeypatch.setattr(Config, "PORT_ENV", "eighty")
    with pytest.raises(ValueError, match="PORT"):
        Config.validate()


def test_rest_backend_requires_base_url(monkeypatch):
    monkeypatch.setattr(Config, "FLAVOR_STORE_BACKEND", "rest")
    monkeypatch.setattr(Config, "FLAVOR_API_BASE_URL", "")
    with pytest.raises(ValueError, match="FLAVOR_API_BASE_URL"):
        Config.validate()


def test_allowed_origins_deduplicates(monkeypatch):
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "http://localhost:8081, http://app.test")
    origins = Config.allowed_origins(["http://app.test"])
    assert origins == ["http://localhost:8081", "http://app.test", "http://localhost:19006"]
