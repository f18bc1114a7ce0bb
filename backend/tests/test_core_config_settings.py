import importlib

import pytest
from pydantic import ValidationError


def _load_settings(monkeypatch, extra_env=None):
    import dealersite.core.config as config

    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    if extra_env:
        for key, value in extra_env.items():
            monkeypatch.setenv(key, value)
    importlib.reload(config)
    return config.Settings


def test_settings_defaults(monkeypatch):
    for key in ("CACHE_BACKEND", "DEFAULT_DEALER_ID", "SUPPORTED_LOCALES", "DEALER_HEADER_NAME"):
        monkeypatch.delenv(key, raising=False)
    Settings = _load_settings(monkeypatch)
    cfg = Settings(_env_file=None)
    assert cfg.CACHE_BACKEND == "memory"
    assert cfg.CACHE_NAMESPACE == "dealersite"
    assert cfg.CONFIG_CACHE_TTL_SECONDS == 300
    assert cfg.TENANT_CACHE_TTL_SECONDS == 600
    assert cfg.DEFAULT_THEME_KEY == "base"
    assert cfg.DEALER_HEADER_NAME == "X-Dealer-ID"
    assert cfg.DEFAULT_DEALER_ID is None
    assert cfg.SUPPORTED_LOCALES == ["en", "fr", "es", "ar"]


def test_settings_env_overrides(monkeypatch):
    Settings = _load_settings(
        monkeypatch,
        {
            "CACHE_BACKEND": "redis",
            "REDIS_URL": "redis://localhost:6379/0",
            "CONFIG_CACHE_TTL_SECONDS": "30",
            "DEFAULT_DEALER_ID": "102324",
            "DEFAULT_THEME_KEY": "t1",
            "SUPPORTED_LOCALES": '["en","de"]',
        },
    )
    cfg = Settings(_env_file=None)
    assert cfg.CACHE_BACKEND == "redis"
    assert cfg.REDIS_URL == "redis://localhost:6379/0"
    assert cfg.CONFIG_CACHE_TTL_SECONDS == 30
    assert cfg.DEFAULT_DEALER_ID == "102324"
    assert cfg.DEFAULT_THEME_KEY == "t1"
    assert cfg.SUPPORTED_LOCALES == ["en", "de"]


def test_supported_locales_accepts_comma_separated_values(monkeypatch):
    Settings = _load_settings(monkeypatch)
    cfg = Settings(_env_file=None, SUPPORTED_LOCALES="EN, fr ,")
    assert cfg.SUPPORTED_LOCALES == ["en", "fr"]


def test_negative_ttl_is_rejected(monkeypatch):
    Settings = _load_settings(monkeypatch)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, CONFIG_CACHE_TTL_SECONDS=-1)
