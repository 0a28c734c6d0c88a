import pytest

import config
from config import ConfigError, load_config


def test_load_config_from_mapping():
    cfg = load_config({
        "DATABASE_URL": "sqlite://",
        "CORS_ORIGINS": "http://a.test, http://b.test",
        "LOG_LEVEL": "debug",
        "RECOMMENDATION_LIMIT": "5",
    })
    assert cfg.cors_origins == ["http://a.test", "http://b.test"]
    assert cfg.log_level == "DEBUG"
    assert cfg.recommendation_limit == 5


def test_invalid_config_is_logged_and_raised(monkeypatch):
    errors = []
    monkeypatch.setattr(config.logger, "error", errors.append)

    with pytest.raises(ConfigError):
        load_config({"RECOMMENDATION_LIMIT": "80", "RECOMMENDATION_LIMIT_MAX": "50"})

    assert len(errors) == 1
    assert "Invalid backend configuration" in errors[0]


def test_unknown_log_level_rejected(monkeypatch):
    monkeypatch.setattr(config.logger, "error", lambda msg: None)
    with pytest.raises(ConfigError):
        load_config({"LOG_LEVEL": "chatty"})
