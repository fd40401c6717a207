"""
Tests for order_analytics.config: EngineConfig from environment.
"""

import pytest

from order_analytics.config import MAX_DEFAULT_WORKERS, WORKERS_ENV, EngineConfig


def test_default_workers_when_unset():
    cfg = EngineConfig.from_env({})
    assert 1 <= cfg.workers <= MAX_DEFAULT_WORKERS


def test_workers_from_env_mapping():
    assert EngineConfig.from_env({WORKERS_ENV: "6"}).workers == 6


def test_workers_from_process_env(monkeypatch):
    monkeypatch.setenv(WORKERS_ENV, " 2 ")
    assert EngineConfig.from_env().workers == 2


def test_blank_env_uses_default(monkeypatch):
    monkeypatch.setenv(WORKERS_ENV, "")
    assert EngineConfig.from_env().workers >= 1


@pytest.mark.parametrize("raw", ["zero", "0", "-3", "1.5"])
def test_invalid_env_rejected(raw):
    with pytest.raises(ValueError):
        EngineConfig.from_env({WORKERS_ENV: raw})


def test_config_immutable():
    cfg = EngineConfig(workers=2)
    with pytest.raises(AttributeError):
        cfg.workers = 3
