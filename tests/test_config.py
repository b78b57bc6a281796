"""Tests for settings and logging."""

import logging

import pytest
from pydantic import ValidationError

from laplace_e.config import Settings, get_logger
from laplace_e.sim.run_simulation import EstimatorConfig


def test_settings_defaults():
    """Defaults mirror the reference run: 50000 repetitions, 10 steps."""
    settings = Settings()

    assert settings.N_REPETITIONS == 50000
    assert settings.N_STEPS == 10
    assert settings.ENSEMBLE_SIZE == 10000
    assert settings.THRESHOLD == 1.0
    assert settings.MAX_DRAWS == 10000


def test_settings_from_environment(monkeypatch):
    """LAPLACE_E_* variables override defaults."""
    monkeypatch.setenv("LAPLACE_E_N_STEPS", "12")
    monkeypatch.setenv("laplace_e_random_seed", "7")

    settings = Settings()

    assert settings.N_STEPS == 12
    assert settings.random_seed == 7


def test_settings_validation():
    """Non-positive sizes are rejected."""
    with pytest.raises(ValidationError):
        Settings(ENSEMBLE_SIZE=0)

    with pytest.raises(ValidationError):
        Settings(N_REPETITIONS=-1)

    with pytest.raises(ValidationError):
        Settings(THRESHOLD=0.0)


def test_estimator_config_from_settings():
    """Overrides win; None overrides are ignored."""
    settings = Settings(N_STEPS=5, ENSEMBLE_SIZE=300, RANDOM_SEED=11)

    config = EstimatorConfig.from_settings(settings, steps=None, repetitions=1000)

    assert config.steps == 5
    assert config.ensemble_size == 300
    assert config.repetitions == 1000
    assert config.random_seed == 11


def test_get_logger():
    """Loggers are standard logging.Logger instances."""
    log = get_logger("laplace_e.test")

    assert isinstance(log, logging.Logger)
    assert log.name == "laplace_e.test"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
