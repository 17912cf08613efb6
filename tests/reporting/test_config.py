"""Environment overrides for reporting.config."""
from __future__ import annotations

import importlib

import pytest

from src.reporting import config


@pytest.fixture()
def reload_config(monkeypatch):
    yield lambda: importlib.reload(config)
    monkeypatch.undo()
    importlib.reload(config)


def test_defaults():
    assert config.NUMERIC_FIELD_PREFIX == "Field_"
    assert config.DISSATISFIED_THRESHOLD == 7
    assert config.DISTRIBUTION_BOUNDS == (5, 7, 9)
    assert config.COMMENT_FIELD_KEY == "Field_8785_1_17"


def test_env_overrides(monkeypatch, reload_config):
    monkeypatch.setenv("SURVEY_DISSATISFIED_THRESHOLD", "6.5")
    monkeypatch.setenv("SURVEY_DISTRIBUTION_BOUNDS", "4,6,8")
    monkeypatch.setenv("SURVEY_FIELD_PREFIX", "Q_")

    reloaded = reload_config()

    assert reloaded.DISSATISFIED_THRESHOLD == 6.5
    assert reloaded.DISTRIBUTION_BOUNDS == (4.0, 6.0, 8.0)
    assert reloaded.NUMERIC_FIELD_PREFIX == "Q_"


@pytest.mark.parametrize("raw", ["5,7", "9,7,5", "a,b,c"])
def test_bad_bounds_rejected(monkeypatch, reload_config, raw):
    monkeypatch.setenv("SURVEY_DISTRIBUTION_BOUNDS", raw)
    with pytest.raises(ValueError):
        reload_config()
