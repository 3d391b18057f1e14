"""Tests for docgraph settings."""

import os

import pytest

from docgraph.config.settings import DocGraphSettings, get_settings, load_settings
from docgraph.core.exceptions import ConfigError


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run each test without DOCGRAPH_ variables or a stray .env file."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("DOCGRAPH_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = DocGraphSettings()
    assert settings.include_external_links is False
    assert settings.max_nodes is None
    assert settings.layout_algorithm == "mindmap"
    assert settings.max_depth == 2
    assert settings.canvas_width == 1200
    assert settings.canvas_height == 800
    assert settings.rank_direction == "TB"
    assert settings.log_level == "WARNING"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DOCGRAPH_INCLUDE_EXTERNAL_LINKS", "true")
    monkeypatch.setenv("DOCGRAPH_MAX_NODES", "25")
    monkeypatch.setenv("DOCGRAPH_LAYOUT_ALGORITHM", "hierarchical")
    monkeypatch.setenv("DOCGRAPH_LOG_LEVEL", "debug")

    settings = get_settings()
    assert settings.include_external_links is True
    assert settings.max_nodes == 25
    assert settings.layout_algorithm == "hierarchical"
    assert settings.log_level == "DEBUG"


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("DOCGRAPH_RANK_DIRECTION=LR\n")
    assert DocGraphSettings().rank_direction == "LR"


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_depth": 0},
        {"max_depth": 6},
        {"max_nodes": 0},
        {"layout_algorithm": "circular"},
        {"rank_direction": "RL"},
        {"log_level": "LOUD"},
    ],
)
def test_invalid_values_raise_config_error(overrides):
    with pytest.raises(ConfigError):
        load_settings(**overrides)
