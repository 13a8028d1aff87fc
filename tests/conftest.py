"""Shared fixtures."""

import pytest

from timetrackr.config import manager
from timetrackr.config.manager import ConfigManager


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the global config manager at an empty temporary directory."""
    config_manager = ConfigManager(tmp_path / "config.json")
    monkeypatch.setattr(manager, "_config_manager", config_manager)
    return config_manager
