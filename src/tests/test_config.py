from __future__ import annotations

import json
import os
from unittest.mock import patch

import pytest

from snooze_tui import config


@pytest.fixture
def config_dir(tmp_path):
    config_path = tmp_path / "snooze" / "config.json"
    credentials_path = tmp_path / "snooze" / "credentials.json"
    with patch.object(config, "CONFIG_PATH", str(config_path)), patch.object(
        config, "CREDENTIALS_FILE", str(credentials_path)
    ):
        yield tmp_path / "snooze"


def test_load_config_creates_default(config_dir):
    loaded = config.load_config()
    assert loaded["base_url"] == config.DEFAULT_BASE_URL
    assert loaded["remember_login"] is True
    assert (config_dir / "config.json").exists()


def test_load_config_merges_user_values(config_dir):
    os.makedirs(config_dir, exist_ok=True)
    with open(config_dir / "config.json", "w") as f:
        json.dump({"base_url": "http://localhost:5000"}, f)
    loaded = config.load_config()
    assert loaded["base_url"] == "http://localhost:5000"
    assert loaded["timeout"] == config.HTTP_TIMEOUT


def test_load_config_corrupt_file_falls_back(config_dir):
    os.makedirs(config_dir, exist_ok=True)
    (config_dir / "config.json").write_text("{not json")
    assert config.load_config()["base_url"] == config.DEFAULT_BASE_URL


def test_credentials_round_trip(config_dir):
    assert config.load_credentials() is None
    config.save_credentials("bob", "tok-123")
    assert config.load_credentials() == {"username": "bob", "token": "tok-123"}
    assert oct(os.stat(config_dir / "credentials.json").st_mode & 0o777) == oct(0o600)
    config.clear_credentials()
    assert config.load_credentials() is None
    assert not (config_dir / "credentials.json").exists()


def test_load_credentials_ignores_incomplete_file(config_dir):
    os.makedirs(config_dir, exist_ok=True)
    (config_dir / "credentials.json").write_text(json.dumps({"username": "bob"}))
    assert config.load_credentials() is None


def test_setup_logging_disabled():
    assert config.setup_logging(False) is None


def test_load_config_non_object_falls_back(config_dir):
    os.makedirs(config_dir, exist_ok=True)
    (config_dir / "config.json").write_text("[1]")
    loaded = config.load_config()
    assert loaded["base_url"] == config.DEFAULT_BASE_URL
    assert loaded["ui"] == {}


def test_load_config_returns_independent_copies(config_dir):
    os.makedirs(config_dir, exist_ok=True)
    with open(config_dir / "config.json", "w") as f:
        json.dump({"base_url": "http://localhost:5000"}, f)
    first = config.load_config()
    first["ui"]["statusbar_keybindings"] = "changed"
    assert config.load_config()["ui"] == {}
    assert config.DEFAULT_CONFIG["ui"] == {}
