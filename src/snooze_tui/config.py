from __future__ import annotations

import copy
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

# --- Configuration ---
DEFAULT_BASE_URL = "https://hack-or-snooze-v3.herokuapp.com"
HTTP_TIMEOUT = 15

CONFIG_PATH = os.path.expanduser("~/.config/snooze/config.json")
CREDENTIALS_FILE = os.path.expanduser("~/.config/snooze/credentials.json")

REQUEST_HEADERS = {
    "User-Agent": "snooze-tui/0.1",
    "Accept": "application/json",
}

# Default UI settings
UI_DEFAULTS = {
    "statusbar_keybindings": (
        "[b {color}]a[/] all  [b {color}]f[/] favorites  [b {color}]m[/] my stories  "
        "[b {color}]l[/] login  [b {color}]space[/] star"
    ),
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "base_url": DEFAULT_BASE_URL,
    "timeout": HTTP_TIMEOUT,
    "remember_login": True,
    "ui": {},
}

# --- Logging ---
logger = logging.getLogger("snooze")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/snooze_debug_{ts}_{pid}.log"

    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def ensure_config_file_exists() -> None:
    """Write the default config file if the user's config file is not found."""
    if not os.path.exists(CONFIG_PATH):
        logger.info("Config file not found at %s, creating default.", CONFIG_PATH)
        save_config(DEFAULT_CONFIG)


def load_config() -> Dict[str, Any]:
    """Load the main configuration file, filling in defaults for missing keys."""
    ensure_config_file_exists()
    config = copy.deepcopy(DEFAULT_CONFIG)
    try:
        with open(CONFIG_PATH, "r") as f:
            loaded = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", CONFIG_PATH, e)
        return config
    if not isinstance(loaded, dict):
        logger.error("Ignoring config at %s: expected a JSON object", CONFIG_PATH)
        return config
    config.update(loaded)
    logger.info("Loaded config from %s", CONFIG_PATH)
    return config


def save_config(config: Dict[str, Any]) -> None:
    """Save the main configuration file."""
    try:
        os.makedirs(os.path.dirname(CONFIG_PATH), exist_ok=True)
        with open(CONFIG_PATH, "w") as f:
            json.dump(config, f, indent=2)
        logger.info("Saved config to %s", CONFIG_PATH)
    except IOError as e:
        logger.error("Failed to save config to %s: %s", CONFIG_PATH, e)


def load_credentials() -> Optional[Dict[str, str]]:
    """Load the stored username and token, if any."""
    if not os.path.exists(CREDENTIALS_FILE):
        return None
    try:
        with open(CREDENTIALS_FILE, "r") as f:
            data = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable credentials file %s: %s", CREDENTIALS_FILE, e)
        return None
    if not isinstance(data, dict) or not data.get("username") or not data.get("token"):
        return None
    return {"username": data["username"], "token": data["token"]}


def save_credentials(username: str, token: str) -> None:
    """Store the username and token so the next run can restore the session."""
    try:
        os.makedirs(os.path.dirname(CREDENTIALS_FILE), exist_ok=True)
        with open(CREDENTIALS_FILE, "w") as f:
            json.dump({"username": username, "token": token}, f)
        os.chmod(CREDENTIALS_FILE, 0o600)
        logger.debug("Saved credentials for %s", username)
    except (IOError, OSError) as e:
        logger.error("Failed to save credentials to %s: %s", CREDENTIALS_FILE, e)


def clear_credentials() -> None:
    """Forget any stored session."""
    try:
        if os.path.exists(CREDENTIALS_FILE):
            os.unlink(CREDENTIALS_FILE)
            logger.debug("Cleared stored credentials")
    except OSError as e:
        logger.error("Failed to delete credentials file %s: %s", CREDENTIALS_FILE, e)
