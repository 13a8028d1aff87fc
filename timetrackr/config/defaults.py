"""Default configuration values."""

from typing import Any, Dict

# Default settings as a dictionary (useful for initialization)
DEFAULT_SETTINGS: Dict[str, Any] = {
    "timetrackr": {
        "timezone": "UTC",
        "just_now_seconds": 5,
        "just_now_text": "just now",
    },
    "logging": {
        "debug": False,
        "log_dir": None,
    },
}

DEFAULT_CONFIG_DIR = ".timetrackr"
DEFAULT_CONFIG_FILE = "config.json"
