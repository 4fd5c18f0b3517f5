# contractgen/settings.py

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from appdirs import user_data_dir

logger = logging.getLogger(__name__)

APP_NAME   = "ContractGen"
APP_AUTHOR = "ContractGen"
APP_DIR    = user_data_dir(APP_NAME, APP_AUTHOR)

# Settings file location using platform-appropriate user data directory
SETTINGS_FILE = os.path.join(APP_DIR, "contractgen_settings.json")

# Reserved record key holding the JSON blob of extra CSV columns
EXTENSION_KEY = "dynamicFields"

# Column-name fragments that mark a mapped field as money
MONEY_HINTS = ("salary", "bonus", "amount", "wage")

DEFAULT_VALUE_HEADER = "FTE"


@dataclass
class Settings:
    extension_key: str = EXTENSION_KEY
    output_dir: str = field(default_factory=lambda: os.path.join(APP_DIR, "contracts"))
    value_header: str = DEFAULT_VALUE_HEADER
    money_hints: Tuple[str, ...] = MONEY_HINTS


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Build settings from defaults, the settings JSON file, then environment.

    Precedence (highest first):
    1. CONTRACTGEN_OUTPUT_DIR / CONTRACTGEN_VALUE_HEADER
    2. settings JSON (``path`` or SETTINGS_FILE)
    3. built-in defaults

    A missing or unreadable settings file falls back to defaults.
    """
    settings = Settings()
    settings_path = path or SETTINGS_FILE

    data = {}
    if os.path.isfile(settings_path):
        try:
            with open(settings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", settings_path, e)
            data = {}
        if not isinstance(data, dict):
            data = {}

    if data.get("extension_key"):
        settings.extension_key = str(data["extension_key"])
    if data.get("output_dir"):
        settings.output_dir = str(data["output_dir"])
    if data.get("value_header"):
        settings.value_header = str(data["value_header"])
    if isinstance(data.get("money_hints"), list):
        settings.money_hints = tuple(str(h).lower() for h in data["money_hints"] if h)

    env_output = os.environ.get("CONTRACTGEN_OUTPUT_DIR")
    if env_output:
        settings.output_dir = env_output
    env_header = os.environ.get("CONTRACTGEN_VALUE_HEADER")
    if env_header:
        settings.value_header = env_header

    return settings
