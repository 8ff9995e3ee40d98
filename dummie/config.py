"""User configuration stored as JSON under ~/.dummie"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .strucview import DEFAULT_SKIP_DIRS, parse_depth

logger = logging.getLogger(__name__)

CONFIG_ENV = "DUMMIE_CONFIG"

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "strucview": {
        "level": "3",
        "skip_dirs": [],
        "default_skip_dirs": sorted(DEFAULT_SKIP_DIRS),
        "interactive": False,
    },
    "translate": {
        "from": "en",
        "to": "vi",
        "timeout": 10,
        "browser_timeout": 5000,
        "chrome_path": None,
    },
    "logging": {
        "file": None,
    },
}


def default_config_path() -> str:
    """Config file location, honouring $DUMMIE_CONFIG"""
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return env_path
    return str(Path.home() / ".dummie" / "config.json")


def parse_value(raw: str) -> Any:
    """Interpret a command line value as JSON, falling back to the plain string"""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def check_names(value):
    """A directory name or a list of names; a single name becomes a list"""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(name, str) and name for name in value):
        raise ValueError(f"Expected a directory name or a list of names, got {value!r}")
    return value


def check_flag(value):
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in ('yes', 'y', 'true', 'on'):
            return True
        if word in ('no', 'n', 'false', 'off'):
            return False
    raise ValueError(f"Expected yes/no or true/false, got {value!r}")


def check_level(value):
    parse_depth(value)
    return value


def check_timeout(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"Expected a positive number, got {value!r}")
    return value


def check_language(value):
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected a language code such as 'en', got {value!r}")
    return value


def check_optional_path(value):
    if value is None or (isinstance(value, str) and value):
        return value
    raise ValueError(f"Expected a path or null, got {value!r}")


CHECKS = {
    "strucview": {
        "level": check_level,
        "skip_dirs": check_names,
        "default_skip_dirs": check_names,
        "interactive": check_flag,
    },
    "translate": {
        "from": check_language,
        "to": check_language,
        "timeout": check_timeout,
        "browser_timeout": check_timeout,
        "chrome_path": check_optional_path,
    },
    "logging": {
        "file": check_optional_path,
    },
}


def check_value(section: str, key: str, value: Any) -> Any:
    """Validate `value` for `section.key`, returning it in its stored form"""
    if section not in CHECKS or key not in CHECKS[section]:
        raise KeyError(f"Unknown config key: {section}.{key}")
    try:
        return CHECKS[section][key](value)
    except ValueError as e:
        raise ValueError(f"Invalid value for {section}.{key}: {e}") from None


class DummieConfig:
    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or default_config_path()
        self.config = self.load_config()

    def default_config(self) -> Dict:
        return copy.deepcopy(DEFAULT_CONFIG)

    def load_config(self) -> Dict:
        """Load configuration from file, merged over the defaults"""
        config = self.default_config()
        if not os.path.exists(self.config_path):
            return config
        try:
            with open(self.config_path, 'r') as f:
                loaded = json.load(f)
        except json.JSONDecodeError:
            logger.warning("Invalid JSON in %s, using defaults", self.config_path)
            return config
        except OSError as e:
            logger.warning("Cannot read %s: %s", self.config_path, e)
            return config

        if not isinstance(loaded, dict):
            logger.warning("Ignoring %s: top level must be an object", self.config_path)
            return config
        for section, values in loaded.items():
            if section not in config or not isinstance(values, dict):
                continue
            for key, value in values.items():
                try:
                    config[section][key] = check_value(section, key, value)
                except (KeyError, ValueError) as e:
                    logger.warning("Ignoring setting in %s: %s", self.config_path, e)
        return config

    def save_config(self):
        """Save configuration to file"""
        directory = os.path.dirname(self.config_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.config_path, 'w') as f:
            json.dump(self.config, f, indent=2)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        return self.config.get(section, {}).get(key, default)

    def set(self, dotted_key: str, value: Any):
        """
        Set `section.key`. Raises KeyError for keys the defaults don't have
        and ValueError for values of the wrong kind.
        """
        section, _, key = dotted_key.partition('.')
        self.config[section][key] = check_value(section, key, value)

    def reset(self):
        self.config = self.default_config()

    def items(self):
        for section, values in self.config.items():
            for key, value in values.items():
                yield f"{section}.{key}", value
