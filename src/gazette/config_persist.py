"""
Read the optional user configuration file for Gazette.

The file only carries settings (timeouts, log destination, endpoints); the
application never writes state back to it.
"""
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get the user configuration directory for Gazette"""
    if os.name == 'nt':  # Windows
        config_base = Path(os.environ.get('APPDATA', Path.home() / 'AppData' / 'Roaming'))
    else:  # Unix-like (Linux, macOS)
        config_base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))
    return config_base / 'gazette'


def get_config_file() -> Path:
    """Get the configuration file path"""
    return get_config_dir() / 'config.json'


def load_config() -> Dict[str, Any]:
    """Load configuration from file, returning empty dict if not found or invalid"""
    config_file = get_config_file()
    if not config_file.exists():
        return {}

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        logger.warning("ignoring unreadable config file %s: %s", config_file, exc)
        return {}

    if not isinstance(data, dict):
        logger.warning("ignoring config file %s: expected a JSON object", config_file)
        return {}
    return data
