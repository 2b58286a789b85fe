"""Preferences manager for Agent-AWStoolkit.

Manages persistent user preferences stored in XDG Base Directory standard location:
~/.config/agent-awstoolkit/preferences.json
"""
import json
from pathlib import Path
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

# XDG Base Directory standard location
PREFERENCES_DIR = Path.home() / ".config" / "agent-awstoolkit"
PREFERENCES_FILE = PREFERENCES_DIR / "preferences.json"


def _load_preferences() -> Dict[str, Any]:
    """
    Load preferences from JSON file.

    Returns:
        Dictionary of preferences, or empty dict if the file is missing or unreadable
    """
    if not PREFERENCES_FILE.exists():
        return {}

    try:
        with open(PREFERENCES_FILE, 'r') as f:
            preferences = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable preferences file {PREFERENCES_FILE}: {e}")
        return {}

    if not isinstance(preferences, dict):
        logger.warning(f"Ignoring preferences file {PREFERENCES_FILE}: expected a JSON object")
        return {}
    return preferences


def _save_preferences(preferences: Dict[str, Any]) -> None:
    PREFERENCES_DIR.mkdir(parents=True, exist_ok=True)
    with open(PREFERENCES_FILE, 'w') as f:
        json.dump(preferences, f, indent=2)


def get_preference(key: str) -> Optional[str]:
    """Get preference value by key, or None if unset."""
    return _load_preferences().get(key)


def set_preference(key: str, value: str) -> None:
    """Set preference value."""
    preferences = _load_preferences()
    preferences[key] = value
    _save_preferences(preferences)
    logger.debug(f"Preference '{key}' set to: {value}")


def clear_preference(key: str) -> None:
    """
    Clear/remove preference by key.

    Clearing a key that was never set is a no-op.
    """
    preferences = _load_preferences()
    if key not in preferences:
        logger.debug(f"Preference '{key}' not found, nothing to clear")
        return
    del preferences[key]
    _save_preferences(preferences)
    logger.debug(f"Preference '{key}' cleared")
