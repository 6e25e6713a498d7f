# --- START OF FILE config_manager.py ---

import json
import os
import logging
from typing import Any, Optional

from paths import USER_CONFIG_FILE_PATH

log = logging.getLogger(__name__)


class SettingsStore:
    """Minimal get/set interface for persisted app settings."""

    def get(self, key: str, default=None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value) -> None:
        raise NotImplementedError


class MemorySettingsStore(SettingsStore):
    """Process-local store. Used by tests and by callers embedding the bridge."""

    def __init__(self, initial: Optional[dict] = None):
        self._data = dict(initial or {})

    def get(self, key: str, default=None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value) -> None:
        self._data[key] = value


class JsonSettingsStore(SettingsStore):
    """
    Settings persisted as one JSON object in the user's config directory.

    The file is read once and cached; every set() rewrites the whole file.
    Single writer by construction (one bridge per process), last write wins.
    """

    def __init__(self, config_path: str = USER_CONFIG_FILE_PATH):
        self.config_path = str(config_path)
        self._cache: Optional[dict] = None

    def load_config(self) -> dict:
        """Loads the configuration from the JSON file."""
        config_path = self.config_path
        if os.path.exists(config_path):
            try:
                with open(config_path, 'r') as f:
                    config = json.load(f)
                    if isinstance(config, dict):
                        return config
                    log.warning(f"Config file '{config_path}' does not contain a valid JSON object. Using defaults.")
                    return {}
            except (json.JSONDecodeError, IOError) as e:
                log.error(f"Error loading config file '{config_path}': {e}. Using defaults.")
                return {}
        return {}

    def save_config(self, config: dict) -> bool:
        """Saves the configuration dictionary to the JSON file. Returns True on success."""
        config_dir = os.path.dirname(self.config_path)
        try:
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(self.config_path, 'w') as f:
                json.dump(config, f, indent=4)
            return True
        except IOError as e:
            log.error(f"Error saving config file '{self.config_path}': {e}")
            return False

    def _get_cached_config(self) -> dict:
        if self._cache is None:
            self._cache = self.load_config()
        return self._cache

    def get(self, key: str, default=None) -> Any:
        return self._get_cached_config().get(key, default)

    def set(self, key: str, value) -> None:
        config = self._get_cached_config()
        config[key] = value
        self.save_config(config)
        self._cache = config


# --- Default store ---
_default_store: Optional[SettingsStore] = None

def get_default_store() -> SettingsStore:
    """Store backed by ~/.config/MoraPanel/config.json, created on first use."""
    global _default_store
    if _default_store is None:
        _default_store = JsonSettingsStore()
    return _default_store


def get_float_setting(store: SettingsStore, key: str, default: float) -> float:
    """Reads a positive float setting, falling back to default on bad values."""
    value = store.get(key, default)
    try:
        value = float(value)
    except (TypeError, ValueError):
        log.warning(f"Invalid value for '{key}' in config: {value!r}. Using default: {default}")
        return default
    return value if value > 0 else default

# --- END OF FILE config_manager.py ---
