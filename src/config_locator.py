from typing import List, Optional

import constants
from config_manager import SettingsStore
from debug_logging import log_info
from paths import DEFAULT_CONFIG_PATH, CONFIG_FALLBACK_PATHS


class ConfigLocator:
    """
    Tracks which mora config.json the bridge reads and writes.

    The current selection lives in the injected settings store under
    `config_path` and survives restarts. Only one workflow touches it at a
    time, so reads and writes are unlocked and the last write wins.
    """

    def __init__(self, store: SettingsStore, default_path: str = DEFAULT_CONFIG_PATH,
                 fallback_paths: Optional[List[str]] = None):
        self._store = store
        self.default_path = default_path
        self.fallback_paths = list(fallback_paths if fallback_paths is not None else CONFIG_FALLBACK_PATHS)

    def get_path(self) -> str:
        """Persisted selection, or the default path when nothing is stored."""
        return self._store.get(constants.SETTING_CONFIG_PATH) or self.default_path

    def set_path(self, path: str) -> None:
        path = path.strip()
        if path != self._store.get(constants.SETTING_CONFIG_PATH):
            log_info("LOCATOR", f"Config path set to {path}")
        self._store.set(constants.SETTING_CONFIG_PATH, path)

    def candidate_paths(self) -> List[str]:
        """Persisted selection first, then the known layouts; no duplicates."""
        candidates = []
        for path in [self.get_path()] + self.fallback_paths:
            if path not in candidates:
                candidates.append(path)
        return candidates
