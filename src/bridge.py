# --- START OF FILE src/bridge.py ---
"""
Bridge surface exposed to the UI host.

Mirrors what the panel page calls: root check, daemon base URL, API token and
the root-proxy fallback for GET/POST. Every method returns a plain value
(bool, str, JSON str) and never raises into the UI.

All methods block on the elevated shell. Call them from a worker thread.
"""

import json
import threading
from typing import Optional

import constants
from config_io import RootConfigFile
from config_locator import ConfigLocator
from config_manager import SettingsStore, get_default_store
from debug_logging import log_info
from http_proxy import ShellHttpProxy
from privileged_shell import PrivilegedExecutor
from token_manager import TokenManager


class ConfigBridge:

    def __init__(self, executor: PrivilegedExecutor, locator: ConfigLocator,
                 config_file: RootConfigFile, token_manager: TokenManager,
                 proxy: ShellHttpProxy):
        self.executor = executor
        self.locator = locator
        self.config_file = config_file
        self.token_manager = token_manager
        self.proxy = proxy
        # Token/proxy operations share the persisted path selection and must
        # not interleave.
        self._lock = threading.Lock()

    @classmethod
    def create(cls, store: Optional[SettingsStore] = None,
               elevate: Optional[bool] = None) -> "ConfigBridge":
        """Wire up the default component graph around a settings store."""
        store = store or get_default_store()
        if elevate is None:
            elevate = bool(store.get(constants.SETTING_ELEVATE, constants.DEFAULT_ELEVATE))
        executor = PrivilegedExecutor(elevate=elevate)
        locator = ConfigLocator(store)
        config_file = RootConfigFile(executor, locator)
        token_manager = TokenManager(executor, locator, config_file)
        proxy = ShellHttpProxy(executor, token_manager)
        log_info("BRIDGE", f"Bridge ready (elevate={elevate}, config={locator.get_path()})")
        return cls(executor, locator, config_file, token_manager, proxy)

    # --- Root gate ---

    def test_root(self) -> bool:
        """Triggers the root consent prompt on first call."""
        with self._lock:
            return self.executor.is_root()

    # --- Mora API helpers ---

    def get_api_base_url(self) -> str:
        return constants.API_BASE_URL

    def get_api_token(self) -> str:
        with self._lock:
            return self.token_manager.read_token()

    # --- Root-proxy HTTP (fallback for UIs that can't reach localhost) ---

    def proxy_get(self, path: str) -> str:
        with self._lock:
            response = self.proxy.get(path)
        return json.dumps(response.to_dict())

    def proxy_post(self, path: str, body: str) -> str:
        with self._lock:
            response = self.proxy.post(path, body)
        return json.dumps(response.to_dict())

    # --- Config access ---

    def get_config_path(self) -> str:
        return self.locator.get_path()

    def set_config_path(self, path: str) -> None:
        with self._lock:
            self.locator.set_path(path)

    def read_config(self) -> str:
        """Raw text of the selected config.json ("" when unreadable)."""
        with self._lock:
            return self.config_file.read()

# --- END OF FILE src/bridge.py ---
