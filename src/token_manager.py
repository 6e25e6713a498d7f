"""
API token discovery and provisioning.

The mora daemon authenticates requests with the `api_token` stored in its
config.json. This module finds that token across the known module layouts,
and generates + persists one when a valid config has none yet.
"""

import json
import re
import secrets
from typing import Optional

import constants
from config_io import RootConfigFile
from config_locator import ConfigLocator
from debug_logging import log_debug, log_info, log_warning
from paths import MODULES_ROOT, module_config_path
from privileged_shell import PrivilegedExecutor
from utils import sh_quote, parse_json_object

_TOKEN_RE = re.compile(r'"api_token"\s*:\s*"([^"]+)"')


def generate_token() -> str:
    """32 CSPRNG bytes, url-safe base64 without padding (43 chars)."""
    return secrets.token_urlsafe(constants.TOKEN_BYTES)


def extract_token(raw: str) -> str:
    """
    Pull `api_token` out of config text.

    Tries a strict JSON parse first, then a regex scan so a token can still be
    read from a file that is not quite valid JSON (trailing commas, comments).

    Returns:
        The trimmed token, or "" if none was found
    """
    if not raw or not raw.strip():
        return ""

    config = parse_json_object(raw)
    if config is not None:
        value = config.get(constants.API_TOKEN_FIELD)
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            token = str(value).strip()
            if token:
                return token

    match = _TOKEN_RE.search(raw)
    return match.group(1).strip() if match else ""


class TokenManager:

    def __init__(self, executor: PrivilegedExecutor, locator: ConfigLocator,
                 config_file: RootConfigFile, modules_root: str = MODULES_ROOT,
                 module_brand: str = constants.MODULE_BRAND):
        self._executor = executor
        self._locator = locator
        self._config_file = config_file
        self._modules_root = modules_root
        self._module_brand = module_brand

    def read_token(self) -> str:
        """
        Return the daemon API token, provisioning one if needed.

        Order:
        1. Each candidate path: use an existing token, or write a fresh one
           into a valid JSON config. Non-JSON files are never rewritten.
        2. Discover the module folder by name and read (never write) its config.

        Returns:
            The token, or "" when no strategy produced one. Callers should
            offer a retry rather than send requests without credentials.
        """
        for path in self._locator.candidate_paths():
            raw = self._config_file.read_at(path)
            if not raw.strip():
                continue

            token = extract_token(raw)
            if token:
                if path != self._locator.get_path():
                    self._locator.set_path(path)
                log_debug("TOKEN", f"Found api_token in {path}")
                return token

            token = self._provision_token(path, raw)
            if token:
                return token

        token = self._discover_module_token()
        if token:
            return token

        log_warning("TOKEN", "No api_token available from any config location")
        return ""

    def _provision_token(self, path: str, raw: str) -> str:
        """Generate a token, store it in the config at `path`. "" on failure."""
        generated = generate_token()
        config = parse_json_object(raw)
        if config is None:
            log_warning("TOKEN", f"Config at {path} is not a JSON object, leaving it untouched")
            return ""

        config[constants.API_TOKEN_FIELD] = generated
        updated = json.dumps(config, indent=constants.CONFIG_JSON_INDENT)

        self._locator.set_path(path)
        if self._config_file.write(updated):
            log_info("TOKEN", f"Generated new api_token and saved it to {path}")
            return generated

        log_warning("TOKEN", f"Failed to persist generated api_token to {path}")
        return ""

    def _find_module_dir(self) -> Optional[str]:
        cmd = (f"ls -1 {sh_quote(self._modules_root)} 2>/dev/null"
               f" | grep -i {sh_quote(self._module_brand)} | head -n 1")
        result = self._executor.run(cmd)
        module = result.output.strip()
        return module or None

    def _discover_module_token(self) -> str:
        """Read-only lookup in a module folder whose name contains the brand."""
        module = self._find_module_dir()
        if not module:
            return ""

        path = module_config_path(module, self._modules_root)
        token = extract_token(self._config_file.read_at(path))
        if token:
            log_info("TOKEN", f"Discovered module '{module}', using its config at {path}")
            self._locator.set_path(path)
        return token
