# Path configuration module for Mora Panel
# This module centralizes all path logic for the bridge
#
# NOTE on module folder naming:
# ---------------------------------------------------------------
# The mora Magisk module has shipped under several folder names. Some builds
# use "deamon" (sic) and others "daemon", and older builds kept config.json
# directly in the module root. CONFIG_FALLBACK_PATHS lists every layout seen so
# far, most common first. Anything else is found by directory discovery under
# MODULES_ROOT (see token_manager.py).

import os
import platform
import shutil
from pathlib import Path

# Deployment detection
IS_ANDROID = os.path.exists('/system/build.prop')

# Root of installed Magisk/KernelSU modules (privileged, root-only readable)
MODULES_ROOT = "/data/adb/modules"

# Default mora config path (first candidate when nothing is persisted)
DEFAULT_CONFIG_PATH = f"{MODULES_ROOT}/mora_perf_deamon/config/config.json"

# Known install layouts, probed in order after the persisted selection
CONFIG_FALLBACK_PATHS = [
    f"{MODULES_ROOT}/mora_perf_deamon/config/config.json",
    f"{MODULES_ROOT}/mora_perf_daemon/config/config.json",
    f"{MODULES_ROOT}/mora/config/config.json",
    f"{MODULES_ROOT}/mora/config.json",
]

# User configuration paths (per-user, in home directory)
USER_CONFIG_DIR = Path.home() / ".config" / "MoraPanel"
USER_CONFIG_FILE_PATH = str(USER_CONFIG_DIR / "config.json")


def module_config_path(module_dir_name: str, modules_root: str = MODULES_ROOT) -> str:
    """Expected config.json location inside a discovered module folder."""
    return f"{modules_root}/{module_dir_name}/config/config.json"


# Export list for module
__all__ = [
    'IS_ANDROID',
    'MODULES_ROOT', 'DEFAULT_CONFIG_PATH', 'CONFIG_FALLBACK_PATHS',
    'USER_CONFIG_DIR', 'USER_CONFIG_FILE_PATH',
    'module_config_path', 'find_executable',
]


def find_executable(name: str, additional_paths: list[str] | None = None) -> str | None:
    """Find an executable by name.

    First tries shutil.which which searches PATH, then falls back to searching
    common platform-specific directories plus any additional_paths provided.

    Args:
        name: Executable base name to find
        additional_paths: Optional list of paths to search after PATH

    Returns:
        Absolute path if found, otherwise None
    """
    path = shutil.which(name)
    if path:
        return path

    # Root's PATH is often trimmed on Android; su/sh live under /system or the
    # root manager's own bin directory.
    if IS_ANDROID:
        base_paths = ['/system/bin', '/system/xbin', '/sbin', '/debug_ramdisk', '/data/adb/ksu/bin']
    elif 'BSD' in platform.system():
        base_paths = ['/sbin', '/usr/sbin', '/usr/local/sbin', '/usr/local/bin', '/usr/bin', '/bin']
    else:
        base_paths = ['/usr/bin', '/bin', '/usr/sbin', '/sbin', '/usr/local/bin', '/usr/local/sbin']

    if additional_paths:
        base_paths = additional_paths + base_paths

    for p in base_paths:
        candidate = os.path.join(p, name)
        if os.path.exists(candidate) and os.access(candidate, os.X_OK):
            return candidate #The first match is returned so earlier entries override later ones
    return None
