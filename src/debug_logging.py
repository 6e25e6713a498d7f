"""
Unified Logging Utility for Mora Panel

Provides the logging used by the bridge core:
- Writes `PREFIX [LEVEL]: message` lines to stderr
- Filters DEBUG-level messages based on --debug flag
- Never receives secrets (callers log token lengths, not tokens)

Usage:
    from debug_logging import log, set_debug_mode

Modules call:
    log("SHELL", "message")                  # INFO level (always logged)
    log("PROXY", "verbose details", "DEBUG") # Only logged with --debug
    log("TOKEN", "write failed", "ERROR")
"""

import sys

# Global state
_debug_enabled = False


def set_debug_mode(enabled: bool) -> None:
    """Enable or disable debug logging globally."""
    global _debug_enabled
    _debug_enabled = enabled


def log(prefix: str, message: str, level: str = "INFO") -> None:
    """
    Log a message with the specified level.

    Args:
        prefix: Module prefix (e.g., "SHELL", "TOKEN", "PROXY")
        message: The log message
        level: Log level - DEBUG, INFO, WARNING, ERROR
               DEBUG messages are only shown when debug mode is enabled.
    """
    if level == "DEBUG" and not _debug_enabled:
        return

    txt = f"{prefix} [{level}]: {message}" if prefix else f"[{level}]: {message}"
    print(txt, file=sys.stderr)


# Convenience aliases for cleaner code
def log_debug(prefix: str, message: str) -> None:
    log(prefix, message, "DEBUG")

def log_info(prefix: str, message: str) -> None:
    log(prefix, message, "INFO")

def log_warning(prefix: str, message: str) -> None:
    log(prefix, message, "WARNING")

def log_error(prefix: str, message: str) -> None:
    log(prefix, message, "ERROR")
