# --- START OF FILE config_io.py ---

"""
Root-side read/write of the mora config.json.

All file access goes through the privileged executor since the module folder
is only readable by root. Reads never fail loudly: an absent or empty file is
returned as "" and the caller moves on to the next candidate path.
"""

import constants
from config_locator import ConfigLocator
from debug_logging import log_debug, log_info, log_warning, log_error
from privileged_shell import PrivilegedExecutor
from utils import sh_quote, b64encode_text


class RootConfigFile:

    def __init__(self, executor: PrivilegedExecutor, locator: ConfigLocator):
        self._executor = executor
        self._locator = locator

    def read_at(self, path: str) -> str:
        """Raw contents of `path`, or "" when the file is blank or missing."""
        cmd = f"cat {sh_quote(path)} 2>/dev/null || true"
        result = self._executor.run(cmd)
        text = result.output
        if not text.strip():
            log_debug("CONFIG_IO", f"No config content at {path}")
            return ""
        return text

    def read(self) -> str:
        """Raw contents of the currently selected config."""
        return self.read_at(self._locator.get_path())

    def write(self, text: str) -> bool:
        """
        Replace the selected config file with `text`.

        The content travels base64 encoded so no quoting of JSON is needed.
        If that fails (no base64 applet for root), the content is written via
        a quoted heredoc instead.

        Known limitation: the heredoc fallback ends at the first line that is
        exactly the terminator marker (EOF). Content containing such a line is
        truncated there and the remainder runs as shell commands. The base64
        path has no such restriction.

        Returns:
            True if the executor reported success for the strategy that ran
        """
        path = self._locator.get_path()

        cmd_b64 = f"echo {sh_quote(b64encode_text(text))} | base64 -d > {sh_quote(path)}"
        r1 = self._executor.run(cmd_b64, label=f"write config (base64) -> {path}")
        if r1.success:
            log_info("CONFIG_IO", f"Config written to {path}")
            return True

        log_warning("CONFIG_IO", f"base64 write to {path} failed, falling back to heredoc")
        heredoc = f"cat > {sh_quote(path)} <<'{constants.HEREDOC_MARKER}'\n"
        heredoc += text
        if not text.endswith("\n"):
            heredoc += "\n"
        heredoc += f"{constants.HEREDOC_MARKER}\n"
        r2 = self._executor.run(heredoc, label=f"write config (heredoc) -> {path}")
        if r2.success:
            log_info("CONFIG_IO", f"Config written to {path} (heredoc)")
        else:
            log_error("CONFIG_IO", f"Could not write config to {path}: {r2.error_output.strip()}")
        return r2.success

# --- END OF FILE config_io.py ---
