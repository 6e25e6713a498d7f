"""
Privileged Shell Executor

Runs shell command strings with root rights on behalf of the unprivileged UI
process. Used by: config_io.py, token_manager.py, http_proxy.py, bridge.py

Responsibilities:
- Select an elevation tool (su, pkexec, sudo, doas) on first use
- Run `sh -c <command>` through it and capture stdout/stderr as lines
- Turn every spawn/elevation failure into a failed CommandResult

Note: The first call in a process may show an interactive consent prompt
(Magisk/KernelSU dialog, polkit agent, sudo password). The call blocks until
the user answers. There is no internal timeout or cancellation; callers that
must stay responsive run this from worker.Worker and wait with a timeout.
"""

import os
import sys
import subprocess
import threading
from typing import List, Optional

import constants
from debug_logging import log_debug, log_info, log_warning, log_error
from models import CommandResult
from paths import IS_ANDROID, find_executable
from utils import split_lines


class ElevationDenied(RuntimeError):
    """Raised internally when no elevation tool granted root."""
    pass


def _default_escalation_tools() -> List[str]:
    """Tool names in probe order for this platform."""
    if IS_ANDROID:
        return list(constants.ANDROID_ESCALATION_TOOLS)
    return list(constants.DESKTOP_ESCALATION_TOOLS)


def _build_command(command: str, shell_path: str,
                   escalation_tool: Optional[str] = None,
                   allow_tty_prompt: bool = False) -> list:
    """
    Build the argv that runs `command` through sh, optionally elevated.

    Args:
        command: Shell command string (already quoted by the caller)
        shell_path: Absolute path of the POSIX shell
        escalation_tool: Path to su/pkexec/sudo/doas, or None to run directly
        allow_tty_prompt: If True, let sudo prompt on the TTY (no -n)

    Returns:
        Command list suitable for subprocess.run
    """
    base_cmd = [shell_path, '-c', command]

    if escalation_tool is None:
        return base_cmd

    tool_name = os.path.basename(escalation_tool)

    if tool_name == "su":
        # su runs its -c argument through root's own shell
        return [escalation_tool, '-c', command]

    elif tool_name == "sudo":
        # -n (non-interactive) unless a password prompt can reach the user
        if allow_tty_prompt:
            return [escalation_tool] + base_cmd
        else:
            return [escalation_tool, '-n'] + base_cmd

    else:
        # pkexec, doas and unknown tools take the argv to run verbatim
        return [escalation_tool] + base_cmd


class PrivilegedExecutor:
    """
    Run shell commands with elevated rights.

    Success means the shell ran and exited 0. Commands where a missing file
    or tool is an expected outcome neutralize their exit status themselves
    (e.g. `cat x 2>/dev/null || true`).
    """

    def __init__(self, elevate: bool = True, escalation_tools: Optional[List[str]] = None,
                 shell_path: Optional[str] = None, allow_tty_prompt: Optional[bool] = None):
        self.elevate = elevate
        self._tool_names = escalation_tools if escalation_tools is not None else _default_escalation_tools()
        self._shell_path = shell_path or find_executable("sh") or "/bin/sh"
        if allow_tty_prompt is None:
            try:
                allow_tty_prompt = sys.stdin.isatty()
            except (AttributeError, ValueError):
                allow_tty_prompt = False
        self._allow_tty_prompt = allow_tty_prompt
        self._escalation_tool: Optional[str] = None
        self._resolved = False
        self._lock = threading.Lock()

    @property
    def escalation_tool(self) -> Optional[str]:
        """Selected elevation tool, None when running directly or not yet resolved."""
        return self._escalation_tool

    def reset(self) -> None:
        """Forget the selected tool; the next run() probes (and prompts) again."""
        with self._lock:
            self._escalation_tool = None
            self._resolved = False

    def run(self, command: str, label: Optional[str] = None) -> CommandResult:
        """
        Run `command` through an elevated `sh -c` and capture its output.

        Args:
            command: Shell command string, arguments already quoted
            label: Text logged instead of the command (commands may embed the token)

        Returns:
            CommandResult(success, stdout lines, stderr lines). Never raises.
        """
        try:
            tool = self._ensure_escalation_tool()
        except ElevationDenied as e:
            log_error("SHELL", str(e))
            return CommandResult(False, (), (str(e),))

        cmd = _build_command(command, self._shell_path, tool, self._allow_tty_prompt)
        return self._spawn(cmd, label or command)

    def is_root(self) -> bool:
        """True iff an elevated `id -u` prints 0."""
        result = self.run("id -u")
        return result.success and result.output.strip() == constants.ROOT_UID_OUTPUT

    # --- Internal helpers ---

    def _needs_escalation(self) -> bool:
        if not self.elevate:
            return False
        try:
            return os.geteuid() != 0
        except AttributeError:
            return True

    def _ensure_escalation_tool(self) -> Optional[str]:
        """
        Resolve the elevation tool once per process.

        Probes each available tool with `id -u` and keeps the first one that
        reports uid 0. Nothing is cached on failure so a later call retries.

        Raises:
            ElevationDenied: If no tool is available or none granted root
        """
        if not self._needs_escalation():
            return None

        with self._lock:
            if self._resolved:
                return self._escalation_tool

            available = []
            for name in self._tool_names:
                path = find_executable(name)
                if path and path not in available:
                    available.append(path)

            if not available:
                raise ElevationDenied(
                    f"No privilege escalation tool found ({', '.join(self._tool_names)}). Cannot run as root.")

            last_error = "unknown error"
            for tool in available:
                tool_name = os.path.basename(tool)
                log_info("SHELL", f"Requesting root via {tool_name} (a consent prompt may appear)...")
                probe = self._spawn(_build_command("id -u", self._shell_path, tool, self._allow_tty_prompt), "id -u")
                if probe.success and probe.output.strip() == constants.ROOT_UID_OUTPUT:
                    log_info("SHELL", f"Root granted via {tool_name}.")
                    self._escalation_tool = tool
                    self._resolved = True
                    return tool
                last_error = probe.error_output.strip() or f"{tool_name} did not grant root"
                log_warning("SHELL", f"{tool_name} failed: {last_error}, trying next escalation tool...")

            raise ElevationDenied(f"All privilege escalation tools failed. Last error: {last_error}")

    def _spawn(self, cmd: list, display: str) -> CommandResult:
        log_debug("SHELL", f"Executing: {display}")
        stdin_arg = None if self._allow_tty_prompt else subprocess.DEVNULL
        try:
            process = subprocess.run(
                cmd,
                stdin=stdin_arg,
                stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                text=False, # Read bytes
                check=False, # Don't raise exception on non-zero exit
            )
        except FileNotFoundError:
            err_msg = f"Error: Command not found: '{cmd[0]}'."
            log_error("SHELL", err_msg)
            return CommandResult(False, (), (err_msg,))
        except PermissionError:
            err_msg = f"Error: Permission denied executing '{cmd[0]}'."
            log_error("SHELL", err_msg)
            return CommandResult(False, (), (err_msg,))
        except OSError as e:
            err_msg = f"Error: Could not start shell session: {e}"
            log_error("SHELL", err_msg)
            return CommandResult(False, (), (err_msg,))

        stdout = process.stdout.decode('utf-8', errors='replace') if process.stdout else ""
        stderr = process.stderr.decode('utf-8', errors='replace') if process.stderr else ""
        if process.returncode != 0:
            log_debug("SHELL", f"Command failed (ret={process.returncode})")

        return CommandResult(
            success=process.returncode == 0,
            stdout=tuple(split_lines(stdout)),
            stderr=tuple(split_lines(stderr)),
        )
