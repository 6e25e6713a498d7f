from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest

from config_io import RootConfigFile
from config_locator import ConfigLocator
from config_manager import MemorySettingsStore
from models import CommandResult
from privileged_shell import PrivilegedExecutor
from token_manager import TokenManager


class FakeExecutor:
    """Records commands and answers them from a responder callback."""

    def __init__(self, responder: Optional[Callable[[str], CommandResult]] = None) -> None:
        self.commands: list[str] = []
        self.labels: list[Optional[str]] = []
        self._responder = responder or (lambda cmd: CommandResult(True))

    def run(self, command: str, label: Optional[str] = None) -> CommandResult:
        self.commands.append(command)
        self.labels.append(label)
        return self._responder(command)

    def is_root(self) -> bool:
        return self.run("id -u").output.strip() == "0"


def ok(*lines: str) -> CommandResult:
    return CommandResult(True, tuple(lines))


def failed(*stderr: str) -> CommandResult:
    return CommandResult(False, (), tuple(stderr))


@pytest.fixture()
def store() -> MemorySettingsStore:
    return MemorySettingsStore()


@pytest.fixture()
def shell() -> PrivilegedExecutor:
    # Plain unprivileged sh; everything under tmp_path is writable
    return PrivilegedExecutor(elevate=False, allow_tty_prompt=False)


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "mora_perf_deamon" / "config" / "config.json"


@pytest.fixture()
def locator(store: MemorySettingsStore, config_path: Path) -> ConfigLocator:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    return ConfigLocator(store, default_path=str(config_path), fallback_paths=[])


@pytest.fixture()
def config_file(shell: PrivilegedExecutor, locator: ConfigLocator) -> RootConfigFile:
    return RootConfigFile(shell, locator)


@pytest.fixture()
def modules_root(tmp_path: Path) -> Path:
    root = tmp_path / "modules"
    root.mkdir()
    return root


@pytest.fixture()
def token_manager(shell: PrivilegedExecutor, locator: ConfigLocator,
                  config_file: RootConfigFile, modules_root: Path) -> TokenManager:
    return TokenManager(shell, locator, config_file, modules_root=str(modules_root))
