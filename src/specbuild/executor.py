"""
Privilege handling for the packaging command.

rpmbuild runs directly when the caller is already root. Anyone else goes
through sudo, and only after sudo confirms, without prompting, that the
account may run that exact command.
"""

import subprocess
from typing import Protocol

from pyvider.telemetry import logger

from .models import ToolRegistry

ROOT_UID = 0


class PrivilegedExecutor(Protocol):
    elevated: bool

    def is_authorized(self, command_path: str) -> bool: ...

    def wrap(self, command: list[str]) -> list[str]: ...


class DirectExecutor:
    elevated = False

    def is_authorized(self, command_path: str) -> bool:
        return True

    def wrap(self, command: list[str]) -> list[str]:
        return list(command)


class SudoExecutor:
    elevated = True

    def __init__(self, sudo_path: str) -> None:
        self.sudo_path = sudo_path

    def list_authorized_commands(self) -> str:
        """Output of `sudo -n -l`; empty when sudo refuses or wants a password."""
        command = [self.sudo_path, "-n", "-l"]
        logger.info(f"Running command: {' '.join(command)}")
        result = subprocess.run(command, capture_output=True, text=True, check=False)
        if result.returncode != 0:
            logger.debug("sudo listing refused", stderr=result.stderr.strip())
            return ""
        return result.stdout

    def is_authorized(self, command_path: str) -> bool:
        return any(
            command_path in line for line in self.list_authorized_commands().splitlines()
        )

    def wrap(self, command: list[str]) -> list[str]:
        return [self.sudo_path, *command]


def select_executor(uid: int, registry: ToolRegistry) -> PrivilegedExecutor:
    """Chooses how to run privileged commands for the given effective uid."""
    if uid == ROOT_UID:
        return DirectExecutor()
    return SudoExecutor(registry["sudo"])
