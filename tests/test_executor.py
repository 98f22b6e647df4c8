"""Tests for the privileged executor implementations."""

import subprocess
from typing import Any

from pytest import MonkeyPatch

from specbuild.executor import DirectExecutor, SudoExecutor, select_executor
from specbuild.models import ToolRegistry

SUDO_LISTING = """Matching Defaults entries for builder on buildhost:
    env_reset

User builder may run the following commands on buildhost:
    (root) NOPASSWD: /usr/bin/rpmbuild
"""


def _mock_sudo(monkeypatch: MonkeyPatch, returncode: int, stdout: str) -> list[list[str]]:
    calls: list[list[str]] = []

    def mock_run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        calls.append(command)
        return subprocess.CompletedProcess(command, returncode, stdout=stdout, stderr="")

    monkeypatch.setattr("specbuild.executor.subprocess.run", mock_run)
    return calls


def test_select_executor_for_root(registry: ToolRegistry) -> None:
    executor = select_executor(0, registry)

    assert isinstance(executor, DirectExecutor)
    assert executor.is_authorized("/usr/bin/rpmbuild")
    assert executor.wrap(["rpmbuild", "-bb"]) == ["rpmbuild", "-bb"]


def test_select_executor_for_regular_user(registry: ToolRegistry) -> None:
    executor = select_executor(1000, registry)

    assert isinstance(executor, SudoExecutor)
    assert executor.wrap(["/usr/bin/rpmbuild", "-bb"]) == [
        "/usr/bin/sudo",
        "/usr/bin/rpmbuild",
        "-bb",
    ]


def test_sudo_authorized_when_listed(monkeypatch: MonkeyPatch) -> None:
    calls = _mock_sudo(monkeypatch, 0, SUDO_LISTING)

    assert SudoExecutor("/usr/bin/sudo").is_authorized("/usr/bin/rpmbuild")
    assert calls == [["/usr/bin/sudo", "-n", "-l"]]


def test_sudo_not_authorized_when_absent(monkeypatch: MonkeyPatch) -> None:
    _mock_sudo(monkeypatch, 0, SUDO_LISTING.replace("/usr/bin/rpmbuild", "/usr/bin/dnf"))

    assert not SudoExecutor("/usr/bin/sudo").is_authorized("/usr/bin/rpmbuild")


def test_sudo_not_authorized_when_password_required(monkeypatch: MonkeyPatch) -> None:
    _mock_sudo(monkeypatch, 1, "")

    assert not SudoExecutor("/usr/bin/sudo").is_authorized("/usr/bin/rpmbuild")
