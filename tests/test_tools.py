"""Tests for external command resolution."""

from pathlib import Path

import pytest

from specbuild.exceptions import InvalidToolNameError, ToolNotFoundError
from specbuild.tools import check_command, sanitize_tool_name, verify_tools


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """A search path holding fake `rpmbuild` and `rpm-sign` executables."""
    bin_path = tmp_path / "bin"
    bin_path.mkdir()
    for name in ("rpmbuild", "rpm-sign"):
        tool = bin_path / name
        tool.write_text("#!/bin/sh\nexit 0\n")
        tool.chmod(0o755)
    return bin_path


def test_check_command_resolves_absolute_path(bin_dir: Path) -> None:
    assert check_command("rpmbuild", search_path=str(bin_dir)) == str(bin_dir / "rpmbuild")


def test_check_command_strips_backticks(bin_dir: Path) -> None:
    assert sanitize_tool_name("`rpmbuild`") == "rpmbuild"
    assert check_command("`rpmbuild`", search_path=str(bin_dir)) == str(bin_dir / "rpmbuild")


@pytest.mark.parametrize("name", ["", "``", "   "])
def test_check_command_rejects_empty_names(name: str) -> None:
    with pytest.raises(InvalidToolNameError, match="No command was specified"):
        check_command(name)


def test_check_command_missing_tool(bin_dir: Path) -> None:
    with pytest.raises(ToolNotFoundError, match="Could not locate the command rsync"):
        check_command("rsync", search_path=str(bin_dir))


def test_verify_tools_reports_every_missing_tool(bin_dir: Path) -> None:
    registry, errors = verify_tools(
        ["rsync", "rpmbuild", "sudo", ""], search_path=str(bin_dir)
    )

    assert errors == [
        "Could not locate the command rsync on this system",
        "Could not locate the command sudo on this system",
        "No command was specified",
    ]
    assert list(registry) == ["rpmbuild"]


def test_verify_tools_normalizes_registry_keys(bin_dir: Path) -> None:
    registry, errors = verify_tools(["rpm-sign"], search_path=str(bin_dir))

    assert errors == []
    assert list(registry) == ["rpm_sign"]
    assert registry["rpm-sign"] == str(bin_dir / "rpm-sign")
    assert "rpm_sign" in registry


def test_registry_lookup_of_unknown_tool(bin_dir: Path) -> None:
    registry, _ = verify_tools(["rpmbuild"], search_path=str(bin_dir))

    assert registry.get("sudo") is None
    with pytest.raises(ToolNotFoundError):
        registry["sudo"]
