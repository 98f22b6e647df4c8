"""Pytest fixtures for the specbuild test suite."""

from pathlib import Path
from typing import Callable

import pytest

from specbuild.config import BuildConfig
from specbuild.executor import DirectExecutor
from specbuild.models import ToolRegistry

SPEC_TEMPLATE = """Name: {name}
Version: 1.0
Release: 1
Summary: test package
License: MIT

%description
test package

%files
"""


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    """A working repository with no spec files yet."""
    repo = tmp_path / "repo"
    repo.mkdir()
    return repo


@pytest.fixture
def make_spec(repo_dir: Path) -> Callable[[str], Path]:
    """A factory fixture that writes a spec file at a repo-relative path."""

    def _make_spec(rel_path: str) -> Path:
        spec_path = repo_dir / rel_path
        spec_path.parent.mkdir(parents=True, exist_ok=True)
        spec_path.write_text(SPEC_TEMPLATE.format(name=Path(rel_path).stem))
        return spec_path

    return _make_spec


@pytest.fixture
def topdir(tmp_path: Path) -> Path:
    return tmp_path / "home" / "rpmbuild"


@pytest.fixture
def build_config(repo_dir: Path, topdir: Path, tmp_path: Path) -> BuildConfig:
    log_dir = tmp_path / "tmp"
    log_dir.mkdir()
    return BuildConfig(
        repo_dir=repo_dir,
        topdir=topdir,
        log_dir=log_dir,
        user="builder",
        host="buildhost",
    )


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry(
        {
            "rpmbuild": "/usr/bin/rpmbuild",
            "rsync": "/usr/bin/rsync",
            "sudo": "/usr/bin/sudo",
        }
    )


@pytest.fixture
def direct_executor() -> DirectExecutor:
    return DirectExecutor()
