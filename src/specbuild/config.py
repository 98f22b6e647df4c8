"""Run configuration, assembled from CLI overrides and an optional manifest."""

import getpass
import os
from pathlib import Path
import socket
import tomllib
from typing import Any

from attrs import define, field

from .exceptions import ConfigError

RPMBUILD_DIRS: tuple[str, ...] = (
    "BUILD",
    "BUILDROOT",
    "RPMS",
    "SOURCES",
    "SPECS",
    "SRPMS",
)
REQUIRED_TOOLS: tuple[str, ...] = ("rpmbuild", "rsync", "sudo")
SPEC_EXTENSION = ".spec"


def _current_user() -> str:
    return os.environ.get("USER") or getpass.getuser()


@define(frozen=True, slots=True)
class BuildConfig:
    repo_dir: Path
    topdir: Path
    spec_extension: str = SPEC_EXTENSION
    build_dirs: tuple[str, ...] = RPMBUILD_DIRS
    required_tools: tuple[str, ...] = REQUIRED_TOOLS
    log_dir: Path | None = None
    defines: dict[str, str] = field(factory=dict)
    user: str = field(factory=_current_user)
    host: str = field(factory=socket.gethostname)


def _read_manifest(repo_dir: Path) -> dict[str, Any]:
    manifest_path = repo_dir / "pyproject.toml"
    if not manifest_path.is_file():
        return {}
    try:
        with manifest_path.open("rb") as f:
            pyproject_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Could not read {manifest_path}: {e}") from e
    specbuild_conf = pyproject_data.get("tool", {}).get("specbuild", {})
    if not isinstance(specbuild_conf, dict):
        raise ConfigError("[tool.specbuild] in pyproject.toml must be a table.")
    return specbuild_conf


def load_config(
    repo_dir: Path,
    topdir: Path | str | None = None,
    home: Path | None = None,
) -> BuildConfig:
    """
    Builds the run configuration. An explicit `topdir` wins over the
    `[tool.specbuild]` table in the repo's pyproject.toml, which wins over
    `$HOME/rpmbuild`.
    """
    specbuild_conf = _read_manifest(repo_dir)

    defines = specbuild_conf.get("defines", {})
    if not isinstance(defines, dict):
        raise ConfigError("[tool.specbuild] 'defines' must be a table of macros.")

    if topdir is None and "topdir" in specbuild_conf:
        topdir = repo_dir / str(specbuild_conf["topdir"])
    if topdir is None:
        topdir = (home or Path.home()) / "rpmbuild"

    return BuildConfig(
        repo_dir=repo_dir,
        topdir=Path(topdir).expanduser().resolve(),
        defines={str(k): str(v) for k, v in defines.items()},
    )
