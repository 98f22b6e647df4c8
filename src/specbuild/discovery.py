"""Locating the spec files a run will build."""

from pathlib import Path

from .config import SPEC_EXTENSION
from .exceptions import NoSpecFilesFoundError


def resolve_repo_dir(path: Path | str | None = None) -> Path:
    """Returns the absolute working repository directory (default: the cwd)."""
    return Path(path or Path.cwd()).resolve()


def discover_spec_files(repo_dir: Path, extension: str = SPEC_EXTENSION) -> list[str]:
    """
    Recursively finds regular files under `repo_dir` whose name ends in
    `extension`, compared case-insensitively. Returns repo-relative POSIX
    paths sorted lexicographically.
    """
    suffix = extension.lower()
    spec_files = sorted(
        path.relative_to(repo_dir).as_posix()
        for path in repo_dir.rglob("*")
        if path.name.lower().endswith(suffix) and path.is_file() and not path.is_symlink()
    )
    if not spec_files:
        raise NoSpecFilesFoundError(
            f"Could not locate any RPM spec files in folder {repo_dir}"
        )
    return spec_files
