"""The rpmbuild directory tree: creation, seeding, and spec staging."""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
import os
from pathlib import Path
import shutil
import subprocess

from pyvider.telemetry import logger

from .config import RPMBUILD_DIRS

BUILD_TREE_UMASK = 0o022


@contextmanager
def umask(mask: int) -> Iterator[None]:
    previous = os.umask(mask)
    try:
        yield
    finally:
        os.umask(previous)


class BuildTree:
    """The `_topdir` hierarchy rpmbuild works in, reused across runs."""

    def __init__(self, topdir: Path, build_dirs: Iterable[str] = RPMBUILD_DIRS) -> None:
        self.topdir = topdir
        self.build_dirs = tuple(build_dirs)

    @property
    def specs_dir(self) -> Path:
        return self.topdir / "SPECS"

    def spec_path(self, spec_file: str) -> Path:
        return self.specs_dir / Path(spec_file).name

    def _sync(self, source: Path, rsync_path: str) -> int:
        # No trailing slash: rsync recreates `source`'s name under topdir.
        command = [rsync_path, "-aHS", str(source), str(self.topdir)]
        logger.info(f"Running command: {' '.join(command)}")
        result = subprocess.run(command, capture_output=True, text=True, check=False)
        if result.stdout:
            logger.debug("rsync stdout", output=result.stdout.strip())
        if result.returncode != 0:
            logger.error(
                "rsync failed",
                source=str(source),
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
        return result.returncode

    def provision(self, repo_dir: Path, rsync_path: str) -> int:
        """
        Creates every build directory that is missing and merges same-named
        directories from `repo_dir` into the tree. Files already in the tree
        are never deleted. Returns the number of steps that failed; a failing
        step does not stop the remaining directories.
        """
        failures = 0
        with umask(BUILD_TREE_UMASK):
            for name in self.build_dirs:
                target_dir = self.topdir / name
                try:
                    target_dir.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    logger.error("Could not create build directory", path=str(target_dir), reason=str(e))
                    failures += 1

                source_dir = repo_dir / name
                if source_dir.is_dir():
                    if self._sync(source_dir, rsync_path) != 0:
                        failures += 1
        return failures

    def stage_spec_files(self, repo_dir: Path, spec_files: Iterable[str]) -> list[Path]:
        """
        Copies each spec file into SPECS, overwriting any earlier copy. Only the
        first of several specs sharing a file name is staged. A spec that
        already lives in SPECS (the repo is the build tree) is left in place.
        """
        staged: list[Path] = []
        for spec_file in spec_files:
            source = repo_dir / spec_file
            destination = self.spec_path(spec_file)
            if destination in staged:
                logger.warning("Spec file name already staged", spec_file=spec_file)
                continue
            if not (destination.exists() and destination.samefile(source)):
                shutil.copyfile(source, destination)
            logger.debug("Staged spec file", spec_file=spec_file, path=str(destination))
            staged.append(destination)
        return staged
