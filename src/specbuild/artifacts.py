"""Reading rpmbuild's output and collecting what it produced."""

from collections.abc import Iterable
from pathlib import Path
import shutil

from pyvider.telemetry import logger

WROTE_PREFIX = "Wrote: "
ARTIFACT_MODE = 0o444


def find_written_artifact(lines: Iterable[str]) -> Path | None:
    """
    Returns the path from the last `Wrote: ` line of rpmbuild output, or None.
    Earlier matches (e.g. a main package before its debuginfo) are dropped.
    """
    artifact = None
    for line in lines:
        line = line.rstrip("\r\n")
        if line.startswith(WROTE_PREFIX):
            path = line[len(WROTE_PREFIX):].strip()
            if path:
                artifact = Path(path)
    return artifact


def harden_and_collect(artifact: Path, destination_dir: Path) -> Path:
    """Makes `artifact` read-only for everyone and copies it into `destination_dir`."""
    try:
        artifact.chmod(ARTIFACT_MODE)
    except PermissionError as e:
        # Artifacts built through sudo belong to root.
        logger.warning("Could not restrict artifact permissions", artifact=str(artifact), reason=str(e))

    destination = destination_dir / artifact.name
    if destination.exists() and destination.resolve() == artifact.resolve():
        return destination
    destination.unlink(missing_ok=True)
    shutil.copyfile(artifact, destination)
    destination.chmod(ARTIFACT_MODE)
    logger.info("Collected artifact", artifact=str(artifact), destination=str(destination))
    return destination


def collect_log(temp_log: Path, destination_dir: Path) -> Path | None:
    """Moves the temporary build log into `destination_dir`, if one was written."""
    if not temp_log.exists():
        return None
    destination = destination_dir / temp_log.name
    if destination.resolve() == temp_log.resolve():
        return destination
    try:
        shutil.copyfile(temp_log, destination)
    finally:
        temp_log.unlink(missing_ok=True)
    return destination
