"""Resolution of the external commands a build run depends on."""

from collections.abc import Iterable
import shutil

from pyvider.telemetry import logger

from .exceptions import BuildError, InvalidToolNameError, ToolNotFoundError
from .models import ToolRegistry, normalize_tool_name


def sanitize_tool_name(name: str) -> str:
    """Strips embedded backticks so a name can never smuggle a command substitution."""
    return name.replace("`", "")


def check_command(name: str, search_path: str | None = None) -> str:
    """Resolves a single command to its absolute path on the search path."""
    command = sanitize_tool_name(name).strip()
    if not command:
        raise InvalidToolNameError("No command was specified")

    resolved = shutil.which(command, path=search_path)
    if not resolved:
        raise ToolNotFoundError(f"Could not locate the command {command} on this system")
    return resolved


def verify_tools(
    names: Iterable[str], search_path: str | None = None
) -> tuple[ToolRegistry, list[str]]:
    """
    Checks every command and returns the registry of the ones found together
    with one error message per command that was not. A failure does not stop
    the remaining checks, so every missing tool is reported in one run.
    """
    paths: dict[str, str] = {}
    errors: list[str] = []
    for name in names:
        try:
            resolved = check_command(name, search_path)
        except BuildError as e:
            logger.error("Tool verification failed", tool=name, reason=str(e))
            errors.append(str(e))
            continue
        paths[normalize_tool_name(sanitize_tool_name(name))] = resolved
        logger.debug("Resolved tool", tool=name, path=resolved)
    return ToolRegistry(paths), errors
