from collections.abc import Iterator, Mapping
from enum import Enum
from pathlib import Path

from attrs import define, field

from .exceptions import ToolNotFoundError

SUCCESS: int = 0
ERROR: int = 1


def normalize_tool_name(name: str) -> str:
    """Maps a command name onto its registry key (hyphens become underscores)."""
    return name.replace("-", "_")


@define(frozen=True, slots=True)
class ToolRegistry:
    """Resolved absolute paths of the external commands, keyed by normalized name."""

    _paths: Mapping[str, str] = field(factory=dict, converter=dict)

    def __getitem__(self, name: str) -> str:
        try:
            return self._paths[normalize_tool_name(name)]
        except KeyError:
            raise ToolNotFoundError(
                f"Could not locate the command {name} on this system"
            ) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def get(self, name: str) -> str | None:
        return self._paths.get(normalize_tool_name(name))

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_tool_name(name) in self._paths


class BuildStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@define(slots=True)
class BuildResult:
    spec_file: str
    status: BuildStatus = BuildStatus.PENDING
    artifact: Path | None = None
    log_path: Path | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is BuildStatus.SUCCEEDED

    def mark_running(self) -> None:
        self.status = BuildStatus.RUNNING

    def mark_succeeded(self, artifact: Path) -> None:
        self.artifact = artifact
        self.status = BuildStatus.SUCCEEDED

    def mark_failed(self, error: str) -> None:
        self.error = error
        self.status = BuildStatus.FAILED


@define(slots=True)
class RunReport:
    """Outcome of one orchestrator run; `exit_code` counts failed sub-steps."""

    exit_code: int = SUCCESS
    err_msg: str = ""
    tool_errors: list[str] = field(factory=list)
    results: list[BuildResult] = field(factory=list)

    def fail(self, message: str | None = None, count: int = ERROR) -> None:
        self.exit_code += count
        if message:
            self.err_msg = message

    @property
    def ok(self) -> bool:
        return self.exit_code == SUCCESS
