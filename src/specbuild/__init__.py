"""
This package builds binary RPMs from the spec files in a repository by
driving `rpmbuild` inside a per-user build tree.
"""

from .config import BuildConfig, load_config
from .models import BuildResult, BuildStatus, RunReport, ToolRegistry
from .orchestrator import BuildOrchestrator

__all__ = [
    "BuildConfig",
    "BuildOrchestrator",
    "BuildResult",
    "BuildStatus",
    "RunReport",
    "ToolRegistry",
    "load_config",
]
