"""Core logic for building RPMs from the spec files found in a repository."""

import os
from pathlib import Path
import subprocess
import tempfile

from pyvider.telemetry import logger

from .artifacts import collect_log, find_written_artifact, harden_and_collect
from .buildtree import BuildTree
from .config import BuildConfig
from .discovery import discover_spec_files
from .exceptions import (
    ArtifactNotProducedError,
    BuildError,
    BuildTreeSeedError,
    PrivilegeNotGrantedError,
    SpecNameCollisionError,
)
from .executor import PrivilegedExecutor, select_executor
from .models import BuildResult, RunReport, ToolRegistry
from .tools import verify_tools

LOG_SUFFIX = ".rpmbuild.log"
LOG_DIR_PREFIX = "specbuild_"


class BuildOrchestrator:
    def __init__(
        self,
        config: BuildConfig,
        registry: ToolRegistry | None = None,
        executor: PrivilegedExecutor | None = None,
        uid: int | None = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.executor = executor
        self.uid = os.geteuid() if uid is None else uid
        self.build_tree = BuildTree(config.topdir, config.build_dirs)

    def _stream_subprocess(self, command: list[str], log_path: Path) -> list[str]:
        """
        Runs `command` with stderr folded into stdout, teeing every line to
        `log_path`. Undecodable bytes pass through as surrogates, so the log
        keeps them verbatim and a `Wrote:` path still maps back to the file.
        """
        logger.info(f"Running command: {' '.join(command)}")
        lines: list[str] = []
        with log_path.open("w", encoding="utf-8", errors="surrogateescape") as log_file:
            with subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding="utf-8",
                errors="surrogateescape",
            ) as proc:
                for line in proc.stdout:
                    log_file.write(line)
                    logger.debug("rpmbuild", output=line.rstrip())
                    lines.append(line)
        if proc.returncode != 0:
            logger.warning("rpmbuild exited non-zero", returncode=proc.returncode)
        return lines

    def rpmbuild_command(self, spec_file: str) -> list[str]:
        command = [
            self.registry["rpmbuild"],
            "--define",
            f"_topdir {self.config.topdir}",
        ]
        for macro, value in self.config.defines.items():
            command.extend(["--define", f"{macro} {value}"])
        command.extend(["-bb", str(self.build_tree.spec_path(spec_file))])
        return command

    def verify_tools(self, report: RunReport) -> bool:
        if self.registry is not None:
            return True
        registry, errors = verify_tools(self.config.required_tools)
        if errors:
            report.tool_errors.extend(errors)
            report.fail(errors[-1], count=len(errors))
            return False
        self.registry = registry
        return True

    def provision(self, spec_files: list[str]) -> None:
        failures = self.build_tree.provision(self.config.repo_dir, self.registry["rsync"])
        if failures:
            raise BuildTreeSeedError(
                "Failed to seed all RPM build environment directories", failures
            )
        self.build_tree.stage_spec_files(self.config.repo_dir, spec_files)

    def _collision(self, spec_file: str, staged_spec: str) -> BuildResult:
        # Both would be SPECS/<name>; only the first one was staged.
        result = BuildResult(spec_file)
        error = SpecNameCollisionError(
            f"Spec file {spec_file} has the same name as {staged_spec} "
            f"and was not built"
        )
        logger.error("Build skipped", spec_file=spec_file, reason=str(error))
        result.mark_failed(str(error))
        return result

    def build_spec(self, spec_file: str, log_dir: Path) -> BuildResult:
        """Builds one spec file; failures are recorded on the result, never raised."""
        result = BuildResult(spec_file)
        rpmbuild_path = self.registry["rpmbuild"]
        temp_log = log_dir / f"{Path(spec_file).name}{LOG_SUFFIX}"

        try:
            if not self.executor.is_authorized(rpmbuild_path):
                raise PrivilegeNotGrantedError(
                    f"Please grant sudo access for user account {self.config.user} "
                    f"to run {rpmbuild_path} as root on host {self.config.host}"
                )
            if self.executor.elevated:
                logger.info("Not running as root, will use sudo for rpmbuild command")

            result.mark_running()
            lines = self._stream_subprocess(
                self.executor.wrap(self.rpmbuild_command(spec_file)), temp_log
            )
            artifact = find_written_artifact(lines)
            if artifact is None:
                raise ArtifactNotProducedError(f"RPM construction of {spec_file} failed")

            harden_and_collect(artifact, self.config.repo_dir)
            result.mark_succeeded(artifact)
        except (BuildError, OSError) as e:
            logger.error("Build failed", spec_file=spec_file, reason=str(e))
            result.mark_failed(str(e))

        try:
            result.log_path = collect_log(temp_log, self.config.repo_dir)
        except OSError as e:
            logger.error("Could not collect build log", spec_file=spec_file, reason=str(e))
        return result

    def run(self) -> RunReport:
        """Runs every stage in order, stopping early only on fatal stage errors."""
        report = RunReport()
        logger.info("Orchestrator starting RPM build process...")

        if not self.verify_tools(report):
            return report

        try:
            spec_files = discover_spec_files(self.config.repo_dir, self.config.spec_extension)
            logger.info("Discovered spec files", count=len(spec_files), spec_files=spec_files)
            self.provision(spec_files)
        except BuildTreeSeedError as e:
            report.fail(str(e), count=e.failures)
            return report
        except (BuildError, OSError) as e:
            report.fail(str(e))
            return report

        if self.executor is None:
            self.executor = select_executor(self.uid, self.registry)

        staged_by: dict[str, str] = {}
        with tempfile.TemporaryDirectory(
            prefix=LOG_DIR_PREFIX, dir=self.config.log_dir
        ) as log_dir_str:
            for spec_file in spec_files:
                name = Path(spec_file).name
                if name in staged_by:
                    result = self._collision(spec_file, staged_by[name])
                else:
                    staged_by[name] = spec_file
                    result = self.build_spec(spec_file, Path(log_dir_str))
                report.results.append(result)
                if not result.succeeded:
                    report.fail()

        logger.info("Orchestrator finished", exit_code=report.exit_code)
        return report
