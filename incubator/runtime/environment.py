"""Virtual environment provisioning for a new project.

Creates ``<project>/<env_dir_name>`` with the selected interpreter's ``venv``
module, checks that the environment's interpreter landed where the host OS
layout says it should, then makes a best-effort attempt to upgrade pip.
Partially created environments are left in place on failure.
"""

from __future__ import annotations

import logging
from pathlib import Path

from incubator.config import Config
from incubator.models import EnvironmentHandle, EnvironmentResult, RuntimeVersion
from incubator.process import ProcessRunner, SubprocessRunner, describe_failure
from incubator.progress import NullProgress, ProgressEvent, ProgressSink

logger = logging.getLogger(__name__)

CREATE_INCREMENT = 20.0
UPGRADE_INCREMENT = 15.0


class EnvironmentProvisioner:
    """Creates and prepares a project's isolated environment."""

    def __init__(
        self,
        config: Config | None = None,
        runner: ProcessRunner | None = None,
        windows: bool | None = None,
    ) -> None:
        self.config = config or Config()
        self.runner = runner or SubprocessRunner(default_timeout=self.config.process_timeout)
        self.windows = windows

    def handle_for(self, project_path: str | Path) -> EnvironmentHandle:
        """Recompute the environment layout for *project_path*."""
        return EnvironmentHandle.for_project(
            Path(project_path).absolute(), self.config.env_dir_name, windows=self.windows
        )

    async def create(
        self,
        project_path: str | Path,
        runtime_version: RuntimeVersion,
        progress: ProgressSink | None = None,
    ) -> EnvironmentResult:
        """Create the environment and upgrade its package manager.

        Only a failed ``venv`` invocation (or a missing interpreter afterwards)
        is reported as failure; the pip upgrade is best effort.
        """
        progress = progress or NullProgress()
        project = Path(project_path).absolute()
        handle = self.handle_for(project)

        progress.report(ProgressEvent("Creating virtual environment", CREATE_INCREMENT))
        command = [runtime_version.executable_path, "-m", "venv", str(handle.root)]
        result = await self.runner.run(command, cwd=project, timeout=self.config.process_timeout)
        if not result.ok:
            error = f"Virtual environment creation failed: {describe_failure(command, result)}"
            logger.error(error)
            return EnvironmentResult(success=False, error=error)

        if not handle.runtime_executable.exists():
            error = (
                "Virtual environment creation failed: interpreter not found at "
                f"{handle.runtime_executable}"
            )
            logger.error(error)
            return EnvironmentResult(success=False, error=error)

        progress.report(ProgressEvent("Upgrading pip", UPGRADE_INCREMENT))
        if self.config.upgrade_package_manager:
            await self._upgrade_pip(handle, project)

        logger.info("Virtual environment ready at %s", handle.root)
        return EnvironmentResult(
            success=True,
            environment_root=str(handle.root),
            runtime_executable=str(handle.runtime_executable),
        )

    async def _upgrade_pip(self, handle: EnvironmentHandle, project: Path) -> bool:
        command = [str(handle.runtime_executable), "-m", "pip", "install", "--upgrade", "pip"]
        result = await self.runner.run(command, cwd=project, timeout=self.config.process_timeout)
        if not result.ok:
            logger.warning("Failed to upgrade pip: %s", describe_failure(command, result))
            return False
        return True
