"""Dependency installation into a project's environment.

Specifiers are opaque strings handed to pip in a single invocation per group,
so one malformed specifier fails the whole group.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from incubator.config import Config
from incubator.models import EnvironmentHandle
from incubator.process import ProcessRunner, SubprocessRunner, describe_failure
from incubator.progress import NullProgress, ProgressEvent, ProgressSink

logger = logging.getLogger(__name__)


class DependencyInstaller:
    """Installs production or development specifier groups with pip."""

    def __init__(
        self,
        config: Config | None = None,
        runner: ProcessRunner | None = None,
        windows: bool | None = None,
    ) -> None:
        self.config = config or Config()
        self.runner = runner or SubprocessRunner(default_timeout=self.config.process_timeout)
        self.windows = windows

    async def install(
        self,
        project_path: str | Path,
        specifiers: Sequence[str],
        is_dev_group: bool = False,
        progress: ProgressSink | None = None,
    ) -> bool:
        """Install *specifiers*; return ``False`` on failure instead of raising."""
        if not specifiers:
            return True

        progress = progress or NullProgress()
        group = "development dependencies" if is_dev_group else "dependencies"
        project = Path(project_path).absolute()
        handle = EnvironmentHandle.for_project(
            project, self.config.env_dir_name, windows=self.windows
        )

        progress.report(ProgressEvent(f"Installing {group}"))
        command = [str(handle.runtime_executable), "-m", "pip", "install", *specifiers]
        result = await self.runner.run(command, cwd=project, timeout=self.config.process_timeout)
        if not result.ok:
            logger.error(
                "Failed to install %s: %s (%s)",
                group,
                ", ".join(specifiers),
                describe_failure(command, result),
            )
            return False

        progress.report(ProgressEvent(f"Installed {group}"))
        logger.info("Installed %d %s", len(specifiers), group)
        return True
