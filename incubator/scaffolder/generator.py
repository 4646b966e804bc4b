"""Provisioning orchestrator.

Takes validated ``ProjectOptions`` and drives the declared stages: project
root, template lookup, rendered files, virtual environment, dependencies,
editor configuration and git. Fatal failures become a
``ProvisioningResult(success=False)``; nothing that is created is rolled back,
so a failed run leaves its partial output for inspection.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Optional

from incubator.catalog import TemplateCatalog, render
from incubator.config import Config
from incubator.models import (
    EnvironmentResult,
    ProjectOptions,
    ProjectTemplate,
    ProvisioningResult,
)
from incubator.process import ProcessRunner, SubprocessRunner, describe_failure
from incubator.progress import NullProgress, ProgressEvent, ProgressSink
from incubator.runtime import DependencyInstaller, EnvironmentProvisioner
from incubator.scaffolder.stages import STAGES, Fatality, Stage
from incubator.scaffolder.tooling import write_editor_config
from incubator.utils import ensure_dir, format_duration, slugify, write_text

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ProvisioningError(Exception):
    """Raised inside the pipeline when a stage cannot complete."""

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        self.message = message
        super().__init__(message)


class TemplateNotFoundError(ProvisioningError):
    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__("template", f"Template not found: {template_id!r}")


# ---------------------------------------------------------------------------
# Per-run state
# ---------------------------------------------------------------------------


@dataclass
class _Run:
    options: ProjectOptions
    project_path: Path
    progress: ProgressSink
    template: Optional[ProjectTemplate] = None
    environment: Optional[EnvironmentResult] = None
    degraded: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ProjectScaffolder:
    """Creates a project from a template and provisions its environment.

    The scaffolder holds no per-run state; every call to
    :meth:`create_project` works only on the filesystem under the target
    path. Two runs must not target the same path at the same time.
    """

    def __init__(
        self,
        catalog: TemplateCatalog,
        config: Config | None = None,
        runner: ProcessRunner | None = None,
        windows: bool | None = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or Config()
        self.runner = runner or SubprocessRunner(default_timeout=self.config.process_timeout)
        self.provisioner = EnvironmentProvisioner(self.config, self.runner, windows=windows)
        self.installer = DependencyInstaller(self.config, self.runner, windows=windows)

    # -- Public API --------------------------------------------------------

    async def create_project(
        self,
        options: ProjectOptions,
        progress: ProgressSink | None = None,
    ) -> ProvisioningResult:
        """Run every stage in order and return the terminal result.

        Never raises: fatal failures are converted to ``success=False``.
        """
        # Child processes run inside the project, so every path they see is absolute.
        run = _Run(
            options=options,
            project_path=options.project_path.absolute(),
            progress=progress or NullProgress(),
        )
        started = time.monotonic()
        logger.info(
            "Creating project %r from template %r at %s",
            options.name,
            options.template_id,
            run.project_path,
        )

        try:
            for stage in STAGES:
                await self._run_stage(stage, run)
        except ProvisioningError as exc:
            logger.error("Project creation failed at stage %r: %s", exc.stage, exc.message)
            return ProvisioningResult(success=False, error=exc.message)
        except Exception as exc:
            logger.exception("Unexpected error while creating project %r", options.name)
            return ProvisioningResult(success=False, error=str(exc) or type(exc).__name__)

        if run.degraded:
            logger.warning("Project created with degraded stages: %s", ", ".join(run.degraded))
        logger.info(
            "Project %r created in %s", options.name, format_duration(time.monotonic() - started)
        )
        return ProvisioningResult(
            success=True,
            project_path=str(run.project_path),
            degraded_stages=tuple(run.degraded),
        )

    # -- Stage dispatch ----------------------------------------------------

    async def _run_stage(self, stage: Stage, run: _Run) -> None:
        if not stage.is_enabled(run.options, self.config):
            run.progress.report(ProgressEvent(f"Skipped: {stage.label}", stage.weight))
            return

        run.progress.report(ProgressEvent(stage.label, stage.weight))
        handler = getattr(self, stage.handler)

        if stage.fatality is Fatality.FATAL:
            if not await handler(run):
                raise ProvisioningError(stage.name, f"Stage {stage.name!r} failed")
            return

        try:
            ok = await handler(run)
        except Exception as exc:
            logger.warning("Stage %r failed: %s", stage.name, exc, exc_info=True)
            ok = False
        if not ok:
            run.degraded.append(stage.name)

    # -- Stages ------------------------------------------------------------

    async def _prepare(self, run: _Run) -> bool:
        ensure_dir(run.project_path)
        return True

    async def _resolve_template(self, run: _Run) -> bool:
        template = self.catalog.get(run.options.template_id)
        if template is None:
            raise TemplateNotFoundError(run.options.template_id)
        run.template = template
        return True

    async def _render(self, run: _Run) -> bool:
        assert run.template is not None
        variables = self.template_variables(run.options)

        for directory in run.template.directories:
            ensure_dir(_inside(run.project_path, directory))

        for template_file in run.template.files:
            target = _inside(run.project_path, template_file.path)
            await write_text(target, render(template_file.content, variables))

        logger.info(
            "Rendered %d file(s) from template %r", len(run.template.files), run.template.id
        )
        return True

    async def _environment(self, run: _Run) -> bool:
        result = await self.provisioner.create(
            run.project_path, run.options.runtime_version, run.progress
        )
        if not result.success:
            raise ProvisioningError("environment", result.error or "Virtual environment creation failed")
        run.environment = result
        return True

    async def _dependencies(self, run: _Run) -> bool:
        assert run.template is not None
        production = await self.installer.install(
            run.project_path, run.template.dependencies, False, run.progress
        )
        development = await self.installer.install(
            run.project_path, run.template.dev_dependencies, True, run.progress
        )
        return production and development

    async def _editor(self, run: _Run) -> bool:
        handle = self.provisioner.handle_for(run.project_path)
        await write_editor_config(run.project_path, handle, self.config.env_dir_name)
        return True

    async def _version_control(self, run: _Run) -> bool:
        commands = [
            ["git", "init"],
            ["git", "add", "."],
            ["git", "commit", "-m", self.config.commit_message],
        ]
        for command in commands:
            result = await self.runner.run(
                command, cwd=run.project_path, timeout=self.config.process_timeout
            )
            if not result.ok:
                logger.warning(
                    "Failed to initialise git repository: %s", describe_failure(command, result)
                )
                return False
        logger.info("Git repository initialised in %s", run.project_path)
        return True

    async def _finish(self, run: _Run) -> bool:
        return True

    # -- Helpers -----------------------------------------------------------

    @staticmethod
    def template_variables(options: ProjectOptions) -> dict[str, str]:
        """Placeholder values available to template files."""
        return {
            "PROJECT_NAME": options.name,
            "PROJECT_PATH": str(options.project_path.absolute()),
            "PROJECT_SLUG": slugify(options.name) or options.name,
            "PYTHON_VERSION": options.runtime_version.version,
        }


def _inside(root: Path, relative: str) -> Path:
    """Join a template-relative POSIX path onto *root*, refusing escapes."""
    rel = PurePosixPath(relative)
    if rel.is_absolute() or ".." in rel.parts:
        raise ProvisioningError("render", f"Template path escapes the project root: {relative!r}")
    return root.joinpath(*rel.parts)
