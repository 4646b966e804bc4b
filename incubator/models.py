"""Pydantic v2 models shared across the provisioning pipeline.

Value objects are frozen: once a ``RuntimeVersion``, ``ProjectTemplate`` or
``ProjectOptions`` is constructed it is never mutated for the duration of a
run.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Runtime
# ---------------------------------------------------------------------------

class RuntimeVersion(BaseModel):
    """A detected interpreter. Uniquely identified by ``executable_path``."""

    model_config = ConfigDict(frozen=True)

    executable_path: str = Field(..., description="Canonical path reported by the interpreter")
    version: str = Field(..., description="MAJOR.MINOR.PATCH, e.g. '3.11.4'")
    is_supported: bool = Field(..., description="Whether version meets the configured minimum")

    @property
    def version_tuple(self) -> tuple[int, int, int]:
        major, minor, patch = (int(p) for p in self.version.split("."))
        return major, minor, patch


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

class TemplateFile(BaseModel):
    """One file of a template, with ``{{KEY}}`` placeholders still in place."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path relative to the project root, POSIX separators")
    content: str = Field(default="")


class ProjectTemplate(BaseModel):
    """Immutable descriptor of a project template."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    display_name: str
    description: str = ""
    directories: tuple[str, ...] = ()
    files: tuple[TemplateFile, ...] = ()
    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Pipeline input / output
# ---------------------------------------------------------------------------

class ProjectOptions(BaseModel):
    """Caller-supplied, already validated choices for one provisioning run."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    target_parent_directory: Path
    template_id: str
    runtime_version: RuntimeVersion
    initialize_version_control: bool = True
    install_dependencies: bool = True

    @property
    def project_path(self) -> Path:
        return self.target_parent_directory / self.name


class ProvisioningResult(BaseModel):
    """Terminal value of one pipeline run.

    ``degraded_stages`` names the non-fatal stages that failed internally; a
    result can be ``success=True`` and still list some.
    """

    success: bool
    project_path: Optional[str] = None
    error: Optional[str] = None
    degraded_stages: tuple[str, ...] = ()


class EnvironmentResult(BaseModel):
    """Outcome of creating a project's virtual environment."""

    success: bool
    environment_root: Optional[str] = None
    runtime_executable: Optional[str] = None
    error: Optional[str] = None


class ProcessResult(BaseModel):
    """Captured outcome of one external process invocation."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


# ---------------------------------------------------------------------------
# Environment layout
# ---------------------------------------------------------------------------

class EnvironmentHandle(BaseModel):
    """Paths inside a project's virtual environment.

    Derived from the project path and the host OS family; never persisted.
    """

    model_config = ConfigDict(frozen=True)

    root: Path
    runtime_executable: Path
    package_manager_executable: Path

    @classmethod
    def for_project(
        cls,
        project_path: str | Path,
        env_dir_name: str = ".venv",
        windows: bool | None = None,
    ) -> "EnvironmentHandle":
        """Compute the handle for *project_path*.

        Args:
            project_path: Project root directory.
            env_dir_name: Name of the environment directory under the root.
            windows: Force the Windows (``True``) or POSIX (``False``) layout.
                ``None`` follows the running host.
        """
        if windows is None:
            windows = os.name == "nt"
        root = Path(project_path) / env_dir_name
        if windows:
            scripts = root / "Scripts"
            return cls(
                root=root,
                runtime_executable=scripts / "python.exe",
                package_manager_executable=scripts / "pip.exe",
            )
        bin_dir = root / "bin"
        return cls(
            root=root,
            runtime_executable=bin_dir / "python",
            package_manager_executable=bin_dir / "pip",
        )
