"""Shared pytest fixtures for the incubator test suite.

Provides reusable fixtures for:
- Mock asyncio subprocesses
- A recording fake ``ProcessRunner`` that can materialise venv interpreters
- A recording progress sink
- Small template catalogs and ready-made ``RuntimeVersion`` / ``ProjectOptions``
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest

from incubator.catalog import TemplateCatalog
from incubator.config import Config
from incubator.models import (
    EnvironmentHandle,
    ProcessResult,
    ProjectOptions,
    ProjectTemplate,
    RuntimeVersion,
    TemplateFile,
)
from incubator.progress import ProgressEvent


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Factory for mock asyncio subprocess instances.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


# ---------------------------------------------------------------------------
# Fake process runner
# ---------------------------------------------------------------------------

def _contains(command: list[str], tokens: tuple[str, ...]) -> bool:
    """True if *tokens* appear contiguously in *command*."""
    size = len(tokens)
    return any(tuple(command[i:i + size]) == tokens for i in range(len(command) - size + 1))


class FakeRunner:
    """Recording ``ProcessRunner``.

    Commands match rules registered with :meth:`on` (first match wins);
    anything unmatched succeeds with empty output. A successful
    ``-m venv <root>`` call creates the interpreter file the real ``venv``
    module would, so the provisioner's existence check passes.
    """

    def __init__(self, windows: bool = False, materialize_venv: bool = True) -> None:
        self.windows = windows
        self.materialize_venv = materialize_venv
        self.calls: list[tuple[list[str], Path | None]] = []
        self._rules: list[tuple[tuple[str, ...], ProcessResult]] = []

    def on(self, *tokens: str, exit_code: int = 0, stdout: str = "", stderr: str = "") -> "FakeRunner":
        self._rules.append((tokens, ProcessResult(exit_code=exit_code, stdout=stdout, stderr=stderr)))
        return self

    @property
    def commands(self) -> list[list[str]]:
        return [command for command, _ in self.calls]

    async def run(
        self,
        command: Sequence[str],
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        command = list(command)
        self.calls.append((command, cwd))
        result = ProcessResult(exit_code=0)
        for tokens, candidate in self._rules:
            if _contains(command, tokens):
                result = candidate
                break

        if result.ok and self.materialize_venv and _contains(command, ("-m", "venv")):
            root = Path(command[-1])
            handle = EnvironmentHandle.for_project(root.parent, root.name, windows=self.windows)
            handle.runtime_executable.parent.mkdir(parents=True, exist_ok=True)
            handle.runtime_executable.write_text("", encoding="utf-8")
        return result


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_runner():
    """The ``FakeRunner`` class itself, for tests that need non-default options."""
    return FakeRunner


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------

class RecordingProgress:
    def __init__(self) -> None:
        self.events: list[ProgressEvent] = []

    def report(self, event: ProgressEvent) -> None:
        self.events.append(event)

    @property
    def labels(self) -> list[str]:
        return [e.label for e in self.events if e.label]

    @property
    def total(self) -> float:
        return sum(e.increment for e in self.events)


@pytest.fixture
def recording_progress() -> RecordingProgress:
    return RecordingProgress()


# ---------------------------------------------------------------------------
# Domain objects
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def runtime_version() -> RuntimeVersion:
    return RuntimeVersion(executable_path="/usr/bin/python3", version="3.11.4", is_supported=True)


@pytest.fixture
def basic_template() -> ProjectTemplate:
    """Tiny template: one directory, one rendered file, one dependency per group."""
    return ProjectTemplate(
        id="basic",
        display_name="Basic",
        description="Minimal test template",
        directories=("src",),
        files=(
            TemplateFile(path="src/main.ext", content="# {{PROJECT_NAME}} at {{PROJECT_PATH}}\n"),
        ),
        dependencies=("requests>=2.0",),
        dev_dependencies=("pytest>=7.0",),
    )


@pytest.fixture
def basic_catalog(basic_template: ProjectTemplate) -> TemplateCatalog:
    return TemplateCatalog([basic_template])


@pytest.fixture
def make_options(tmp_path: Path, runtime_version: RuntimeVersion):
    """Factory for ``ProjectOptions`` rooted in ``tmp_path``."""
    def factory(**overrides) -> ProjectOptions:
        values = {
            "name": "demo",
            "target_parent_directory": tmp_path,
            "template_id": "basic",
            "runtime_version": runtime_version,
            "initialize_version_control": True,
            "install_dependencies": True,
        }
        values.update(overrides)
        return ProjectOptions(**values)

    return factory
