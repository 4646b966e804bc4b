"""Incubator configuration.

Centralised, typed configuration for the provisioning pipeline. All settings
use Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")

_FALSE_VALUES = {"0", "false", "no", "off"}


class Config(BaseModel):
    """Global incubator configuration.

    Holds every tuneable parameter used by the resolver, the provisioner and
    the scaffolder. Instances are typically created once by the CLI entry
    point and then passed through the rest of the system.
    """

    env_dir_name: str = Field(
        default=".venv", min_length=1, description="Environment root, relative to the project"
    )
    min_runtime_version: str = Field(
        default="3.8.0", description="Minimum supported interpreter version (MAJOR.MINOR.PATCH)"
    )
    runtime_candidates: list[str] = Field(
        default_factory=lambda: ["python3", "python", "py"],
        description="Interpreter launcher names probed in order",
    )
    probe_timeout: int = Field(default=15, ge=1, description="Per-probe timeout in seconds")
    process_timeout: int = Field(
        default=900, ge=10, description="Timeout for venv, pip and git invocations in seconds"
    )
    upgrade_package_manager: bool = Field(
        default=True, description="Run a best-effort pip self-upgrade after venv creation"
    )
    write_editor_config: bool = Field(
        default=True, description="Write .vscode settings/launch/extensions documents"
    )
    commit_message: str = Field(default="Initial commit", min_length=1)

    @field_validator("min_runtime_version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not _VERSION_RE.match(value):
            raise ValueError(f"expected MAJOR.MINOR.PATCH, got {value!r}")
        return value

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def min_version_tuple(self) -> tuple[int, int, int]:
        """The minimum version as an integer triple."""
        major, minor, patch = (int(p) for p in self.min_runtime_version.split("."))
        return major, minor, patch

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            INCUBATOR_ENV_DIR, INCUBATOR_MIN_PYTHON, INCUBATOR_PYTHON_CANDIDATES,
            INCUBATOR_PROBE_TIMEOUT, INCUBATOR_PROCESS_TIMEOUT,
            INCUBATOR_UPGRADE_PIP, INCUBATOR_COMMIT_MESSAGE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("INCUBATOR_ENV_DIR"):
            kwargs["env_dir_name"] = os.environ["INCUBATOR_ENV_DIR"]
        if os.environ.get("INCUBATOR_MIN_PYTHON"):
            kwargs["min_runtime_version"] = os.environ["INCUBATOR_MIN_PYTHON"]
        if os.environ.get("INCUBATOR_PYTHON_CANDIDATES"):
            raw = os.environ["INCUBATOR_PYTHON_CANDIDATES"]
            kwargs["runtime_candidates"] = [c.strip() for c in raw.split(",") if c.strip()]
        if os.environ.get("INCUBATOR_PROBE_TIMEOUT"):
            kwargs["probe_timeout"] = int(os.environ["INCUBATOR_PROBE_TIMEOUT"])
        if os.environ.get("INCUBATOR_PROCESS_TIMEOUT"):
            kwargs["process_timeout"] = int(os.environ["INCUBATOR_PROCESS_TIMEOUT"])
        if os.environ.get("INCUBATOR_UPGRADE_PIP"):
            flag = os.environ["INCUBATOR_UPGRADE_PIP"].strip().lower()
            kwargs["upgrade_package_manager"] = flag not in _FALSE_VALUES
        if os.environ.get("INCUBATOR_COMMIT_MESSAGE"):
            kwargs["commit_message"] = os.environ["INCUBATOR_COMMIT_MESSAGE"]

        return cls(**kwargs)
