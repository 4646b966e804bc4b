"""Declared stages of the provisioning pipeline.

Every stage carries its own failure policy. The orchestrator walks ``STAGES``
in order and consults each entry uniformly: a ``FATAL`` stage that fails
stops the run, a ``DEGRADE`` stage that fails is logged and recorded while the
run continues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from incubator.config import Config
from incubator.models import ProjectOptions


class Fatality(str, Enum):
    FATAL = "fatal"
    DEGRADE = "degrade"


def _always(options: ProjectOptions, config: Config) -> bool:
    return True


@dataclass(frozen=True)
class Stage:
    """One sequential pipeline step.

    Attributes:
        name: Stable identifier, reported in ``ProvisioningResult.degraded_stages``.
        label: Human-readable progress label.
        weight: Percentage points reported before the stage runs.
        fatality: What a failure of this stage does to the run.
        handler: Name of the ``ProjectScaffolder`` coroutine implementing it.
        enabled: Predicate deciding whether the stage runs at all.
    """

    name: str
    label: str
    weight: float
    fatality: Fatality
    handler: str
    enabled: Callable[[ProjectOptions, Config], bool] = field(default=_always)

    def is_enabled(self, options: ProjectOptions, config: Config) -> bool:
        return self.enabled(options, config)


# Weights add up to 100 together with the environment provisioner's own
# increments (see incubator.runtime.environment).
STAGES: tuple[Stage, ...] = (
    Stage("prepare", "Creating project directory", 5, Fatality.FATAL, "_prepare"),
    Stage("template", "Resolving template", 5, Fatality.FATAL, "_resolve_template"),
    Stage("render", "Generating project structure", 15, Fatality.FATAL, "_render"),
    Stage("environment", "Setting up virtual environment", 5, Fatality.FATAL, "_environment"),
    Stage(
        "dependencies",
        "Installing project dependencies",
        20,
        Fatality.DEGRADE,
        "_dependencies",
        enabled=lambda options, config: options.install_dependencies,
    ),
    Stage(
        "editor",
        "Writing editor configuration",
        5,
        Fatality.DEGRADE,
        "_editor",
        enabled=lambda options, config: config.write_editor_config,
    ),
    Stage(
        "vcs",
        "Initialising git repository",
        5,
        Fatality.DEGRADE,
        "_version_control",
        enabled=lambda options, config: options.initialize_version_control,
    ),
    Stage("finish", "Project created", 5, Fatality.FATAL, "_finish"),
)
