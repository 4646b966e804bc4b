"""Project provisioning pipeline.

Quick usage::

    from incubator.catalog import build_default_catalog
    from incubator.scaffolder import ProjectScaffolder

    scaffolder = ProjectScaffolder(build_default_catalog())
    result = await scaffolder.create_project(options, progress)
"""

from incubator.scaffolder.generator import (
    ProjectScaffolder,
    ProvisioningError,
    TemplateNotFoundError,
)
from incubator.scaffolder.stages import STAGES, Fatality, Stage

__all__ = [
    "STAGES",
    "Fatality",
    "ProjectScaffolder",
    "ProvisioningError",
    "Stage",
    "TemplateNotFoundError",
]
