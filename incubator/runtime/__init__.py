"""Interpreter discovery, environment creation and dependency installation."""

from incubator.runtime.environment import EnvironmentProvisioner
from incubator.runtime.installer import DependencyInstaller
from incubator.runtime.resolver import RuntimeVersionResolver

__all__ = [
    "DependencyInstaller",
    "EnvironmentProvisioner",
    "RuntimeVersionResolver",
]
