"""Interpreter discovery.

Probes a fixed, ordered list of launcher names, asks each one for its version
and canonical executable path, and keeps the unique results. Probe failures
are expected (``py`` rarely exists off Windows) and never surface as errors.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from incubator.config import Config
from incubator.models import RuntimeVersion
from incubator.process import ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)

_VERSION_OUTPUT_RE = re.compile(r"^Python (\d+\.\d+\.\d+)(?:\s|$)")

_EXECUTABLE_SNIPPET = "import sys; print(sys.executable)"


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def parse_version(output: str) -> Optional[str]:
    """Extract ``MAJOR.MINOR.PATCH`` from ``python --version`` output.

    Pre-release spellings such as ``3.13.0rc1`` are rejected.

    >>> parse_version("Python 3.11.4")
    '3.11.4'
    >>> parse_version("Python 3.13.0rc1") is None
    True
    """
    match = _VERSION_OUTPUT_RE.match(output.strip())
    return match.group(1) if match else None


def is_version_supported(version: str, minimum: tuple[int, int, int]) -> bool:
    """Compare *version* against *minimum*, major first, then minor, then patch."""
    major, minor, patch = (int(p) for p in version.split("."))
    min_major, min_minor, min_patch = minimum

    if major != min_major:
        return major > min_major
    if minor != min_minor:
        return minor > min_minor
    return patch >= min_patch


def deduplicate(versions: Iterable[RuntimeVersion]) -> list[RuntimeVersion]:
    """Drop entries whose executable path was already seen; keep order."""
    seen: set[str] = set()
    unique: list[RuntimeVersion] = []
    for version in versions:
        if version.executable_path in seen:
            continue
        seen.add(version.executable_path)
        unique.append(version)
    return unique


def select_default(versions: Iterable[RuntimeVersion]) -> Optional[RuntimeVersion]:
    """Return the supported entry with the highest numeric version, if any.

    Versions are compared as integer triples, so ``3.10.0`` beats
    ``3.9.18``. Ties keep the earliest entry.
    """
    supported = [v for v in versions if v.is_supported]
    if not supported:
        return None
    return max(supported, key=lambda v: v.version_tuple)


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class RuntimeVersionResolver:
    """Discovers interpreters on the host and picks a default one."""

    def __init__(self, config: Config | None = None, runner: ProcessRunner | None = None) -> None:
        self.config = config or Config()
        self.runner = runner or SubprocessRunner(default_timeout=self.config.probe_timeout)

    async def detect_all(self) -> list[RuntimeVersion]:
        """Probe every candidate launcher; return unique detected interpreters."""
        found: list[RuntimeVersion] = []
        for command in self.config.runtime_candidates:
            version = await self._probe(command)
            if version is not None:
                found.append(version)
        return deduplicate(found)

    async def pick_default(self) -> Optional[RuntimeVersion]:
        """Detect interpreters and return the default one (see :func:`select_default`)."""
        return select_default(await self.detect_all())

    async def from_path(self, executable: str) -> Optional[RuntimeVersion]:
        """Probe one explicit interpreter path chosen by the user."""
        return await self._probe(executable)

    async def _probe(self, command: str) -> Optional[RuntimeVersion]:
        timeout = self.config.probe_timeout

        version_result = await self.runner.run([command, "--version"], timeout=timeout)
        if not version_result.ok:
            logger.debug("Probe %r --version failed: %s", command, version_result.stderr)
            return None
        version = parse_version(version_result.stdout)
        if version is None:
            logger.debug("Probe %r gave unparsable version %r", command, version_result.stdout)
            return None

        path_result = await self.runner.run([command, "-c", _EXECUTABLE_SNIPPET], timeout=timeout)
        executable = path_result.stdout.strip()
        if not path_result.ok or not executable:
            logger.debug("Probe %r could not report its executable: %s", command, path_result.stderr)
            return None

        return RuntimeVersion(
            executable_path=executable,
            version=version,
            is_supported=is_version_supported(version, self.config.min_version_tuple),
        )
