"""Checks a host runs on user input before building ``ProjectOptions``."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

MAX_NAME_LENGTH = 100

_FORBIDDEN_RE = re.compile(r'[/\\:*?"<>|]')


class ValidationResult(BaseModel):
    is_valid: bool
    error: Optional[str] = None


def validate_project_name(name: str) -> ValidationResult:
    """Reject blank names, names over 100 characters and path-hostile characters."""
    if not name or not name.strip():
        return ValidationResult(is_valid=False, error="Project name must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        return ValidationResult(
            is_valid=False,
            error=f"Project name must not exceed {MAX_NAME_LENGTH} characters",
        )
    if _FORBIDDEN_RE.search(name):
        return ValidationResult(
            is_valid=False,
            error='Project name must not contain any of: / \\ : * ? " < > |',
        )
    return ValidationResult(is_valid=True)


def sanitize_project_name(name: str) -> str:
    """Strip forbidden characters, turn whitespace runs into ``_`` and lowercase.

    Examples::

        sanitize_project_name("  My Project ") -> "my_project"
        sanitize_project_name("a/b:c")         -> "abc"
    """
    cleaned = _FORBIDDEN_RE.sub("", name.strip())
    return re.sub(r"\s+", "_", cleaned).lower()


def is_directory_empty(path: str | Path) -> bool:
    """``True`` when *path* is missing or contains nothing."""
    directory = Path(path)
    if not directory.exists():
        return True
    return not any(directory.iterdir())
