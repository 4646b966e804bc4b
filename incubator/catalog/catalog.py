"""Template registry and placeholder substitution."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Mapping, Optional

from incubator.models import ProjectTemplate

_PLACEHOLDER_RE = re.compile(r"\{\{(.+?)\}\}")


class DuplicateTemplateError(ValueError):
    """Raised when two descriptors share an id."""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Template id registered twice: {template_id!r}")


def render(raw: str, variables: Mapping[str, str]) -> str:
    """Replace every ``{{KEY}}`` in *raw* with ``variables[KEY]``.

    Substitution is a single literal pass: unknown keys stay verbatim and
    substituted text is never scanned again.

    >>> render("{{PROJECT_NAME}} lives at {{PROJECT_PATH}}", {"PROJECT_NAME": "foo", "PROJECT_PATH": "/x"})
    'foo lives at /x'
    """

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in variables:
            return variables[key]
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_substitute, raw)


class TemplateCatalog:
    """Immutable registry of ``ProjectTemplate`` descriptors keyed by id.

    Construct one explicitly and hand it to the scaffolder; tests can build
    catalogs holding fake templates.
    """

    def __init__(self, templates: Iterable[ProjectTemplate]) -> None:
        registry: dict[str, ProjectTemplate] = {}
        for template in templates:
            if template.id in registry:
                raise DuplicateTemplateError(template.id)
            registry[template.id] = template
        self._templates = registry

    def get(self, template_id: str) -> Optional[ProjectTemplate]:
        return self._templates.get(template_id)

    def list_all(self) -> list[ProjectTemplate]:
        """All descriptors in registration order."""
        return list(self._templates.values())

    def ids(self) -> list[str]:
        return list(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[ProjectTemplate]:
        return iter(self._templates.values())
