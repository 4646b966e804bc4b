"""Project template catalog.

Quick usage::

    from incubator.catalog import build_default_catalog, render

    catalog = build_default_catalog()
    basic = catalog.get("basic")
    text = render(basic.files[1].content, {"PROJECT_NAME": "demo"})
"""

from incubator.catalog.builtin import build_default_catalog
from incubator.catalog.catalog import DuplicateTemplateError, TemplateCatalog, render

__all__ = [
    "DuplicateTemplateError",
    "TemplateCatalog",
    "build_default_catalog",
    "render",
]
