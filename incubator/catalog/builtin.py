"""Built-in project templates.

File bodies are Jinja2 templates stored under ``incubator/catalog/templates/``.
They are rendered once, when the catalog is built, with the descriptor's own
data (dependency lists, minimum Python). Jinja2 runs with ``[[ ]]`` / ``[% %]``
delimiters so the ``{{PROJECT_NAME}}`` style placeholders pass through intact
and are filled in later, per project, by :func:`incubator.catalog.render`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from incubator.catalog.catalog import TemplateCatalog
from incubator.models import ProjectTemplate, TemplateFile

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

_DEV_TOOLS = ("pytest>=7.0.0", "black>=22.0.0", "flake8>=5.0.0")


# ---------------------------------------------------------------------------
# Descriptor table
# ---------------------------------------------------------------------------
#
# Each file entry is (output path, body source). A ``None`` source is an empty
# file.

BUILTIN_TEMPLATES: list[dict[str, Any]] = [
    {
        "id": "basic",
        "display_name": "Basic Python project",
        "description": "Standard layout with src/, tests/ and packaging metadata.",
        "dependencies": (),
        "dev_dependencies": _DEV_TOOLS,
        "directories": ("src", "tests", "docs"),
        "files": (
            ("src/__init__.py", None),
            ("src/main.py", "basic/main.py.j2"),
            ("tests/__init__.py", None),
            ("tests/test_main.py", "basic/test_main.py.j2"),
            ("requirements.txt", "common/requirements.txt.j2"),
            ("requirements-dev.txt", "common/requirements-dev.txt.j2"),
            (".gitignore", "common/gitignore.j2"),
            ("README.md", "basic/README.md.j2"),
            ("pyproject.toml", "basic/pyproject.toml.j2"),
        ),
    },
    {
        "id": "flask",
        "display_name": "Flask web application",
        "description": "Flask application factory with a blueprint and health check.",
        "dependencies": ("flask>=2.2.0", "python-dotenv>=0.19.0"),
        "dev_dependencies": _DEV_TOOLS,
        "directories": ("app", "tests", "docs", "static", "templates"),
        "files": (
            ("app/__init__.py", "flask/app_init.py.j2"),
            ("app/routes.py", "flask/routes.py.j2"),
            ("run.py", "flask/run.py.j2"),
            (".env.example", "flask/env.example.j2"),
            ("requirements.txt", "common/requirements.txt.j2"),
            ("requirements-dev.txt", "common/requirements-dev.txt.j2"),
            (".gitignore", "common/gitignore.j2"),
            ("README.md", "flask/README.md.j2"),
        ),
    },
    {
        "id": "data-science",
        "display_name": "Data science project",
        "description": "Jupyter notebooks with pandas, numpy and matplotlib.",
        "dependencies": ("pandas>=1.5.0", "numpy>=1.21.0", "matplotlib>=3.5.0", "jupyter>=1.0.0"),
        "dev_dependencies": ("pytest>=7.0.0", "black>=22.0.0"),
        "directories": ("notebooks", "data", "src", "results", "docs"),
        "files": (
            ("src/__init__.py", None),
            ("notebooks/01_data_exploration.ipynb", "data-science/exploration.ipynb.j2"),
            ("requirements.txt", "common/requirements.txt.j2"),
            ("requirements-dev.txt", "common/requirements-dev.txt.j2"),
            (".gitignore", "data-science/gitignore.j2"),
            ("README.md", "data-science/README.md.j2"),
        ),
    },
    {
        "id": "cli",
        "display_name": "Command-line application",
        "description": "Click-based command-line tool with a console script entry point.",
        "dependencies": ("click>=8.0.0",),
        "dev_dependencies": _DEV_TOOLS,
        "directories": ("src", "tests", "docs"),
        "files": (
            ("src/__init__.py", None),
            ("src/main.py", "cli/main.py.j2"),
            ("src/cli.py", "cli/cli.py.j2"),
            ("requirements.txt", "common/requirements.txt.j2"),
            ("requirements-dev.txt", "common/requirements-dev.txt.j2"),
            (".gitignore", "common/gitignore.j2"),
            ("README.md", "cli/README.md.j2"),
            ("setup.py", "cli/setup.py.j2"),
        ),
    },
]


# ---------------------------------------------------------------------------
# Body loader
# ---------------------------------------------------------------------------

class TemplateBodyLoader:
    """Loads and pre-renders template bodies from the packaged template tree."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir or _DEFAULT_TEMPLATE_DIR)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            block_start_string="[%",
            block_end_string="%]",
            variable_start_string="[[",
            variable_end_string="]]",
            comment_start_string="[#",
            comment_end_string="#]",
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def load(self, source: Optional[str], context: dict[str, Any]) -> str:
        """Render the body at *source*; ``None`` means an empty file."""
        if source is None:
            return ""
        return self.env.get_template(source).render(**context)

    def list_sources(self) -> list[str]:
        return sorted(self.env.list_templates(extensions=["j2"]))


def build_template(
    entry: dict[str, Any],
    loader: TemplateBodyLoader,
    min_python: str = "3.8",
) -> ProjectTemplate:
    """Turn one descriptor table entry into a frozen ``ProjectTemplate``."""
    context = {
        "template_id": entry["id"],
        "display_name": entry["display_name"],
        "description": entry["description"],
        "dependencies": list(entry["dependencies"]),
        "dev_dependencies": list(entry["dev_dependencies"]),
        "min_python": min_python,
    }
    files = tuple(
        TemplateFile(path=path, content=loader.load(source, context))
        for path, source in entry["files"]
    )
    return ProjectTemplate(
        id=entry["id"],
        display_name=entry["display_name"],
        description=entry["description"],
        directories=tuple(entry["directories"]),
        files=files,
        dependencies=tuple(entry["dependencies"]),
        dev_dependencies=tuple(entry["dev_dependencies"]),
    )


def build_default_catalog(
    min_python: str = "3.8",
    template_dir: str | Path | None = None,
) -> TemplateCatalog:
    """Construct the catalog of built-in templates.

    Args:
        min_python: ``MAJOR.MINOR`` written into generated packaging metadata.
        template_dir: Alternative body tree, mainly for tests.
    """
    loader = TemplateBodyLoader(template_dir)
    return TemplateCatalog(build_template(entry, loader, min_python) for entry in BUILTIN_TEMPLATES)
