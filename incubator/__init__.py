"""incubator -- scaffold a Python project, its virtual environment and tooling."""

__version__ = "0.1.0"
