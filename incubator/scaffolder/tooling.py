"""Editor configuration written into ``<project>/.vscode/``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from incubator.models import EnvironmentHandle
from incubator.utils import save_json

EDITOR_DIR = ".vscode"

RECOMMENDED_EXTENSIONS = [
    "ms-python.python",
    "ms-python.flake8",
    "ms-python.black-formatter",
    "ms-python.pylint",
]


def build_settings(interpreter_path: str, env_dir_name: str) -> dict[str, Any]:
    return {
        "python.defaultInterpreterPath": interpreter_path,
        "python.terminal.activateEnvironment": True,
        "python.testing.pytestEnabled": True,
        "python.testing.unittestEnabled": False,
        "flake8.enabled": True,
        "pylint.enabled": False,
        "[python]": {
            "editor.defaultFormatter": "ms-python.black-formatter",
        },
        "files.exclude": {
            "**/__pycache__": True,
            "**/*.pyc": True,
            env_dir_name: True,
        },
    }


def build_launch() -> dict[str, Any]:
    return {
        "version": "0.2.0",
        "configurations": [
            {
                "name": "Python: Current File",
                "type": "debugpy",
                "request": "launch",
                "program": "${file}",
                "console": "integratedTerminal",
                "justMyCode": True,
            },
            {
                "name": "Python: Main Module",
                "type": "debugpy",
                "request": "launch",
                "program": "${workspaceFolder}/src/main.py",
                "console": "integratedTerminal",
                "justMyCode": True,
            },
        ],
    }


def build_extensions() -> dict[str, Any]:
    return {"recommendations": list(RECOMMENDED_EXTENSIONS)}


async def write_editor_config(
    project_path: str | Path,
    handle: EnvironmentHandle,
    env_dir_name: str,
) -> list[Path]:
    """Write settings.json, launch.json and extensions.json; return their paths."""
    editor_dir = Path(project_path) / EDITOR_DIR
    documents = {
        "settings.json": build_settings(str(handle.runtime_executable), env_dir_name),
        "launch.json": build_launch(),
        "extensions.json": build_extensions(),
    }
    written: list[Path] = []
    for filename, payload in documents.items():
        written.append(await save_json(payload, editor_dir / filename, indent=4))
    return written
