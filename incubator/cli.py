"""Command-line host for the provisioning pipeline.

Usage::

    incubator templates
    incubator pythons
    incubator new my-project --template flask --dir ~/code
    python -m incubator new tool --template cli --no-install --no-git
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.panel import Panel
from rich.table import Table

from incubator.catalog import TemplateCatalog, build_default_catalog
from incubator.config import Config
from incubator.models import ProjectOptions
from incubator.progress import RichProgressSink
from incubator.runtime import RuntimeVersionResolver
from incubator.runtime.resolver import select_default
from incubator.scaffolder import ProjectScaffolder
from incubator.utils import (
    configure_logging,
    console,
    create_progress,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)
from incubator.validation import is_directory_empty, validate_project_name

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _build_catalog(config: Config) -> TemplateCatalog:
    major, minor, _ = config.min_version_tuple
    return build_default_catalog(min_python=f"{major}.{minor}")


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def cmd_templates(args: argparse.Namespace, config: Config) -> int:
    """List the built-in templates."""
    table = Table(title="Templates", header_style="bold cyan")
    table.add_column("Id", no_wrap=True)
    table.add_column("Name")
    table.add_column("Dependencies", style="dim")
    for template in _build_catalog(config):
        table.add_row(
            template.id,
            f"{template.display_name}\n[dim]{template.description}[/dim]",
            ", ".join(template.dependencies) or "-",
        )
    console.print(table)
    return EXIT_OK


def cmd_pythons(args: argparse.Namespace, config: Config) -> int:
    """List detected interpreters and mark the default."""
    resolver = RuntimeVersionResolver(config)

    versions = asyncio.run(resolver.detect_all())
    default = select_default(versions)
    if not versions:
        print_warning("No Python interpreter found.")
        return EXIT_FAILED

    table = Table(title="Python interpreters", header_style="bold cyan")
    table.add_column("Version")
    table.add_column("Path")
    table.add_column("Supported")
    for version in versions:
        marker = " (default)" if default and version.executable_path == default.executable_path else ""
        table.add_row(
            f"{version.version}{marker}",
            version.executable_path,
            "[green]yes[/green]" if version.is_supported else "[red]no[/red]",
        )
    console.print(table)
    return EXIT_OK


def cmd_new(args: argparse.Namespace, config: Config) -> int:
    """Create a new project."""
    check = validate_project_name(args.name)
    if not check.is_valid:
        print_error(f"Invalid project name: {check.error}")
        return EXIT_USAGE

    catalog = _build_catalog(config)
    if args.template not in catalog:
        print_error(
            f"Unknown template {args.template!r}. Available: {', '.join(catalog.ids())}"
        )
        return EXIT_USAGE

    parent = Path(args.dir).expanduser().resolve()
    target = parent / args.name
    if target.exists() and not target.is_dir():
        print_error(f"Target exists and is not a directory: {target}")
        return EXIT_USAGE
    if not args.force and not is_directory_empty(target):
        print_error(f"Directory {target} is not empty (use --force to write into it).")
        return EXIT_USAGE

    resolver = RuntimeVersionResolver(config)
    if args.python:
        runtime = asyncio.run(resolver.from_path(args.python))
        if runtime is None:
            print_error(f"Could not detect a Python interpreter at {args.python}")
            return EXIT_USAGE
    else:
        runtime = asyncio.run(resolver.pick_default())
        if runtime is None:
            print_error(
                f"No supported Python interpreter found (need >= {config.min_runtime_version})."
            )
            return EXIT_USAGE
    if not runtime.is_supported:
        print_error(
            f"Python {runtime.version} is below the minimum {config.min_runtime_version}."
        )
        return EXIT_USAGE

    options = ProjectOptions(
        name=args.name,
        target_parent_directory=parent,
        template_id=args.template,
        runtime_version=runtime,
        initialize_version_control=not args.no_git,
        install_dependencies=not args.no_install,
    )

    console.print(
        Panel(
            f"Project  : {options.name}\n"
            f"Template : {options.template_id}\n"
            f"Location : {options.project_path}\n"
            f"Python   : {runtime.version} ({runtime.executable_path})",
            title="[bold]New project[/bold]",
            border_style="bright_cyan",
        )
    )

    scaffolder = ProjectScaffolder(catalog, config)
    with create_progress() as progress:
        sink = RichProgressSink(progress)
        result = asyncio.run(scaffolder.create_project(options, sink))

    if not result.success:
        print_error(f"Project creation failed: {result.error}")
        return EXIT_FAILED

    summary = {"Project": options.name, "Path": result.project_path or ""}
    if result.degraded_stages:
        summary["Degraded"] = ", ".join(result.degraded_stages)
    print_summary_table(summary, title="Project created")
    if result.degraded_stages:
        print_warning("Some optional steps failed; see the log above for details.")
    else:
        print_success(f"Project {options.name!r} is ready at {result.project_path}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="incubator",
        description="Scaffold a Python project with its own virtual environment",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("templates", help="List available project templates")
    sub.add_parser("pythons", help="List detected Python interpreters")

    new = sub.add_parser("new", help="Create a new project")
    new.add_argument("name", help="Project name (also the directory name)")
    new.add_argument("--template", "-t", default="basic", help="Template id (default: basic)")
    new.add_argument("--dir", "-d", default=".", help="Parent directory (default: .)")
    new.add_argument("--python", default=None, help="Interpreter to build the venv with")
    new.add_argument("--no-git", action="store_true", help="Skip git initialisation")
    new.add_argument("--no-install", action="store_true", help="Skip dependency installation")
    new.add_argument("--force", action="store_true", help="Write into a non-empty directory")
    return parser


_COMMANDS = {
    "templates": cmd_templates,
    "pythons": cmd_pythons,
    "new": cmd_new,
}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``incubator`` / ``python -m incubator``."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        config = Config.from_env()
    except ValueError as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(EXIT_USAGE)
    sys.exit(_COMMANDS[args.command](args, config))
