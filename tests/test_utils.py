"""Unit tests for utility functions (incubator.utils).

Tests cover:
- run_command (success, failure, cwd, env vars, timeout, missing program)
- slugify
- ensure_dir / write_text / save_json (use tmp_path)
- format_duration
- configure_logging
- Rich output helpers
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from rich.logging import RichHandler
from rich.progress import Progress

from incubator.utils import (
    configure_logging,
    create_progress,
    ensure_dir,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
    save_json,
    slugify,
    write_text,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command(
            [sys.executable, "-c", "print('hello')"]
        )
        assert returncode == 0
        assert stdout == "hello"
        assert stderr == ""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_command(self):
        returncode, _, stderr = await run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"]
        )
        assert returncode == 3
        assert stderr == "boom"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_cwd(self, tmp_path: Path):
        returncode, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert returncode == 0
        assert Path(stdout).resolve() == tmp_path.resolve()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_env_is_merged(self):
        returncode, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.environ['INCUBATOR_TEST_VAR'])"],
            env={"INCUBATOR_TEST_VAR": "42"},
        )
        assert returncode == 0
        assert stdout == "42"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout_kills_process(self):
        returncode, _, stderr = await run_command(
            [sys.executable, "-c", "import time; time.sleep(10)"], timeout=0.5
        )
        assert returncode == -1
        assert "timed out" in stderr

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_program_raises(self):
        with pytest.raises(OSError):
            await run_command(["incubator-no-such-program-xyz"])

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_with_mock_subprocess(self, mock_subprocess):
        proc = mock_subprocess(stdout="  Python 3.12.1\n", returncode=0)
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)) as exec_mock:
            result = await run_command(["python3", "--version"])
        assert result == (0, "Python 3.12.1", "")
        assert exec_mock.call_args.args == ("python3", "--version")


# ---------------------------------------------------------------------------
# slugify
# ---------------------------------------------------------------------------


class TestSlugify:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("My Project", "my-project"),
            ("data_tools", "data-tools"),
            ("  spaced  out  ", "spaced-out"),
            ("already-slugged", "already-slugged"),
            ("Ünïcode", "n-code"),
            ("___", ""),
        ],
    )
    def test_slugify(self, name, expected):
        assert slugify(name) == expected


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


class TestFileHelpers:
    @pytest.mark.unit
    def test_ensure_dir_creates_parents(self, tmp_path: Path):
        target = tmp_path / "a" / "b" / "c"
        assert ensure_dir(target) == target
        assert target.is_dir()
        ensure_dir(target)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_write_text_creates_parents_and_overwrites(self, tmp_path: Path):
        target = tmp_path / "pkg" / "mod.py"
        await write_text(target, "first\n")
        await write_text(target, "second\n")
        assert target.read_text(encoding="utf-8") == "second\n"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_save_json_indent_and_newline(self, tmp_path: Path):
        target = await save_json({"a": [1, 2]}, tmp_path / "out.json", indent=4)
        text = target.read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert '    "a": [' in text
        assert json.loads(text) == {"a": [1, 2]}


# ---------------------------------------------------------------------------
# format_duration
# ---------------------------------------------------------------------------


class TestFormatDuration:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "0.0s"), (3.7, "3.7s"), (59.94, "59.9s"), (65.2, "1m 5s"), (3600, "60m 0s"), (-1, "0.0s")],
    )
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    @pytest.mark.unit
    def test_single_handler_and_level(self):
        log = logging.getLogger("incubator")
        before = list(log.handlers)
        try:
            configure_logging(verbose=False)
            configure_logging(verbose=True)
            rich_handlers = [h for h in log.handlers if isinstance(h, RichHandler)]
            assert len(rich_handlers) == 1
            assert log.level == logging.DEBUG
        finally:
            for handler in list(log.handlers):
                if handler not in before:
                    log.removeHandler(handler)
            log.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    @pytest.mark.unit
    def test_print_helpers(self):
        with patch("incubator.utils.console") as mock_console:
            print_success("done")
            print_error("failed")
            print_warning("careful")
        printed = [call.args[0] for call in mock_console.print.call_args_list]
        assert "[bold green]done[/bold green]" in printed
        assert "[bold red]failed[/bold red]" in printed
        assert "[bold yellow]careful[/bold yellow]" in printed

    @pytest.mark.unit
    def test_print_summary_table(self):
        with patch("incubator.utils.console") as mock_console:
            print_summary_table({"Project": "demo", "Path": "/tmp/demo"}, title="Created")
        table = mock_console.print.call_args_list[0].args[0]
        assert table.title == "Created"
        assert table.row_count == 2

    @pytest.mark.unit
    def test_create_progress(self):
        assert isinstance(create_progress(), Progress)
