from __future__ import annotations

import io
from pathlib import Path

from rich.console import Console

from genfrom.reporting import ConsoleReporter
from genfrom.rewrite import OccurrenceStat


def _reporter() -> tuple[ConsoleReporter, io.StringIO]:
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, color_system=None, width=200)
    return ConsoleReporter(console), buffer


def test_summary_lists_found_placeholders_only():
    reporter, buffer = _reporter()
    reporter.summary(
        {
            "PROJECT_NAME": OccurrenceStat(count=3, replacement="demo"),
            "USERNAME": OccurrenceStat(count=1, replacement="[john]"),
            "DESCRIPTION": OccurrenceStat(count=0, replacement=""),
        }
    )
    output = buffer.getvalue()

    assert 'PROJECT_NAME => Found 3 occurrences => Replacing with "demo"' in output
    assert 'USERNAME => Found 1 occurrence => Replacing with "[john]"' in output
    assert "DESCRIPTION" not in output


def test_summary_without_occurrences():
    reporter, buffer = _reporter()
    reporter.summary({"PROJECT_NAME": OccurrenceStat(count=0, replacement="demo")})
    assert "No placeholders found in template files" in buffer.getvalue()


def test_failure_names_the_stage():
    reporter, buffer = _reporter()
    reporter.failed("download", "Failed to download template: 404")
    assert "Error during download: Failed to download template: 404" in buffer.getvalue()


def test_completion_shows_next_steps():
    reporter, buffer = _reporter()
    reporter.completed(Path("/tmp/my-app"), here=False)
    output = buffer.getvalue()
    assert "cd my-app" in output
    assert "pnpm install" in output

    reporter, buffer = _reporter()
    reporter.completed(Path("/tmp/my-app"), here=True)
    assert "cd my-app" not in buffer.getvalue()
