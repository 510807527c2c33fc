from __future__ import annotations

import pytest

from platform_console.command import BaseCommand
from platform_console.context import CommandContext
from platform_console.properties import SystemProperties


class RecordingFormatter:
    """Formatter that remembers every print request instead of rendering it."""

    def __init__(self):
        self.calls: list[tuple[str, object]] = []
        self.output_stream = None

    def _record(self, method, arg):
        self.calls.append((method, arg))

    def print_help(self, help_lines):
        self._record("help", list(help_lines))

    def print_info(self, info):
        self._record("info", info)

    def print_version(self, version):
        self._record("version", version)

    def print_exception(self, error):
        self._record("exception", error)

    def print_message(self, message):
        self._record("message", message)

    def print(self, obj):
        self._record("print", obj)

    def of(self, method) -> list:
        return [arg for name, arg in self.calls if name == method]


class RecordingCommand(BaseCommand):
    """Command that records the tokens each run_task() receives and the properties seen at that time."""

    help_file = ["recording help"]

    def __init__(self, name="recording", description="Records its invocations"):
        super().__init__()
        self.name = name
        self.description = description
        self.runs: list[list[str]] = []
        self.properties_seen: list[dict[str, str]] = []

    def run_task(self, tokens):
        self.runs.append(list(tokens))
        self.properties_seen.append(dict(self.context.properties))


@pytest.fixture
def formatter() -> RecordingFormatter:
    return RecordingFormatter()


@pytest.fixture
def properties() -> SystemProperties:
    return SystemProperties()


@pytest.fixture
def context(formatter, properties) -> CommandContext:
    return CommandContext(formatter, properties)
