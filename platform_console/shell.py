#!/usr/bin/env python3
"""
Shell command: the top-level command that dispatches to the discovered commands
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .command import BaseCommand, TokenStream

if TYPE_CHECKING:
    from .autoloader import CommandRegistry
    from .command import Command

LOGGER = logging.getLogger(__name__)

PROGRAM_NAME = "platform-console"


class ShellCommand(BaseCommand):
    """Runs the platform console sub shell"""

    name = "shell"
    description = "Runs the platform console sub shell"

    def __init__(self, registry: CommandRegistry, interactive: bool = False):
        super().__init__()
        self.registry = registry
        self.interactive = interactive
        self.help_file = self._build_help_file()

    def _build_help_file(self) -> list[str]:
        """Build the help text once, from the commands discovered now (sorted by name ascending)."""
        prefix = "" if self.interactive else f"{PROGRAM_NAME} "
        help_file = [
            f"Usage: {prefix}[task] [task-options] [task data]",
            "",
            "Tasks:",
        ]

        commands = sorted(self.registry.discover(), key=lambda command: command.name)
        for command in commands:
            help_file.append(f"    {command.name:<24} - {command.description}")

        help_file.extend([
            "",
            "Task Options (Options specific to each task):",
            "    --version       - Display the version information.",
            "    -h,-?,--help    - Display this help information. To display task specific help, use "
            f"{prefix}[task] -h,-?,--help",
            "",
            "Task Data:",
            "    - Information needed by each specific task.",
            "",
            "System property options:",
            "    -D<name>=<value> - Define a property visible to every task of this invocation.",
            "",
        ])
        return help_file

    def run_task(self, tokens: TokenStream):
        """Pop the task name and hand the remaining tokens to the matching command."""
        if not tokens:
            self.print_help()
            return

        task_token = tokens.pop()
        command = self.find_command(task_token)

        if command is None:
            # "help" and unknown task names both end up here
            if task_token != "help":
                LOGGER.debug(f"No command named {task_token!r}")
            self.print_help()
            return

        command.set_command_context(self.context)
        command.execute(tokens)

    def find_command(self, name: str) -> Optional[Command]:
        """Return the first discovered command with the given name."""
        match = None
        for command in self.registry.discover():
            if command.name != name:
                continue
            if match is None:
                match = command
            else:
                LOGGER.debug(f"Duplicate command name {name!r} ({type(command).__name__}), using the first one")
        return match
