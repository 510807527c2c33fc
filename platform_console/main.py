#!/usr/bin/env python3
"""
CLI main class: builds the command context and runs the shell
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional, Sequence

from rich.console import Console

from .autoloader import Autoloader, CommandRegistry
from .config import Config
from .context import CommandContext
from .errors import ConfigurationError
from .formatter import ConsoleOutputFormatter
from .shell import ShellCommand

LOGGER = logging.getLogger(__name__)


def configure_logger(log_level: str):
    """
    Configures the logging settings based on the provided log level.

    Args:
        log_level: The logging level to set (e.g., 'INFO', 'DEBUG').
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(asctime)s: %(message)s",
        datefmt="%H:%M:%S"
    )
    logging.getLogger("platform_console").setLevel(level)


class CLI:

    def __init__(self, out: Optional[IO[str]] = None, config: Optional[Config] = None,
                 registry: Optional[CommandRegistry] = None, context: Optional[CommandContext] = None):
        self.config = config or Config().load_configuration()
        self.console = Console(file=out)
        self.context = context or CommandContext(ConsoleOutputFormatter(self.console))
        self.registry = registry or Autoloader(self.config)

    def run(self, argv: Sequence[str]) -> int:
        """Run the shell with the given arguments, returns 0 on success and 1 if any error escaped."""
        try:
            shell = ShellCommand(self.registry, interactive=self.config.interactive)
            shell.set_command_context(self.context)
            shell.execute(argv)
            return 0
        except Exception as e:
            LOGGER.debug("Command failed", exc_info=True)
            self.context.print_exception(e)
            return 1


def main(argv: Optional[Sequence[str]] = None, out: Optional[IO[str]] = None) -> int:
    try:
        config = Config().load_configuration()
    except ConfigurationError as e:
        ConsoleOutputFormatter(Console(file=out)).print_exception(e)
        return 1
    configure_logger(config.log_level)

    cli = CLI(out=out, config=config)
    return cli.run(sys.argv[1:] if argv is None else argv)


if __name__ == '__main__':
    sys.exit(main())
