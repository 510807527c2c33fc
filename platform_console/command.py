"""
Command protocol and the option handling shared by every console command
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from . import __version__

if TYPE_CHECKING:
    from .context import CommandContext

LOGGER = logging.getLogger(__name__)

HELP_OPTIONS = ("-h", "-?", "--help")
VERSION_OPTION = "--version"
PROPERTY_OPTION_PREFIX = "-D"


class TokenStream:
    """Command arguments, consumed from the front as options and command names are parsed."""

    def __init__(self, tokens: Iterable[str] = ()):
        self._tokens = deque(tokens)

    def peek(self) -> Optional[str]:
        """Return the front token without consuming it, None when empty."""
        return self._tokens[0] if self._tokens else None

    def pop(self) -> str:
        """Consume and return the front token. Raises IndexError when empty."""
        return self._tokens.popleft()

    def clear(self):
        self._tokens.clear()

    def __len__(self):
        return len(self._tokens)

    def __bool__(self):
        return bool(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._tokens))

    def __eq__(self, other):
        if isinstance(other, (TokenStream, list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    def __repr__(self):
        return f"TokenStream({list(self._tokens)!r})"


@runtime_checkable
class Command(Protocol):
    """Protocol every console command implements.

    Attributes:
        name: The command name typed on the command line (e.g. "start").
        description: One-line description shown in the shell's task listing.
    """

    name: str
    description: str

    def set_command_context(self, context: CommandContext) -> None: ...

    def execute(self, tokens: Iterable[str]) -> None: ...


class BaseCommand(ABC):
    """Option parsing and help/version handling shared by all commands.

    Subclasses set ``name``, ``description`` and ``help_file`` and implement
    run_task(). The same parsing applies at every level, for the shell and for
    every command it dispatches to.
    """

    name = ""
    description = ""
    help_file: list[str] = []

    def __init__(self):
        self.context: Optional[CommandContext] = None
        self.print_help_requested = False
        self.print_version_requested = False

    def set_command_context(self, context: CommandContext):
        self.context = context

    def execute(self, tokens: Iterable[str]):
        """Parse the leading options, then print help, print the version or run the task.

        Args:
            tokens: command arguments. A fresh TokenStream is built from them, so
                    the caller's sequence is never modified.
        """
        tokens = TokenStream(tokens)
        self.print_help_requested = False
        self.print_version_requested = False

        self.parse_options(tokens)

        if self.print_help_requested:
            self.print_help()
        elif self.print_version_requested:
            self.context.print_version(__version__)
        else:
            self.run_task(tokens)

    def parse_options(self, tokens: TokenStream):
        """Consume tokens starting with '-' until the first one that does not."""
        while tokens:
            if not tokens.peek().startswith("-"):
                return
            self.handle_option(tokens.pop(), tokens)

    def handle_option(self, token: str, tokens: TokenStream):
        """Handle the options common to every command: -h, -?, --help, --version and -D."""
        if token in HELP_OPTIONS:
            self.print_help_requested = True
            tokens.clear()
        elif token == VERSION_OPTION:
            self.print_version_requested = True
            tokens.clear()
        elif token.startswith(PROPERTY_OPTION_PREFIX):
            key, _, value = token[len(PROPERTY_OPTION_PREFIX):].partition("=")
            self.context.properties[key] = value
        else:
            LOGGER.debug(f"{self.name}: unrecognized option {token!r}")
            self.context.print_info(f"Unrecognized option: {token}")
            self.print_help_requested = True

    @abstractmethod
    def run_task(self, tokens: TokenStream):
        """Run the command with the tokens left after option parsing."""

    def print_help(self):
        self.context.print_help(self.help_file)
