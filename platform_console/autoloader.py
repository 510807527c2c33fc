#!/usr/bin/env python3
"""
Command registries: discover the console commands available at runtime
"""

from __future__ import annotations

import importlib
import logging
from importlib.metadata import entry_points
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from .command import Command

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from .config import Config

LOGGER = logging.getLogger(__name__)

DEFAULT_COMMANDS_PACKAGE = "platform_console.commands"
DEFAULT_ENTRY_POINT_GROUP = "platform_console.commands"


class CommandRegistry(Protocol):
    """Anything that can list the currently available commands."""

    def discover(self) -> list[Command]:
        """Return fresh command instances, in discovery order. Never cached."""
        ...


class StaticRegistry:
    """Compiled-in table of command classes or zero-argument factories."""

    def __init__(self, factories: Iterable[Callable[[], Command]] = ()):
        self.factories = list(factories)

    def discover(self) -> list[Command]:
        return [factory() for factory in self.factories]


class PackageRegistry:
    """Load every command module of a package.

    Each module is expected to define a class named after it
    (e.g. start.py -> StartCommand, list_queues.py -> ListQueuesCommand).
    """

    def __init__(self, package: str = DEFAULT_COMMANDS_PACKAGE):
        self.package = package

    def discover(self) -> list[Command]:
        package = importlib.import_module(self.package)
        commands_path = Path(package.__file__).parent

        commands = []
        for file in sorted(commands_path.glob('*.py')):
            if file.name.startswith('_'):
                continue

            module_name = file.stem
            module = importlib.import_module(f'{self.package}.{module_name}')

            class_name = self._get_class_name(module_name)
            if hasattr(module, class_name):
                commands.append(getattr(module, class_name)())
            else:
                LOGGER.debug(f"Module {module.__name__} has no class {class_name}, skipping")
        return commands

    def _get_class_name(self, module_name):
        """Convert module name to class name (start -> StartCommand)."""
        words = module_name.split('_')
        class_base = ''.join(word.capitalize() for word in words)
        return f"{class_base}Command"


class EntryPointRegistry:
    """Commands contributed by installed distributions under an entry point group.

    A plugin registers itself in its own pyproject.toml::

        [project.entry-points."platform_console.commands"]
        purge = "my_plugin.purge:PurgeCommand"
    """

    def __init__(self, group: str = DEFAULT_ENTRY_POINT_GROUP):
        self.group = group

    def discover(self) -> list[Command]:
        commands = []
        for entry_point in entry_points(group=self.group):
            try:
                factory = entry_point.load()
                command = factory()
            except Exception:
                LOGGER.warning(f"Failed to load command plugin {entry_point.name!r} ({entry_point.value})",
                               exc_info=True)
                continue
            if not isinstance(command, Command):
                LOGGER.warning(f"Plugin {entry_point.name!r} does not provide a console command, skipping")
                continue
            commands.append(command)
        return commands


class CompositeRegistry:
    """Concatenate the commands of several registries, in the order given."""

    def __init__(self, *registries: CommandRegistry):
        self.registries = registries

    def discover(self) -> list[Command]:
        commands = []
        for registry in self.registries:
            commands.extend(registry.discover())
        return commands


class Autoloader:
    """Builds the default registry: bundled commands first, then installed plugins."""

    def __init__(self, config: Config | None = None):
        group = config.plugin_group if config is not None else DEFAULT_ENTRY_POINT_GROUP
        self.registry = CompositeRegistry(
            PackageRegistry(DEFAULT_COMMANDS_PACKAGE),
            EntryPointRegistry(group),
        )

    def discover(self) -> list[Command]:
        commands = self.registry.discover()
        LOGGER.debug(f"Discovered commands: {[command.name for command in commands]}")
        return commands
