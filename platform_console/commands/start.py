"""
Start command: creates and starts brokers from configuration URIs
"""

from __future__ import annotations

import logging
import signal
import threading
from typing import TYPE_CHECKING, Callable, Optional

from ..command import BaseCommand
from ..errors import ConfigUriError, ExecutionError
from ..resources import ConfigurationLoader, ConfigUri, resource_from_string

if TYPE_CHECKING:
    from ..command import TokenStream

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_URI = "yaml:broker.yaml"


class StartCommand(BaseCommand):
    """Creates and starts a broker using a configuration file, or a broker URI."""

    name = "start"
    description = "Creates and starts a broker using a configuration file, or a broker URI."

    help_file = [
        "Task Usage: platform-console start [start-options] [uri]",
        "Description: Creates and starts a broker using a configuration file, or a broker URI.",
        "",
        "Start Options:",
        "    -D<name>=<value>      Define a system property.",
        "    --version             Display the version information.",
        "    -h,-?,--help          Display the start broker help information.",
        "",
        "URI:",
        "",
        "    YAML based broker configuration:",
        "",
        "        Example: platform-console start yaml:conf/broker.yaml",
        "            Loads the configuration file from the given path",
        "        Example: platform-console start yaml:https://example.com/broker.yaml",
        "            Downloads the configuration file from the given URL",
        "        Example: platform-console start yaml:broker.yaml",
        "            Loads the configuration file bundled with the console",
        "",
        f"    Without a URI, {DEFAULT_CONFIG_URI} is used.",
        "",
    ]

    def __init__(
        self,
        loader: Optional[ConfigurationLoader] = None,
        broker_factory: Optional[Callable[[dict], object]] = None,
        shutdown_event: Optional[threading.Event] = None,
    ):
        super().__init__()
        self.loader = loader or ConfigurationLoader(validating=True)
        self.broker_factory = broker_factory
        self.shutdown_event = shutdown_event or threading.Event()
        self.config_uri: Optional[ConfigUri] = None
        self.started: list[object] = []

    def run_task(self, tokens: TokenStream):
        """Start a broker for every URI given, or for the default URI, then block until shutdown."""
        try:
            if not tokens:
                self.config_uri = ConfigUri.parse(DEFAULT_CONFIG_URI)
                self.start_broker(self.config_uri)
            else:
                while tokens:
                    try:
                        self.config_uri = ConfigUri.parse(tokens.pop())
                    except ConfigUriError as e:
                        self.context.print_exception(e)
                        return

                    self.start_broker(self.config_uri)
        except Exception as e:
            error = ExecutionError(f"Failed to execute start task. Reason: {e}")
            self.context.print_exception(error)
            raise error from e

        # only returns once something signals the shutdown
        self.wait_for_shutdown()

    def start_broker(self, config_uri: ConfigUri):
        """Load the configuration named by the URI and create the broker from it."""
        resource = resource_from_string(config_uri.scheme_specific_part)
        configuration = self.loader.load(resource)
        broker = self.broker_factory(configuration) if self.broker_factory else configuration
        self.started.append(broker)
        LOGGER.info(f"Started broker from {config_uri} ({resource})")
        return broker

    def wait_for_shutdown(self):
        """Block until the shutdown event is set, by SIGINT/SIGTERM or by its owner."""
        previous_handlers = {}
        if threading.current_thread() is threading.main_thread():
            for signum in (signal.SIGINT, signal.SIGTERM):
                previous_handlers[signum] = signal.signal(signum, self._on_signal)
        try:
            LOGGER.debug("Waiting for shutdown")
            self.shutdown_event.wait()
            LOGGER.info("Shutdown requested, start task finished")
        finally:
            for signum, handler in previous_handlers.items():
                signal.signal(signum, handler)

    def _on_signal(self, signum, frame):
        LOGGER.info(f"Received signal {signal.Signals(signum).name}")
        self.shutdown_event.set()
