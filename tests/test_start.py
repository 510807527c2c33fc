from __future__ import annotations

import signal
import threading

import pytest

from platform_console.autoloader import StaticRegistry
from platform_console.commands import start
from platform_console.commands.start import DEFAULT_CONFIG_URI, StartCommand
from platform_console.errors import ConfigUriError, ConfigurationError, ExecutionError
from platform_console.resources import ConfigurationLoader
from platform_console.shell import ShellCommand


@pytest.fixture(autouse=True)
def no_signal_handlers(monkeypatch):
    """Keep the test process's own SIGINT/SIGTERM handlers in place."""
    installed = []

    def fake_signal(signum, handler):
        installed.append((signum, handler))
        return f"previous-{signum.name}"

    monkeypatch.setattr(start.signal, "signal", fake_signal)
    return installed


@pytest.fixture
def shutdown_event() -> threading.Event:
    event = threading.Event()
    event.set()
    return event


@pytest.fixture
def command(context, shutdown_event) -> StartCommand:
    command = StartCommand(shutdown_event=shutdown_event)
    command.set_command_context(context)
    return command


def write_config(tmp_path, name, broker_name):
    path = tmp_path / name
    path.write_text(f"broker:\n  name: {broker_name}\n")
    return path


def test_starts_default_configuration(command, formatter, no_signal_handlers):
    command.execute([])

    assert str(command.config_uri) == DEFAULT_CONFIG_URI
    assert command.started[0]["broker"]["name"] == "localhost"
    assert formatter.calls == []
    assert [signum for signum, _ in no_signal_handlers] == [signal.SIGINT, signal.SIGTERM] * 2


def test_starts_every_given_configuration(command, tmp_path):
    first = write_config(tmp_path, "first.yaml", "first")
    second = write_config(tmp_path, "second.yaml", "second")

    command.execute([f"yaml:{first}", f"yaml:{second}"])

    assert [config["broker"]["name"] for config in command.started] == ["first", "second"]
    assert command.config_uri.scheme_specific_part == str(second)


def test_broker_factory_receives_configuration(context, shutdown_event, tmp_path):
    config = write_config(tmp_path, "broker.yaml", "factory")
    created = []

    def broker_factory(configuration):
        created.append(configuration)
        return f"broker-{configuration['broker']['name']}"

    command = StartCommand(broker_factory=broker_factory, shutdown_event=shutdown_event)
    command.set_command_context(context)
    command.execute([f"yaml:{config}"])

    assert created == [{"broker": {"name": "factory"}}]
    assert command.started == ["broker-factory"]


def test_invalid_uri_is_printed_and_stops_the_task(context, formatter, tmp_path, monkeypatch):
    config = write_config(tmp_path, "broker.yaml", "before")
    command = StartCommand(shutdown_event=threading.Event())
    command.set_command_context(context)
    waited = []
    monkeypatch.setattr(command, "wait_for_shutdown", lambda: waited.append(True))

    command.execute([f"yaml:{config}", "yaml:not a uri", f"yaml:{config}"])

    assert len(command.started) == 1
    error, = formatter.of("exception")
    assert isinstance(error, ConfigUriError)
    assert waited == []


def test_start_failure_is_printed_and_raised(command, formatter):
    with pytest.raises(ExecutionError, match="Failed to execute start task") as excinfo:
        command.execute(["yaml:does-not-exist.yaml"])

    assert isinstance(excinfo.value.__cause__, ConfigurationError)
    printed, = formatter.of("exception")
    assert printed is excinfo.value


def test_validation_strategy_is_used(context, shutdown_event, tmp_path):
    config = tmp_path / "queues.yaml"
    config.write_text("queues: [orders]\n")

    strict = StartCommand(shutdown_event=shutdown_event)
    strict.set_command_context(context)
    with pytest.raises(ExecutionError):
        strict.execute([f"yaml:{config}"])

    lenient = StartCommand(loader=ConfigurationLoader(validating=False), shutdown_event=shutdown_event)
    lenient.set_command_context(context)
    lenient.execute([f"yaml:{config}"])
    assert lenient.started == [{"queues": ["orders"]}]


def test_signal_sets_shutdown_event():
    command = StartCommand()

    command._on_signal(signal.SIGTERM, None)

    assert command.shutdown_event.is_set()


def test_wait_for_shutdown_blocks_until_signalled():
    command = StartCommand()
    finished = threading.Event()

    def wait():
        command.wait_for_shutdown()
        finished.set()

    waiter = threading.Thread(target=wait)
    waiter.start()
    assert not finished.wait(0.1)

    command.shutdown_event.set()
    waiter.join(timeout=5)
    assert finished.is_set()


def test_help_through_the_shell(context, formatter, shutdown_event):
    command = StartCommand(shutdown_event=shutdown_event)
    shell = ShellCommand(StaticRegistry([lambda: command]))
    shell.set_command_context(context)

    shell.execute(["start", "--help", "yaml:broker.yaml"])

    assert formatter.of("help") == [StartCommand.help_file]
    assert command.started == []


def test_previous_signal_handlers_are_restored(command, no_signal_handlers):
    command.execute([])
    command.execute([])

    assert no_signal_handlers == [
        (signal.SIGINT, command._on_signal),
        (signal.SIGTERM, command._on_signal),
        (signal.SIGINT, "previous-SIGINT"),
        (signal.SIGTERM, "previous-SIGTERM"),
    ] * 2
