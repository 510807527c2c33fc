"""
Console configuration, read from an optional YAML file and the environment
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .autoloader import DEFAULT_ENTRY_POINT_GROUP
from .errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "PLATFORM_CONSOLE_"
CONFIG_FILE_VARIABLE = f"{ENV_PREFIX}CONFIG"
TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class Config:
    """Settings of one console run.

    Values come from the YAML file named by PLATFORM_CONSOLE_CONFIG (if any), then
    from PLATFORM_CONSOLE_LOG_LEVEL, PLATFORM_CONSOLE_PLUGIN_GROUP and
    PLATFORM_CONSOLE_INTERACTIVE, which take precedence.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        self.log_level = "WARNING"
        self.plugin_group = DEFAULT_ENTRY_POINT_GROUP
        self.interactive = False

    def load_configuration(self) -> Config:
        config_file = self.environ.get(CONFIG_FILE_VARIABLE)
        if config_file:
            self._apply(self._read_file(Path(config_file)))

        self._apply({
            key: self.environ[f"{ENV_PREFIX}{key.upper()}"]
            for key in ("log_level", "plugin_group", "interactive")
            if f"{ENV_PREFIX}{key.upper()}" in self.environ
        })
        return self

    def _read_file(self, path: Path) -> dict:
        try:
            data = yaml.safe_load(path.read_text())
        except OSError as e:
            raise ConfigurationError(f"Failed to read {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse {path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping")
        return data

    def _apply(self, values: Mapping):
        if "log_level" in values:
            self.log_level = str(values["log_level"]).upper()
        if "plugin_group" in values:
            self.plugin_group = str(values["plugin_group"])
        if "interactive" in values:
            interactive = values["interactive"]
            self.interactive = interactive if isinstance(interactive, bool) else str(interactive).lower() in TRUE_VALUES

    def __repr__(self):
        return (f"Config(log_level={self.log_level!r}, plugin_group={self.plugin_group!r}, "
                f"interactive={self.interactive!r})")
