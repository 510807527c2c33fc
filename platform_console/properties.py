"""Named key/value properties set with ``-D<key>=<value>`` options."""

from __future__ import annotations

import logging
from collections.abc import Iterator, MutableMapping

LOGGER = logging.getLogger(__name__)


class SystemProperties(MutableMapping[str, str]):
    """Properties shared by every command of one process.

    Commands reach it through ``CommandContext.properties``. It is a plain
    mapping and never writes to ``os.environ``.
    """

    def __init__(self, initial=None):
        self._values: dict[str, str] = dict(initial or {})

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __setitem__(self, key: str, value: str) -> None:
        LOGGER.debug(f"Setting property {key}={value!r}")
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self):
        return f"{type(self).__name__}({self._values!r})"


# Process-wide instance used by the console entry point
system_properties = SystemProperties()
