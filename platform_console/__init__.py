"""Administrative console: discovers commands at runtime and dispatches to them."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("platform-console")
except PackageNotFoundError:
    # running from a source checkout that was never installed
    __version__ = "0.0.0"
