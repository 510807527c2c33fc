"""
Configuration resources: URIs given to the start command, and where their configuration is read from
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import logging
import re
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import requests
import yaml

from .errors import ConfigUriError, ConfigurationError

LOGGER = logging.getLogger(__name__)

# Package holding the configuration files bundled with the console
CONF_PACKAGE = "platform_console.conf"
CLASSPATH_PREFIX = "classpath:"
URL_SCHEMES = frozenset({"http", "https", "file"})
URL_TIMEOUT_SECONDS = 30

_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
# RFC 3986 unreserved, reserved and percent characters
_URI_CHARACTERS = re.compile(r"[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]*")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclasses.dataclass(frozen=True)
class ConfigUri:
    """A parsed ``[scheme:]scheme-specific-part[#fragment]`` URI."""

    text: str
    scheme: Optional[str]
    scheme_specific_part: str
    fragment: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> ConfigUri:
        """Parse a URI, raising ConfigUriError when it is not syntactically valid."""
        if not text:
            raise ConfigUriError(text, "Expected scheme-specific part")
        if not _URI_CHARACTERS.fullmatch(text):
            raise ConfigUriError(text, "Illegal character in URI")
        if _BAD_ESCAPE.search(text):
            raise ConfigUriError(text, "Malformed escape pair in URI")

        body, _, fragment = text.partition("#")
        scheme = None
        colon = body.find(":")
        # a colon after the first '/', '?' belongs to the path, not to a scheme
        if colon >= 0 and not any(sep in body[:colon] for sep in "/?"):
            scheme = body[:colon]
            if not _SCHEME.fullmatch(scheme):
                raise ConfigUriError(text, "Expected scheme name")
            body = body[colon + 1:]
            if not body:
                raise ConfigUriError(text, "Expected scheme-specific part")

        return cls(
            text=text,
            scheme=scheme,
            scheme_specific_part=unquote(body),
            fragment=unquote(fragment) if "#" in text else None,
        )

    def __str__(self):
        return self.text


@dataclasses.dataclass(frozen=True)
class FileResource:
    path: Path

    def read_text(self) -> str:
        return self.path.read_text()

    def __str__(self):
        return f"file [{self.path}]"


@dataclasses.dataclass(frozen=True)
class UrlResource:
    url: str

    def read_text(self) -> str:
        parsed = urlparse(self.url)
        if parsed.scheme == "file":
            return Path(url2pathname(parsed.path)).read_text()
        response = requests.get(self.url, timeout=URL_TIMEOUT_SECONDS)
        response.raise_for_status()
        return response.text

    def __str__(self):
        return f"URL [{self.url}]"


@dataclasses.dataclass(frozen=True)
class PackageResource:
    """A configuration file bundled inside a Python package."""

    name: str
    package: str = CONF_PACKAGE

    def read_text(self) -> str:
        resource = importlib.resources.files(self.package).joinpath(self.name)
        if not resource.is_file():
            raise FileNotFoundError(f"{self} does not exist")
        return resource.read_text()

    def __str__(self):
        return f"package resource [{self.package}:{self.name}]"


def is_url(location: str) -> bool:
    return urlparse(location).scheme in URL_SCHEMES


def resource_from_string(location: str, package: str = CONF_PACKAGE):
    """Resolve a location: an existing file, then a URL, then a resource bundled in ``package``."""
    if Path(location).exists():
        return FileResource(Path(location))
    if is_url(location):
        return UrlResource(location)
    if location.startswith(CLASSPATH_PREFIX):
        location = location[len(CLASSPATH_PREFIX):]
    return PackageResource(location.lstrip("/"), package)


class ConfigurationLoader:
    """Reads broker configuration documents (YAML).

    Args:
        validating: when true, the document must be a mapping with a ``broker``
            mapping in it; anything else is rejected with ConfigurationError.
    """

    def __init__(self, validating: bool = True):
        self.validating = validating

    def load(self, resource) -> dict:
        LOGGER.debug(f"Using {resource}")
        try:
            document = yaml.safe_load(resource.read_text())
        except (OSError, requests.RequestException) as e:
            raise ConfigurationError(f"Failed to read {resource}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse {resource}: {e}") from e

        if document is None:
            document = {}
        if self.validating:
            self.validate(document, resource)
        return document

    def validate(self, document, resource):
        if not isinstance(document, dict):
            raise ConfigurationError(f"{resource} must contain a mapping, not {type(document).__name__}")
        if not isinstance(document.get("broker"), dict):
            raise ConfigurationError(f"{resource} has no 'broker' section")
