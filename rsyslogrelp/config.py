"""Configuration of the extension controller and its command-line options."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .scheme import _check_type_meta, _load_document

GROUP_NAME = "rsyslog-relp.extensions.config.gardener.cloud"
VERSION = "v1alpha1"
API_VERSION = f"{GROUP_NAME}/{VERSION}"
KIND = "Configuration"
SCHEME_NAME = "rsyslogrelp-config"


@dataclass(frozen=True)
class Configuration:
    """Configuration of the rsyslog RELP extension."""


def decode_configuration(data: str | bytes | Mapping[str, Any]) -> Configuration:
    """Decode a configuration document; unknown fields are ignored."""
    document = _load_document(data)
    _check_type_meta(document, API_VERSION, KIND, SCHEME_NAME)
    return Configuration()


@dataclass
class ConfigOptions:
    """Options pointing at the extension configuration file."""

    config_location: str = ""
    _config: Configuration | None = field(default=None, init=False, repr=False, compare=False)

    def complete(self) -> None:
        """Read and decode the configuration file."""
        if not self.config_location:
            raise ValueError("config location is not set")
        data = Path(self.config_location).read_bytes()
        self._config = decode_configuration(data)

    def completed(self) -> Configuration:
        """Return the decoded configuration; ``complete`` must have succeeded."""
        if self._config is None:
            raise RuntimeError("options have not been completed")
        return self._config