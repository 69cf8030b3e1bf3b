"""Configuration types of the rsyslog RELP extension."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class AuthMode(str, Enum):
    """Mutual authentication mode of the RELP connection."""

    NAME = "name"
    FINGERPRINT = "fingerprint"


class TLSLib(str, Enum):
    """TLS library used by librelp on the shoot nodes."""

    OPENSSL = "openssl"
    GNUTLS = "gnutls"


@dataclass
class TLS:
    """Options for the TLS connection to the target server.

    ``auth_mode`` and ``tls_lib`` may hold any string so that unsupported
    values can be reported by validation.
    """

    enabled: bool = False
    secret_reference_name: str | None = None
    permitted_peer: list[str] = field(default_factory=list)
    auth_mode: AuthMode | str | None = None
    tls_lib: TLSLib | str | None = None


@dataclass
class LoggingRule:
    """Selects which logs are sent to the target server."""

    program_names: list[str] = field(default_factory=list)
    severity: int = 0


@dataclass
class RsyslogRelpConfig:
    """Provider configuration of the rsyslog RELP extension."""

    target: str = ""
    port: int = 0
    tls: TLS | None = None
    logging_rules: list[LoggingRule] = field(default_factory=list)
    rebind_interval: int | None = None
    timeout: int | None = None
    resume_retry_count: int | None = None
    report_suspension_continuation: bool | None = None