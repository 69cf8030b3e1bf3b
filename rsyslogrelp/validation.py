"""Validation of the rsyslog RELP provider configuration."""

from __future__ import annotations

from enum import Enum
from typing import Any

from .field import FieldError, Path, invalid, not_supported, required
from .types import TLS, AuthMode, LoggingRule, RsyslogRelpConfig, TLSLib

_AVAILABLE_AUTH_MODES = frozenset(mode.value for mode in AuthMode)
_AVAILABLE_TLS_LIBS = frozenset(lib.value for lib in TLSLib)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _validate_target(target: str, path: Path) -> list[FieldError]:
    if not target:
        return [required(path, "target must not be empty")]
    return []


def _validate_port(port: int, path: Path) -> list[FieldError]:
    if port < 0:
        return [invalid(path, port, "port cannot be less than 0")]
    return []


def _validate_tls(tls: TLS | None, path: Path) -> list[FieldError]:
    if tls is None:
        return []

    errors: list[FieldError] = []
    if tls.enabled and not tls.secret_reference_name:
        errors.append(
            required(
                path.child("secretReferenceName"),
                "secretReferenceName must not be empty when tls is enabled",
            )
        )

    if tls.auth_mode is not None and _plain(tls.auth_mode) not in _AVAILABLE_AUTH_MODES:
        errors.append(
            not_supported(path.child("authMode"), tls.auth_mode, sorted(_AVAILABLE_AUTH_MODES))
        )

    if tls.tls_lib is not None and _plain(tls.tls_lib) not in _AVAILABLE_TLS_LIBS:
        errors.append(
            not_supported(path.child("tlsLib"), tls.tls_lib, sorted(_AVAILABLE_TLS_LIBS))
        )

    errors.extend(
        required(path.child("permittedPeer").index(i), "value cannot be empty")
        for i, peer in enumerate(tls.permitted_peer)
        if not peer
    )
    return errors


def _validate_logging_rules(rules: list[LoggingRule], path: Path) -> list[FieldError]:
    if not rules:
        return [required(path, "at least one logging rule is required")]
    return []


def validate_rsyslog_relp_config(config: RsyslogRelpConfig, path: Path | None) -> list[FieldError]:
    """Return every problem found in the configuration, in a fixed order.

    Field names in the errors are relative to the configuration itself;
    ``path`` is accepted for symmetry with other validators and not used.
    """
    return [
        *_validate_target(config.target, Path("target")),
        *_validate_port(config.port, Path("port")),
        *_validate_tls(config.tls, Path("tls")),
        *_validate_logging_rules(config.logging_rules, Path("loggingRules")),
    ]