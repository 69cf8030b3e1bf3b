"""Reading and writing the extension's provider configuration document."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

import yaml

from .types import TLS, AuthMode, LoggingRule, RsyslogRelpConfig, TLSLib

GROUP_NAME = "rsyslog-relp.extensions.gardener.cloud"
VERSION = "v1alpha1"
API_VERSION = f"{GROUP_NAME}/{VERSION}"
KIND = "RsyslogRelpConfig"
SCHEME_NAME = "rsyslogrelp"

_T = TypeVar("_T")


class DecodeError(ValueError):
    """A document could not be decoded."""


class NotRegisteredError(DecodeError):
    """The document's kind and version are not known."""

    def __init__(self, kind: str, version: str, scheme: str = SCHEME_NAME) -> None:
        self.kind = kind
        self.version = version
        self.scheme = scheme
        super().__init__(
            f'no kind "{kind}" is registered for version "{version}" in scheme "{scheme}"'
        )


def _load_document(data: str | bytes | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(data, Mapping):
        return dict(data)
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"document is not valid UTF-8: {exc}") from exc
    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise DecodeError(f"invalid document: {exc}") from exc
    if not isinstance(document, dict):
        raise DecodeError("document must be a mapping")
    return document


def _check_type_meta(
    document: Mapping[str, Any], api_version: str, kind: str, scheme: str
) -> None:
    found_kind = document.get("kind")
    found_version = document.get("apiVersion")
    if not found_kind:
        raise DecodeError("Object 'Kind' is missing")
    if not found_version:
        raise DecodeError("Object 'apiVersion' is missing")
    if not isinstance(found_kind, str) or not isinstance(found_version, str):
        raise DecodeError("'apiVersion' and 'kind' must be strings")
    if found_version != api_version or found_kind != kind:
        raise NotRegisteredError(found_kind, found_version, scheme)


def _reject_unknown(document: Mapping[str, Any], allowed: frozenset[str], prefix: str) -> None:
    unknown = sorted(str(key) for key in document if key not in allowed)
    if unknown:
        problems = ", ".join(f'unknown field "{prefix}{key}"' for key in unknown)
        raise DecodeError(f"strict decoding error: {problems}")


def _string(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"{where}: expected a string, got {value!r}")
    return value


def _integer(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{where}: expected an integer, got {value!r}")
    return value


def _boolean(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"{where}: expected a boolean, got {value!r}")
    return value


def _string_list(value: Any, where: str) -> list[str]:
    if not isinstance(value, list):
        raise DecodeError(f"{where}: expected a list, got {value!r}")
    return [_string(item, f"{where}[{i}]") for i, item in enumerate(value)]


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DecodeError(f"{where}: expected a mapping, got {value!r}")
    return value


def _get(
    document: Mapping[str, Any],
    key: str,
    convert: Callable[[Any, str], _T],
    default: Any,
    prefix: str = "",
) -> Any:
    value = document.get(key)
    if value is None:
        return default() if callable(default) else default
    return convert(value, prefix + key)


def _auth_mode(value: Any, where: str) -> AuthMode | str:
    text = _string(value, where)
    try:
        return AuthMode(text)
    except ValueError:
        return text


def _tls_lib(value: Any, where: str) -> TLSLib | str:
    text = _string(value, where)
    try:
        return TLSLib(text)
    except ValueError:
        return text


_CONFIG_FIELDS = frozenset(
    {
        "apiVersion",
        "kind",
        "target",
        "port",
        "loggingRules",
        "tls",
        "rebindInterval",
        "timeout",
        "resumeRetryCount",
        "reportSuspensionContinuation",
    }
)
_TLS_FIELDS = frozenset({"enabled", "secretReferenceName", "permittedPeer", "authMode", "tlsLib"})
_RULE_FIELDS = frozenset({"programNames", "severity"})


def _decode_tls(value: Any, where: str) -> TLS:
    document = _mapping(value, where)
    prefix = where + "."
    _reject_unknown(document, _TLS_FIELDS, prefix)
    return TLS(
        enabled=_get(document, "enabled", _boolean, False, prefix),
        secret_reference_name=_get(document, "secretReferenceName", _string, None, prefix),
        permitted_peer=_get(document, "permittedPeer", _string_list, list, prefix),
        auth_mode=_get(document, "authMode", _auth_mode, None, prefix),
        tls_lib=_get(document, "tlsLib", _tls_lib, None, prefix),
    )


def _decode_rule(value: Any, where: str) -> LoggingRule:
    document = _mapping(value, where)
    prefix = where + "."
    _reject_unknown(document, _RULE_FIELDS, prefix)
    return LoggingRule(
        program_names=_get(document, "programNames", _string_list, list, prefix),
        severity=_get(document, "severity", _integer, 0, prefix),
    )


def _decode_rules(value: Any, where: str) -> list[LoggingRule]:
    if not isinstance(value, list):
        raise DecodeError(f"{where}: expected a list, got {value!r}")
    return [_decode_rule(item, f"{where}[{i}]") for i, item in enumerate(value)]


def decode_rsyslog_relp_config(data: str | bytes | Mapping[str, Any]) -> RsyslogRelpConfig:
    """Decode a YAML or JSON provider configuration, rejecting unknown fields."""
    document = _load_document(data)
    _check_type_meta(document, API_VERSION, KIND, SCHEME_NAME)
    _reject_unknown(document, _CONFIG_FIELDS, "")
    return RsyslogRelpConfig(
        target=_get(document, "target", _string, ""),
        port=_get(document, "port", _integer, 0),
        tls=_get(document, "tls", _decode_tls, None),
        logging_rules=_get(document, "loggingRules", _decode_rules, list),
        rebind_interval=_get(document, "rebindInterval", _integer, None),
        timeout=_get(document, "timeout", _integer, None),
        resume_retry_count=_get(document, "resumeRetryCount", _integer, None),
        report_suspension_continuation=_get(
            document, "reportSuspensionContinuation", _boolean, None
        ),
    )


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, (AuthMode, TLSLib)) else value


def _encode_tls(tls: TLS) -> dict[str, Any]:
    result: dict[str, Any] = {"enabled": tls.enabled}
    if tls.secret_reference_name is not None:
        result["secretReferenceName"] = tls.secret_reference_name
    if tls.permitted_peer:
        result["permittedPeer"] = list(tls.permitted_peer)
    if tls.auth_mode is not None:
        result["authMode"] = _plain(tls.auth_mode)
    if tls.tls_lib is not None:
        result["tlsLib"] = _plain(tls.tls_lib)
    return result


def _encode_rule(rule: LoggingRule) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if rule.program_names:
        result["programNames"] = list(rule.program_names)
    result["severity"] = rule.severity
    return result


def encode_rsyslog_relp_config(config: RsyslogRelpConfig) -> str:
    """Encode a provider configuration as compact JSON, omitting unset optional fields."""
    document: dict[str, Any] = {
        "apiVersion": API_VERSION,
        "kind": KIND,
        "target": config.target,
        "port": config.port,
    }
    if config.logging_rules:
        document["loggingRules"] = [_encode_rule(rule) for rule in config.logging_rules]
    if config.tls is not None:
        document["tls"] = _encode_tls(config.tls)
    optional = {
        "rebindInterval": config.rebind_interval,
        "timeout": config.timeout,
        "resumeRetryCount": config.resume_retry_count,
        "reportSuspensionContinuation": config.report_suspension_continuation,
    }
    document.update({key: value for key, value in optional.items() if value is not None})
    return json.dumps(document, separators=(",", ":"))