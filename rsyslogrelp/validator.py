"""Admission validation of shoots that use the rsyslog RELP extension."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from .constants import EXTENSION_TYPE
from .field import Path, aggregate, required
from .scheme import decode_rsyslog_relp_config
from .types import RsyslogRelpConfig
from .validation import validate_rsyslog_relp_config

NAME = "validator"
"""Name of the validation webhook."""

SECRETS_VALIDATOR_NAME = "secrets." + NAME
"""Name of the secrets validator."""

WEBHOOK_PATH = "/webhooks/validate"
"""Path under which the validation webhook is served."""

SecretData = Mapping[str, Any]
SecretSource = Union[
    Callable[[str, str], SecretData],
    Mapping[tuple[str, str], SecretData],
]
SecretCheck = Callable[[str, str, SecretData], None]


@dataclass
class ResourceRef:
    """Reference to a resource by kind and name."""

    kind: str
    name: str
    api_version: str = ""


@dataclass
class NamedResourceReference:
    """A named reference to a resource of the shoot's project."""

    name: str
    resource_ref: ResourceRef


@dataclass
class Extension:
    """An extension enabled on a shoot."""

    type: str
    provider_config: str | bytes | Mapping[str, Any] | None = None
    disabled: bool | None = None


@dataclass
class Shoot:
    """The parts of a shoot that the validator looks at."""

    name: str
    namespace: str
    extensions: list[Extension] = field(default_factory=list)
    resources: list[NamedResourceReference] = field(default_factory=list)


class SecretNotFoundError(LookupError):
    """A referenced secret does not exist."""


def is_extension_enabled(ext: Extension | None) -> bool:
    """Whether the extension is present and not disabled."""
    if ext is None:
        return False
    if ext.disabled is not None:
        return not ext.disabled
    return True


def get_referenced_secret_name(shoot: Shoot | None, secret_reference_name: str) -> str:
    """Resolve a resource reference name of the shoot to the name of a secret."""
    if shoot is not None:
        for ref in shoot.resources:
            if ref.name == secret_reference_name:
                if ref.resource_ref.kind != "Secret":
                    raise ValueError(
                        "invalid referenced resource, expected kind Secret, not "
                        f"{ref.resource_ref.kind}: {ref.resource_ref.name}"
                    )
                return ref.resource_ref.name
    raise ValueError(f"missing or invalid referenced resource: {secret_reference_name}")


def _decode_provider_config(
    config: str | bytes | Mapping[str, Any] | None, path: Path
) -> RsyslogRelpConfig:
    if config is None:
        error = aggregate(
            [
                required(
                    path,
                    "Rsyslog relp configuration is required when using "
                    "gardener-extension-shoot-rsyslog-relp",
                )
            ]
        )
        assert error is not None
        raise error
    return decode_rsyslog_relp_config(config)


class ShootValidator:
    """Validates the rsyslog RELP extension configuration of shoots.

    ``secrets`` is either a mapping from ``(namespace, name)`` to secret data
    or a callable ``(namespace, name)`` returning the data and raising
    :class:`SecretNotFoundError` when the secret does not exist.
    ``secret_check``, if given, is called with ``(namespace, name, data)`` of
    the referenced TLS secret and raises when the secret is unusable.
    """

    def __init__(self, secrets: SecretSource, secret_check: SecretCheck | None = None) -> None:
        self._secrets = secrets
        self._secret_check = secret_check

    def _fetch_secret(self, namespace: str, name: str) -> SecretData:
        key = f"{namespace}/{name}"
        try:
            if isinstance(self._secrets, Mapping):
                try:
                    return self._secrets[(namespace, name)]
                except KeyError:
                    raise SecretNotFoundError(key) from None
            return self._secrets(namespace, name)
        except SecretNotFoundError:
            raise SecretNotFoundError(f"referenced secret {key} does not exist") from None
        except Exception as exc:
            raise RuntimeError(
                f"failed to get referenced secret {key} with error: {exc}"
            ) from exc

    def validate(self, new: Any, old: Any = None) -> None:
        """Raise if the shoot's rsyslog RELP configuration is not acceptable."""
        if not isinstance(new, Shoot):
            raise TypeError(f"wrong object type {type(new).__name__}")

        found = next(
            (
                (i, ext)
                for i, ext in enumerate(new.extensions)
                if ext.type == EXTENSION_TYPE
            ),
            None,
        )
        if found is None:
            return
        index, ext = found
        if not is_extension_enabled(ext):
            return

        provider_config_path = Path("spec", "extensions").index(index).child("providerConfig")
        config = _decode_provider_config(ext.provider_config, provider_config_path)

        error = aggregate(validate_rsyslog_relp_config(config, provider_config_path))
        if error is not None:
            raise error

        if config.tls is not None and config.tls.enabled:
            secret_name = get_referenced_secret_name(new, config.tls.secret_reference_name or "")
            data = self._fetch_secret(new.namespace, secret_name)
            if self._secret_check is not None:
                self._secret_check(new.namespace, secret_name, data)