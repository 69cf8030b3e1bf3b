# rsyslogrelp

A small library for describing, decoding and validating the configuration
used to forward node logs to a remote rsyslog server over RELP, and for
checking cluster descriptions ("shoots") that turn such forwarding on.

## Modules

- `rsyslogrelp.types` – the configuration model: `RsyslogRelpConfig`,
  `TLS`, `LoggingRule`, and the `AuthMode` (`name`, `fingerprint`) and
  `TLSLib` (`openssl`, `gnutls`) enums. `TLS.auth_mode` and `TLS.tls_lib`
  also accept arbitrary strings so that unsupported values can be reported
  by validation.
- `rsyslogrelp.scheme` – `decode_rsyslog_relp_config` reads a YAML or JSON
  document (as `str`, `bytes` or a mapping) of kind `RsyslogRelpConfig` in
  `rsyslog-relp.extensions.gardener.cloud/v1alpha1`. Unknown fields and
  wrongly typed values raise `DecodeError`; an unknown kind or version
  raises `NotRegisteredError`. `encode_rsyslog_relp_config` writes a config
  back as compact JSON, leaving out optional fields that are unset.
- `rsyslogrelp.validation` – `validate_rsyslog_relp_config(config, path)`
  returns a list of `FieldError` values: an empty target, a negative port,
  TLS enabled without `secretReferenceName`, an unsupported `authMode` or
  `tlsLib`, empty entries in `permittedPeer`, and missing logging rules.
  Field names in the errors are relative to the config (`target`,
  `tls.authMode`, `tls.permittedPeer[1]`, ...); the `path` argument is not
  used.
- `rsyslogrelp.field` – field paths (`Path` with `child` and `index`),
  `FieldError` and `ErrorType`, the constructors `required`, `invalid` and
  `not_supported`, and `aggregate`, which turns a list of errors into a
  single `ValidationError` (or `None` when the list is empty).
- `rsyslogrelp.validator` – `ShootValidator` and the shoot model it checks
  (`Shoot`, `Extension`, `NamedResourceReference`, `ResourceRef`), plus
  `is_extension_enabled` and `get_referenced_secret_name`.
- `rsyslogrelp.config` – `Configuration`, `decode_configuration` and
  `ConfigOptions`, which reads and decodes the service's own configuration
  file from `config_location`.
- `rsyslogrelp.constants` – shared names such as `EXTENSION_TYPE`
  (`"shoot-rsyslog-relp"`).

## Validating a shoot

`ShootValidator(secrets, secret_check=None).validate(shoot)`:

1. raises `TypeError` if the object is not a `Shoot`;
2. does nothing if the shoot has no `shoot-rsyslog-relp` extension or it is
   disabled;
3. raises `ValidationError` if the extension has no provider config, and
   `DecodeError` / `NotRegisteredError` if it cannot be decoded;
4. raises `ValidationError` holding every problem the config validation
   found;
5. when TLS is enabled, resolves `secretReferenceName` through the shoot's
   `resources` (raising `ValueError` if the reference is missing or not a
   `Secret`), looks the secret up in `secrets` and, if `secret_check` is
   given, calls it with `(namespace, name, data)`.

`secrets` is either a mapping from `(namespace, name)` to secret data or a
callable `(namespace, name)` that returns the data and raises
`SecretNotFoundError` when there is none. A missing secret raises
`SecretNotFoundError("referenced secret <namespace>/<name> does not exist")`;
any other failure of the lookup is raised as `RuntimeError`. The validator
itself does not inspect the secret's contents; that is left to
`secret_check`.

## Example

```python
from rsyslogrelp.scheme import decode_rsyslog_relp_config
from rsyslogrelp.validation import validate_rsyslog_relp_config
from rsyslogrelp.field import Path

config = decode_rsyslog_relp_config(b"""
apiVersion: rsyslog-relp.extensions.gardener.cloud/v1alpha1
kind: RsyslogRelpConfig
target: localhost
port: -1
loggingRules:
- severity: 0
  programNames: ["kubelet"]
""")

for error in validate_rsyslog_relp_config(config, Path("")):
    print(error)
# port: Invalid value: -1: port cannot be less than 0
```

## What this package does not do

It is a library only. It has no command-line program, does not run an
admission webhook server or a controller, does not talk to a cluster, and
does not write rsyslog configuration onto nodes. Callers supply shoots and
secret data themselves.

## Running the tests

```
pip install ".[test]"
pytest
```