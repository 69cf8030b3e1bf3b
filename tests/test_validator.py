import pytest

from rsyslogrelp.field import ErrorType, ValidationError
from rsyslogrelp.scheme import NotRegisteredError
from rsyslogrelp.validator import (
    Extension,
    NamedResourceReference,
    ResourceRef,
    SecretNotFoundError,
    Shoot,
    ShootValidator,
    get_referenced_secret_name,
    is_extension_enabled,
)

BASE_SPEC = """
apiVersion: rsyslog-relp.extensions.gardener.cloud/v1alpha1
kind: RsyslogRelpConfig
target: "localhost"
port: 10250
loggingRules:
- severity: 0
  programNames: ["kubelet", "audisp-syslog"]"""

TLS_SPEC = """
tls:
  enabled: true
  secretReferenceName: rsyslog-secret"""

CERT_BUNDLE = {"ca": b"data", "crt": b"data", "key": b"secret"}


def _shoot():
    return Shoot(
        name="foo",
        namespace="bar",
        extensions=[Extension(type="shoot-rsyslog-relp"), Extension(type="some-other-extension")],
    )


def _tls_shoot(extra=""):
    shoot = _shoot()
    shoot.extensions[0].provider_config = BASE_SPEC + TLS_SPEC + extra
    shoot.resources = [
        NamedResourceReference(
            name="rsyslog-secret",
            resource_ref=ResourceRef(kind="Secret", name="rsyslog-secret", api_version="v1"),
        )
    ]
    return shoot


def _single(exc_info):
    errors = list(exc_info.value)
    assert len(errors) == 1
    error = errors[0]
    return error.type, error.field, error.bad_value, error.detail


@pytest.fixture
def validator():
    return ShootValidator({})


@pytest.fixture
def populated_validator():
    return ShootValidator({("bar", "rsyslog-secret"): CERT_BUNDLE})


def test_disabled_extension_is_ignored(validator):
    shoot = _shoot()
    shoot.extensions[0].disabled = True
    assert validator.validate(shoot, None) is None


def test_shoot_without_extension_is_ignored(validator):
    shoot = Shoot(name="foo", namespace="bar", extensions=[Extension(type="other")])
    assert validator.validate(shoot, None) is None


def test_missing_provider_config(validator):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate(_shoot(), None)
    assert "Rsyslog relp configuration is required when using gardener-extension-shoot-rsyslog-relp" in str(
        exc_info.value
    )
    assert exc_info.value.errors[0].field == "spec.extensions[0].providerConfig"


def test_wrong_object_type(validator):
    with pytest.raises(TypeError, match="wrong object type"):
        validator.validate("not a shoot", None)


def test_wrong_kind(validator):
    shoot = _shoot()
    shoot.extensions[0].provider_config = (
        "\napiVersion: rsyslog-relp.extensions.gardener.cloud/v1alpha1\nkind: Bar"
    )
    with pytest.raises(NotRegisteredError) as exc_info:
        validator.validate(shoot, None)
    assert exc_info.value.kind == "Bar"


def test_missing_target(validator):
    shoot = _shoot()
    shoot.extensions[0].provider_config = """
apiVersion: rsyslog-relp.extensions.gardener.cloud/v1alpha1
kind: RsyslogRelpConfig
port: 10250
loggingRules:
- severity: 0
  programNames: ["kubelet", "audisp-syslog"]"""
    with pytest.raises(ValidationError) as exc_info:
        validator.validate(shoot, None)
    assert _single(exc_info) == (ErrorType.REQUIRED, "target", "", "target must not be empty")


def test_negative_port(validator):
    shoot = _shoot()
    shoot.extensions[0].provider_config = """
apiVersion: rsyslog-relp.extensions.gardener.cloud/v1alpha1
kind: RsyslogRelpConfig
target: "localhost"
port: -1
loggingRules:
- severity: 0
  programNames: ["kubelet", "audisp-syslog"]"""
    with pytest.raises(ValidationError) as exc_info:
        validator.validate(shoot, None)
    assert _single(exc_info) == (ErrorType.INVALID, "port", -1, "port cannot be less than 0")


def test_no_logging_rules(validator):
    shoot = _shoot()
    shoot.extensions[0].provider_config = """
apiVersion: rsyslog-relp.extensions.gardener.cloud/v1alpha1
kind: RsyslogRelpConfig
target: "localhost"
port: 10250"""
    with pytest.raises(ValidationError) as exc_info:
        validator.validate(shoot, None)
    assert _single(exc_info) == (
        ErrorType.REQUIRED,
        "loggingRules",
        "",
        "at least one logging rule is required",
    )


def test_all_optional_settings(validator):
    shoot = _shoot()
    shoot.extensions[0].provider_config = BASE_SPEC + """
timeout: 60
rebindInterval: 1000
resumeRetryCount: 10
reportSuspensionContinuation: true"""
    assert validator.validate(shoot, None) is None


def test_referenced_secret_missing(validator):
    with pytest.raises(SecretNotFoundError, match="referenced secret bar/rsyslog-secret does not exist"):
        validator.validate(_tls_shoot(), None)


def test_referenced_secret_missing_from_callable():
    def lookup(namespace, name):
        raise SecretNotFoundError(name)

    with pytest.raises(SecretNotFoundError, match="referenced secret bar/rsyslog-secret does not exist"):
        ShootValidator(lookup).validate(_tls_shoot(), None)


def test_secret_lookup_failure_is_wrapped():
    def lookup(namespace, name):
        raise OSError("connection refused")

    with pytest.raises(RuntimeError, match="failed to get referenced secret bar/rsyslog-secret"):
        ShootValidator(lookup).validate(_tls_shoot(), None)


def test_invalid_secret_is_reported():
    calls = []

    def check(namespace, name, data):
        calls.append((namespace, name, dict(data)))
        raise ValueError("secret bar/rsyslog-secret is missing ca value")

    key_only = {"key": b"secret"}
    store = {("bar", "rsyslog-secret"): key_only}
    with pytest.raises(ValueError, match="secret bar/rsyslog-secret is missing ca value"):
        ShootValidator(store, check).validate(_tls_shoot(), None)
    assert calls == [("bar", "rsyslog-secret", key_only)]


@pytest.mark.parametrize(
    "extra",
    [
        '\n  authMode: "name"\n  ',
        '\n  authMode: "fingerprint"\n  ',
        '\n  permittedPeer:\n  - "localhost"\n  ',
    ],
)
def test_valid_tls_settings(populated_validator, extra):
    assert populated_validator.validate(_tls_shoot(extra), None) is None


def test_invalid_auth_mode(populated_validator):
    with pytest.raises(ValidationError) as exc_info:
        populated_validator.validate(_tls_shoot('\n  authMode: "foo"\n  '), None)
    assert _single(exc_info) == (
        ErrorType.NOT_SUPPORTED,
        "tls.authMode",
        "foo",
        'supported values: "fingerprint", "name"',
    )


def test_empty_permitted_peer(populated_validator):
    with pytest.raises(ValidationError) as exc_info:
        populated_validator.validate(
            _tls_shoot('\n  permittedPeer:\n  - "localhost"\n  - ""\n  '), None
        )
    assert _single(exc_info) == (
        ErrorType.REQUIRED,
        "tls.permittedPeer[1]",
        "",
        "value cannot be empty",
    )


@pytest.mark.parametrize(
    "ext, expected",
    [
        (None, False),
        (Extension(type="x"), True),
        (Extension(type="x", disabled=False), True),
        (Extension(type="x", disabled=True), False),
    ],
)
def test_is_extension_enabled(ext, expected):
    assert is_extension_enabled(ext) is expected


def test_get_referenced_secret_name_resolves():
    shoot = _tls_shoot()
    shoot.resources[0].resource_ref.name = "actual-resource"
    assert get_referenced_secret_name(shoot, "rsyslog-secret") == "actual-resource"


def test_get_referenced_secret_name_wrong_kind():
    shoot = _tls_shoot()
    shoot.resources[0].resource_ref.kind = "ConfigMap"
    with pytest.raises(ValueError, match="expected kind Secret, not ConfigMap: rsyslog-secret"):
        get_referenced_secret_name(shoot, "rsyslog-secret")


def test_get_referenced_secret_name_missing():
    with pytest.raises(ValueError, match="missing or invalid referenced resource: nope"):
        get_referenced_secret_name(_shoot(), "nope")
    with pytest.raises(ValueError, match="missing or invalid referenced resource: nope"):
        get_referenced_secret_name(None, "nope")


def test_tls_resource_of_wrong_kind_fails_validation(populated_validator):
    shoot = _tls_shoot()
    shoot.resources[0].resource_ref.kind = "ConfigMap"
    with pytest.raises(ValueError, match="expected kind Secret"):
        populated_validator.validate(shoot, None)