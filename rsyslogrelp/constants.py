"""Names shared across the rsyslog RELP extension."""

EXTENSION_TYPE = "shoot-rsyslog-relp"
"""Name of the extension type."""

SERVICE_NAME = "shoot-rsyslog-relp"
"""Name of the service."""

_EXTENSION_SERVICE_NAME = "extension-" + SERVICE_NAME

MANAGED_RESOURCE_NAME = _EXTENSION_SERVICE_NAME + "-shoot"
"""Name of the managed resource holding the shoot resources."""

MANAGED_RESOURCE_NAME_CONFIG_CLEANER = _EXTENSION_SERVICE_NAME + "-configuration-cleaner-shoot"
"""Name of the managed resource that removes the rsyslog config from shoot nodes."""

PAUSE_CONTAINER_IMAGE_NAME = "pause-container"
"""Name of the pause container image."""

ALPINE_IMAGE_NAME = "alpine"
"""Name of the alpine image."""