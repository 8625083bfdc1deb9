"""Configuration management for powervs-client.

This module provides the package constants and configuration loading for
the client bootstrap and the ``powervs`` CLI.
"""
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


# Default timeout for Power VS operations such as create/delete instance
TIMEOUT = timedelta(hours=1)

# Namespace and secret name the node controllers read the API key from
DEFAULT_CREDENTIAL_NAMESPACE = "openshift-machine-api"
DEFAULT_CREDENTIAL_SECRET = "powervs-credentials"

# Key inside the secret data holding the API key
API_KEY_SECRET_KEY = "ibmcloud_api_key"

# The power-iaas service type of IBM Cloud
POWER_SERVICE_TYPE = "power-iaas"

DEFAULT_IAM_ENDPOINT = "https://iam.cloud.ibm.com"
DEFAULT_RESOURCE_CONTROLLER_ENDPOINT = "https://resource-controller.cloud.ibm.com"

DEFAULT_API_GENERATION = 2

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("", "0", "false", "no", "off")


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


@dataclass
class PowerVSConfig:
    """Configuration for powervs-client operations.

    Attributes:
        credential_secret: Kubernetes secret holding the API key
        credential_namespace: Namespace of the credentials secret
        cloud_instance_id: Power VS service instance (GUID) to bind to
        api_key: API key for account-only operations (skips the secret)
        iam_endpoint: IAM token service base URL
        resource_controller_endpoint: Resource controller base URL
        debug: Log every Power VS request and response
    """

    credential_secret: str = DEFAULT_CREDENTIAL_SECRET
    credential_namespace: str = DEFAULT_CREDENTIAL_NAMESPACE
    cloud_instance_id: Optional[str] = None
    api_key: Optional[str] = None
    iam_endpoint: str = DEFAULT_IAM_ENDPOINT
    resource_controller_endpoint: str = DEFAULT_RESOURCE_CONTROLLER_ENDPOINT
    debug: bool = False

    def __repr__(self) -> str:
        # Never render the API key
        api_key = "***" if self.api_key else None
        return (
            f"PowerVSConfig(credential_secret={self.credential_secret!r}, "
            f"credential_namespace={self.credential_namespace!r}, "
            f"cloud_instance_id={self.cloud_instance_id!r}, api_key={api_key!r}, "
            f"iam_endpoint={self.iam_endpoint!r}, "
            f"resource_controller_endpoint={self.resource_controller_endpoint!r}, "
            f"debug={self.debug!r})"
        )

    def validate(self, require_instance: bool = True) -> list[str]:
        """Validate configuration and return list of errors.

        Args:
            require_instance: Whether a cloud instance ID is needed

        Returns:
            List of error messages, empty if valid
        """
        errors = []

        if require_instance and not self.cloud_instance_id:
            errors.append("Cloud instance ID is required")
        if not self.credential_secret and not self.api_key:
            errors.append("Either a credentials secret or an API key is required")
        for name in ("iam_endpoint", "resource_controller_endpoint"):
            value = getattr(self, name)
            if not value.startswith(("https://", "http://")):
                errors.append(f"Invalid {name}: {value}")

        return errors


def _parse_bool(name: str, value: str) -> bool:
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def load_config(
    secret_override: Optional[str] = None,
    namespace_override: Optional[str] = None,
    cloud_instance_id_override: Optional[str] = None,
    debug_override: Optional[bool] = None,
) -> PowerVSConfig:
    """Load configuration from environment variables.

    Environment variables:
        POWERVS_CREDENTIALS_SECRET: Secret name (default: powervs-credentials)
        POWERVS_CREDENTIALS_NAMESPACE: Secret namespace (default: openshift-machine-api)
        POWERVS_CLOUD_INSTANCE_ID: Power VS cloud instance ID
        POWERVS_DEBUG: Log Power VS requests (true/false)
        IBMCLOUD_API_KEY: API key for account-only operations
        IBMCLOUD_IAM_ENDPOINT: IAM base URL (default: https://iam.cloud.ibm.com)
        IBMCLOUD_RC_ENDPOINT: Resource controller base URL

    Args:
        secret_override: Override secret name from CLI (takes precedence over env)
        namespace_override: Override namespace from CLI
        cloud_instance_id_override: Override cloud instance ID from CLI
        debug_override: Override debug flag from CLI

    Returns:
        PowerVSConfig instance

    Raises:
        ConfigError: If configuration values are invalid
    """
    secret = secret_override or os.environ.get(
        "POWERVS_CREDENTIALS_SECRET", DEFAULT_CREDENTIAL_SECRET
    )
    namespace = namespace_override or os.environ.get(
        "POWERVS_CREDENTIALS_NAMESPACE", DEFAULT_CREDENTIAL_NAMESPACE
    )
    cloud_instance_id = cloud_instance_id_override or os.environ.get("POWERVS_CLOUD_INSTANCE_ID")

    if debug_override is not None:
        debug = debug_override
    else:
        debug = _parse_bool("POWERVS_DEBUG", os.environ.get("POWERVS_DEBUG", ""))

    config = PowerVSConfig(
        credential_secret=secret,
        credential_namespace=namespace,
        cloud_instance_id=cloud_instance_id,
        api_key=os.environ.get("IBMCLOUD_API_KEY"),
        iam_endpoint=os.environ.get("IBMCLOUD_IAM_ENDPOINT", DEFAULT_IAM_ENDPOINT).rstrip("/"),
        resource_controller_endpoint=os.environ.get(
            "IBMCLOUD_RC_ENDPOINT", DEFAULT_RESOURCE_CONTROLLER_ENDPOINT
        ).rstrip("/"),
        debug=debug,
    )

    errors = config.validate(require_instance=False)
    if errors:
        raise ConfigError("; ".join(errors))

    return config
