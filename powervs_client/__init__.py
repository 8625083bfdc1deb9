"""IBM Cloud Power Virtual Server client facade.

Note: the CLI is NOT imported here so the library can be used without it:
    from powervs_client.cli import cli
"""
from loguru import logger

from powervs_client.base import Client
from powervs_client.client import (
    INSTANCE_STATE_ACTIVE,
    INSTANCE_STATE_BUILD,
    INSTANCE_STATE_SHUTOFF,
    PowerVSClient,
    format_provider_id,
    new_client_minimal,
    new_validated_client,
)
from powervs_client.errors import (
    AuthenticationError,
    IdentityDecodeError,
    InstanceNotFoundError,
    PowerVSError,
    ProviderError,
    SecretInvalidError,
    SecretNotFoundError,
    SessionBindError,
    SessionStageError,
    UnknownRegionError,
)

# Silent unless configure_logging() is called
logger.disable("powervs_client")

__all__ = [
    "Client",
    "PowerVSClient",
    "new_validated_client",
    "new_client_minimal",
    "format_provider_id",
    "INSTANCE_STATE_ACTIVE",
    "INSTANCE_STATE_BUILD",
    "INSTANCE_STATE_SHUTOFF",
    "PowerVSError",
    "SecretNotFoundError",
    "SecretInvalidError",
    "AuthenticationError",
    "IdentityDecodeError",
    "UnknownRegionError",
    "SessionBindError",
    "SessionStageError",
    "InstanceNotFoundError",
    "ProviderError",
]
