"""Error types for powervs-client.

Every failure raised by the package derives from PowerVSError. Bootstrap
failures carry the last good ClientSession snapshot in ``session`` so callers
can inspect how far construction got before discarding it.
"""
from typing import Optional


class PowerVSError(Exception):
    """Base error with an actionable message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.session = None


class SecretNotFoundError(PowerVSError):
    """The credentials secret does not exist."""

    @classmethod
    def for_secret(cls, namespace: str, name: str) -> "SecretNotFoundError":
        return cls(f"powervs credentials secret {namespace}/{name} not found")


class SecretInvalidError(PowerVSError):
    """The credentials secret exists but lacks the API key."""

    @classmethod
    def missing_key(cls, namespace: str, name: str, key: str) -> "SecretInvalidError":
        return cls(
            f"invalid secret for powervs credentials: {namespace}/{name} "
            f"has no '{key}' entry"
        )


class AuthenticationError(PowerVSError):
    """The API key could not be exchanged for an access token."""


class IdentityDecodeError(PowerVSError):
    """The access token could not be decoded into an Identity."""

    @classmethod
    def missing_claim(cls, claim: str) -> "IdentityDecodeError":
        return cls(f"access token has no usable '{claim}' claim")


class UnknownRegionError(PowerVSError):
    """The raw region identifier is not in the region table."""

    @classmethod
    def for_region(cls, region_id: str) -> "UnknownRegionError":
        return cls(
            f"region not found for the zone '{region_id}'. "
            "Add it to powervs_client.ibmcloud.regions.REGIONS."
        )


class SessionBindError(PowerVSError):
    """The region-bound Power session could not be established."""


class SessionStageError(PowerVSError):
    """A session transition or operation was used at the wrong stage."""


class InstanceNotFoundError(PowerVSError):
    """No PVM instance matched a name lookup."""

    def __init__(self, message: str = "instance not found"):
        super().__init__(message)


class ProviderError(PowerVSError):
    """A provider call failed; passed through to the caller."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
