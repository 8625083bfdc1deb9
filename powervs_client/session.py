"""Staged construction of a Power VS client session.

A ClientSession is an immutable snapshot. Each transition function checks
the current stage and returns a new snapshot one stage further along:

    UNBOUND -> ACCOUNT_ONLY -> AUTHENTICATED -> IDENTIFIED
            -> REGION_BOUND -> FULLY_BOUND

Minimal clients stop at ACCOUNT_ONLY. Nothing is ever rolled back; a
snapshot that failed to advance must be discarded.
"""
from dataclasses import dataclass, replace
from datetime import timedelta
from enum import Enum
from typing import Optional

from loguru import logger

from powervs_client.config import TIMEOUT
from powervs_client.errors import SessionStageError
from powervs_client.ibmcloud.iam import IAMSession
from powervs_client.ibmcloud.identity import Identity, decode_identity
from powervs_client.ibmcloud.power import (
    ImageClient,
    InstanceClient,
    NetworkClient,
    PowerSession,
    bind_power_session,
)
from powervs_client.ibmcloud.regions import ResourceLocation, resolve_location
from powervs_client.ibmcloud.resource_controller import ResourceControllerClient


class SessionStage(str, Enum):
    """How far a ClientSession has been built."""
    UNBOUND = "unbound"
    ACCOUNT_ONLY = "account_only"
    AUTHENTICATED = "authenticated"
    IDENTIFIED = "identified"
    REGION_BOUND = "region_bound"
    FULLY_BOUND = "fully_bound"


@dataclass(frozen=True)
class ClientSession:
    """Snapshot of a client session at one stage of construction."""
    stage: SessionStage = SessionStage.UNBOUND
    cloud_instance_id: Optional[str] = None
    account: Optional[IAMSession] = None
    resource_client: Optional[ResourceControllerClient] = None
    identity: Optional[Identity] = None
    location: Optional[ResourceLocation] = None
    power: Optional[PowerSession] = None
    instance_client: Optional[InstanceClient] = None
    network_client: Optional[NetworkClient] = None
    image_client: Optional[ImageClient] = None

    @property
    def bound(self) -> bool:
        return self.stage == SessionStage.FULLY_BOUND


def _require(session: ClientSession, stage: SessionStage, action: str) -> None:
    if session.stage != stage:
        raise SessionStageError(
            f"cannot {action}: session is {session.stage.value}, expected {stage.value}"
        )


def attach_account(
    session: ClientSession,
    account: IAMSession,
    resource_client: ResourceControllerClient,
) -> ClientSession:
    """Attach the account session and its resource controller client."""
    _require(session, SessionStage.UNBOUND, "attach account")
    return replace(
        session,
        stage=SessionStage.ACCOUNT_ONLY,
        account=account,
        resource_client=resource_client,
    )


def authenticate(session: ClientSession) -> ClientSession:
    """Exchange the account's API key for an access token.

    Raises:
        AuthenticationError: If the exchange fails
    """
    _require(session, SessionStage.ACCOUNT_ONLY, "authenticate")
    session.account.authenticate()
    return replace(session, stage=SessionStage.AUTHENTICATED)


def attach_identity(session: ClientSession, generation: int) -> ClientSession:
    """Decode the caller's identity from the access token.

    Raises:
        IdentityDecodeError: If the token cannot be decoded
    """
    _require(session, SessionStage.AUTHENTICATED, "attach identity")
    identity = decode_identity(session.account.access_token, generation)
    logger.debug("session identity resolved for account {}", identity.account)
    return replace(session, stage=SessionStage.IDENTIFIED, identity=identity)


def bind_region(session: ClientSession) -> ClientSession:
    """Look up the cloud instance and resolve where it lives.

    Raises:
        ProviderError: If the cloud instance cannot be read
        UnknownRegionError: If its region is not known
    """
    _require(session, SessionStage.IDENTIFIED, "bind region")
    if not session.cloud_instance_id:
        raise SessionStageError("cannot bind region: no cloud instance ID")
    resource = session.resource_client.get_instance(session.cloud_instance_id)
    location = resolve_location(resource.region_id)
    logger.debug(
        "cloud instance {} is in zone {} (region {})",
        session.cloud_instance_id, location.zone, location.region_id,
    )
    return replace(session, stage=SessionStage.REGION_BOUND, location=location)


def bind_resources(
    session: ClientSession,
    debug: bool = False,
    timeout: timedelta = TIMEOUT,
) -> ClientSession:
    """Bind the Power VS session and derive the resource sub-clients.

    Raises:
        SessionBindError: If the Power VS session cannot be established
    """
    _require(session, SessionStage.REGION_BOUND, "bind resources")
    power = bind_power_session(
        session.account,
        session.identity,
        session.location,
        session.cloud_instance_id,
        debug=debug,
        timeout=timeout,
    )
    return replace(
        session,
        stage=SessionStage.FULLY_BOUND,
        power=power,
        instance_client=power.instance_client(),
        network_client=power.network_client(),
        image_client=power.image_client(),
    )
