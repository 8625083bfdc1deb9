"""Power Virtual Server session and resource clients.

A PowerSession is bound to one account, one region/zone and one cloud
instance. The InstanceClient, NetworkClient and ImageClient derived from it
are the only objects that talk to the Power VS API.
"""
import re
from datetime import timedelta
from typing import Optional

import httpx
from loguru import logger

from powervs_client.config import TIMEOUT
from powervs_client.errors import ProviderError, SessionBindError
from powervs_client.ibmcloud.iam import IAMSession
from powervs_client.ibmcloud.identity import CLOUD_ENVIRONMENT_STAGING, Identity
from powervs_client.ibmcloud.regions import ResourceLocation
from powervs_client.ibmcloud.rest import RestClient
from powervs_client.models import (
    Images,
    Networks,
    PVMInstance,
    PVMInstanceCreate,
    PVMInstances,
)


POWER_ENDPOINT = "https://{region}.power-iaas.cloud.ibm.com"
POWER_STAGING_ENDPOINT = "https://{region}.power-iaas.test.cloud.ibm.com"

REGION_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")


def power_endpoint(region: str, cloud_environment: str) -> str:
    """Power VS API base URL for a region."""
    if cloud_environment == CLOUD_ENVIRONMENT_STAGING:
        return POWER_STAGING_ENDPOINT.format(region=region)
    return POWER_ENDPOINT.format(region=region)


def format_crn(identity: Identity, zone: str, cloud_instance_id: str) -> str:
    """CRN header value identifying the cloud instance."""
    return (
        f"crn:v1:{identity.cloud_environment}:{identity.cloud_type}:power-iaas:"
        f"{zone}:a/{identity.account}:{cloud_instance_id}::"
    )


class PowerSession(RestClient):
    """Region- and account-scoped Power VS session."""

    def __init__(
        self,
        account: IAMSession,
        identity: Identity,
        location: ResourceLocation,
        cloud_instance_id: str,
        debug: bool = False,
        timeout: timedelta = TIMEOUT,
    ):
        super().__init__(
            power_endpoint(location.region_id, identity.cloud_environment),
            auth=account.auth,
            headers={
                "CRN": format_crn(identity, location.zone, cloud_instance_id),
                "Accept": "application/json",
            },
            timeout=timeout.total_seconds(),
            debug=debug,
        )
        self.account = account
        self.identity = identity
        self.location = location
        self.cloud_instance_id = cloud_instance_id

    def instance_client(self) -> "InstanceClient":
        return InstanceClient(self, self.cloud_instance_id)

    def network_client(self) -> "NetworkClient":
        return NetworkClient(self, self.cloud_instance_id)

    def image_client(self) -> "ImageClient":
        return ImageClient(self, self.cloud_instance_id)


def bind_power_session(
    account: IAMSession,
    identity: Identity,
    location: ResourceLocation,
    cloud_instance_id: str,
    debug: bool = False,
    timeout: timedelta = TIMEOUT,
) -> PowerSession:
    """Establish a Power VS session for a cloud instance.

    Args:
        account: Authenticated account session
        identity: Identity decoded from the account's access token
        location: Resolved region and zone of the cloud instance
        cloud_instance_id: Power VS cloud instance ID
        debug: Log every request and response
        timeout: Per-request timeout

    Returns:
        PowerSession ready for resource operations

    Raises:
        SessionBindError: If the session cannot be established
    """
    if not account.access_token:
        raise SessionBindError("account session holds no access token")
    if not identity.account:
        raise SessionBindError("identity has no account")
    if not location.region_id or not location.zone:
        raise SessionBindError("cloud instance has no region")
    if not REGION_PATTERN.match(location.region_id):
        raise SessionBindError(f"malformed region '{location.region_id}'")
    if not cloud_instance_id:
        raise SessionBindError("cloud instance ID is required")

    session = PowerSession(account, identity, location, cloud_instance_id, debug, timeout)
    try:
        # Builds the transport and validates the endpoint URL
        session.client
    except httpx.InvalidURL as e:
        raise SessionBindError(
            f"invalid Power VS endpoint for region '{location.region_id}': {e}"
        ) from e
    logger.info(
        "bound Power VS session to {} (region {}, zone {})",
        cloud_instance_id, location.region_id, location.zone,
    )
    return session


class InstanceClient:
    """PVM instance operations for one cloud instance."""

    def __init__(self, session: PowerSession, cloud_instance_id: str):
        self.session = session
        self.cloud_instance_id = cloud_instance_id

    def _path(self, suffix: str = "") -> str:
        return f"/pcloud/v1/cloud-instances/{self.cloud_instance_id}/pvm-instances{suffix}"

    def _timeout(self, timeout: Optional[timedelta]) -> float:
        return (timeout or TIMEOUT).total_seconds()

    def get_all(self, timeout: Optional[timedelta] = None) -> PVMInstances:
        data = self.session._request("GET", self._path(), timeout=self._timeout(timeout))
        return PVMInstances.model_validate(data or {})

    def get(self, instance_id: str, timeout: Optional[timedelta] = None) -> PVMInstance:
        data = self.session._request(
            "GET", self._path(f"/{instance_id}"), timeout=self._timeout(timeout)
        )
        return PVMInstance.model_validate(data or {})

    def create(
        self, params: PVMInstanceCreate, timeout: Optional[timedelta] = None
    ) -> list[PVMInstance]:
        """Create PVM instances.

        The API answers with a single instance or a list depending on how
        many replicants were requested; both are returned as a list.
        """
        data = self.session._request(
            "POST", self._path(), json=params.to_payload(), timeout=self._timeout(timeout)
        )
        if isinstance(data, dict):
            data = [data]
        return [PVMInstance.model_validate(item) for item in data or []]

    def delete(self, instance_id: str, timeout: Optional[timedelta] = None) -> None:
        self.session._request(
            "DELETE", self._path(f"/{instance_id}"), timeout=self._timeout(timeout)
        )


class NetworkClient:
    """Network operations for one cloud instance."""

    def __init__(self, session: PowerSession, cloud_instance_id: str):
        self.session = session
        self.cloud_instance_id = cloud_instance_id

    def get_all(self, timeout: Optional[timedelta] = None) -> Networks:
        """List networks.

        Raises:
            ProviderError: If the call fails or the API returns no payload
        """
        data = self.session._request(
            "GET",
            f"/pcloud/v1/cloud-instances/{self.cloud_instance_id}/networks",
            timeout=(timeout or TIMEOUT).total_seconds(),
        )
        if data is None:
            raise ProviderError("network listing returned no payload")
        return Networks.model_validate(data)


class ImageClient:
    """Image operations for one cloud instance."""

    def __init__(self, session: PowerSession, cloud_instance_id: str):
        self.session = session
        self.cloud_instance_id = cloud_instance_id

    def get_all(self) -> Images:
        data = self.session._request(
            "GET", f"/pcloud/v1/cloud-instances/{self.cloud_instance_id}/images"
        )
        return Images.model_validate(data or {})
