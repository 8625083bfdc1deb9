"""Power VS client facade.

This module ties the IBM Cloud collaborators together: it bootstraps a
ClientSession from an API key and exposes the resource operations machine
controllers need.
"""
from datetime import timedelta
from typing import Optional

from loguru import logger

from powervs_client import session as stages
from powervs_client.base import Client
from powervs_client.config import (
    DEFAULT_API_GENERATION,
    POWER_SERVICE_TYPE,
    TIMEOUT,
    PowerVSConfig,
)
from powervs_client.errors import (
    InstanceNotFoundError,
    PowerVSError,
    ProviderError,
    SessionStageError,
)
from powervs_client.ibmcloud.iam import IAMSession
from powervs_client.ibmcloud.identity import Identity
from powervs_client.ibmcloud.resource_controller import ResourceControllerClient
from powervs_client.ibmcloud.secrets import SecretManager
from powervs_client.models import (
    Images,
    Networks,
    PVMInstance,
    PVMInstanceCreate,
    PVMInstances,
    ServiceInstance,
)
from powervs_client.session import ClientSession


# Power VS instance states
INSTANCE_STATE_SHUTOFF = "SHUTOFF"
INSTANCE_STATE_ACTIVE = "ACTIVE"
INSTANCE_STATE_BUILD = "BUILD"

PROVIDER_ID_SCHEME = "ibmpowervs"


def format_provider_id(instance_id: str) -> str:
    """Format a PVM instance ID as a node provider ID."""
    return f"{PROVIDER_ID_SCHEME}:///{instance_id}"


class PowerVSClient(Client):
    """Client facade over a ClientSession.

    Instance, network and image operations need a fully bound session
    (new_validated_client). A minimal session (new_client_minimal) only
    supports list_service_instances.
    """

    def __init__(self, session: ClientSession, timeout: timedelta = TIMEOUT):
        self.session = session
        self.timeout = timeout

    @property
    def cloud_instance_id(self) -> Optional[str]:
        return self.session.cloud_instance_id

    @property
    def identity(self) -> Optional[Identity]:
        return self.session.identity

    def _bound(self) -> ClientSession:
        if not self.session.bound:
            raise SessionStageError(
                "client is not bound to a cloud instance; use new_validated_client"
            )
        return self.session

    def list_images(self) -> Images:
        return self._bound().image_client.get_all()

    def list_networks(self) -> Networks:
        return self._bound().network_client.get_all(self.timeout)

    def delete_instance(self, instance_id: str) -> None:
        logger.info("deleting instance {}", instance_id)
        self._bound().instance_client.delete(instance_id, self.timeout)

    def create_instance(self, params: PVMInstanceCreate) -> list[PVMInstance]:
        logger.info("creating instance {}", params.server_name)
        return self._bound().instance_client.create(params, self.timeout)

    def get_instance(self, instance_id: str) -> PVMInstance:
        return self._bound().instance_client.get(instance_id, self.timeout)

    def list_instances(self) -> PVMInstances:
        return self._bound().instance_client.get_all(self.timeout)

    def get_instance_by_name(self, name: str) -> PVMInstance:
        """Get a PVM instance by server name.

        Server names are not unique on the provider side; the first match in
        the listing wins.

        Raises:
            InstanceNotFoundError: If no instance has that name
            ProviderError: If the instances cannot be listed or read
        """
        try:
            instances = self.list_instances()
        except ProviderError as e:
            raise ProviderError("failed to get the instance list", e.status_code) from e

        for instance in instances.pvm_instances:
            if instance.server_name == name:
                return self.get_instance(instance.pvm_instance_id)
        raise InstanceNotFoundError(f"instance not found: {name}")

    def list_service_instances(self) -> list[ServiceInstance]:
        """List the account's Power VS service instances.

        Raises:
            ProviderError: If the service instances cannot be listed
        """
        if self.session.resource_client is None:
            raise SessionStageError("client has no account session")
        try:
            instances = self.session.resource_client.list_instances(type="service_instance")
        except ProviderError as e:
            raise ProviderError(
                f"failed to list the service instances: {e.message}", e.status_code
            ) from e
        return filter_power_instances(instances)

    def close(self) -> None:
        """Close the HTTP clients held by the session."""
        for rest_client in (self.session.power, self.session.resource_client, self.session.account):
            if rest_client is not None:
                rest_client.close()


def filter_power_instances(instances: list[ServiceInstance]) -> list[ServiceInstance]:
    """Keep only Power VS service instances."""
    return [i for i in instances if i.service_name == POWER_SERVICE_TYPE]


def _attach_account(session: ClientSession, api_key: str, config: PowerVSConfig) -> ClientSession:
    account = IAMSession(api_key, iam_endpoint=config.iam_endpoint)
    resource_client = ResourceControllerClient(
        account, endpoint=config.resource_controller_endpoint
    )
    return stages.attach_account(session, account, resource_client)


def new_validated_client(
    secret_name: str,
    namespace: str,
    cloud_instance_id: str,
    debug: bool = False,
    secrets: Optional[SecretManager] = None,
    config: Optional[PowerVSConfig] = None,
) -> PowerVSClient:
    """Create a client bound to a Power VS cloud instance.

    Args:
        secret_name: Kubernetes secret holding the API key
        namespace: Namespace of the secret
        cloud_instance_id: Power VS cloud instance to bind to
        debug: Log every Power VS request and response
        secrets: Secret manager to read the API key with
        config: Endpoint configuration (defaults to production IBM Cloud)

    Returns:
        A fully bound PowerVSClient

    Raises:
        PowerVSError: On any bootstrap failure. The error's ``session``
            holds the last snapshot that was reached.
    """
    config = config or PowerVSConfig()
    secrets = secrets or SecretManager()
    api_key = secrets.get_api_key(secret_name, namespace)

    session = ClientSession(cloud_instance_id=cloud_instance_id)
    try:
        session = _attach_account(session, api_key, config)
        session = stages.authenticate(session)
        session = stages.attach_identity(session, DEFAULT_API_GENERATION)
        session = stages.bind_region(session)
        session = stages.bind_resources(session, debug=debug)
    except PowerVSError as e:
        logger.warning("client bootstrap stopped at {}: {}", session.stage.value, e.message)
        e.session = session
        raise

    logger.info("client ready for cloud instance {}", cloud_instance_id)
    return PowerVSClient(session)


def new_client_minimal(api_key: str, config: Optional[PowerVSConfig] = None) -> PowerVSClient:
    """Create an account-only client for querying resource instances.

    No authentication happens up front; the first request authenticates.
    """
    config = config or PowerVSConfig()
    return PowerVSClient(_attach_account(ClientSession(), api_key, config))
