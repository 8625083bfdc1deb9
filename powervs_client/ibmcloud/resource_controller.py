"""IBM Cloud resource controller operations for powervs-client.

This module provides read access to the account's resource (service)
instances.
"""
from typing import Optional
from urllib.parse import urlsplit

from powervs_client.config import DEFAULT_RESOURCE_CONTROLLER_ENDPOINT
from powervs_client.ibmcloud.iam import IAMSession
from powervs_client.ibmcloud.rest import RestClient
from powervs_client.models import ServiceInstance


class ResourceControllerClient(RestClient):
    """Resource controller v2 client authenticated by an account session."""

    def __init__(
        self,
        session: IAMSession,
        endpoint: str = DEFAULT_RESOURCE_CONTROLLER_ENDPOINT,
    ):
        """Initialize resource controller client.

        Args:
            session: Account session supplying the IAM token
            endpoint: Resource controller base URL
        """
        super().__init__(endpoint, auth=session.auth)
        self.session = session

    def get_instance(self, instance_id: str) -> ServiceInstance:
        """Get a resource instance by ID, GUID or CRN.

        Raises:
            ProviderError: If the lookup fails
        """
        data = self._request("GET", f"/v2/resource_instances/{instance_id}")
        return ServiceInstance.model_validate(data or {})

    def list_instances(self, type: Optional[str] = "service_instance") -> list[ServiceInstance]:
        """List all resource instances in the account, following pagination.

        Args:
            type: Resource instance type filter

        Returns:
            List of ServiceInstance
        """
        params = {"type": type} if type else {}
        path = "/v2/resource_instances"
        result = []
        while path:
            data = self._request("GET", path, params=params or None) or {}
            for resource in data.get("resources") or []:
                result.append(ServiceInstance.model_validate(resource))

            next_url = data.get("next_url")
            if not next_url:
                break
            # next_url already carries the query (including the start token)
            parts = urlsplit(next_url)
            path = f"{parts.path}?{parts.query}" if parts.query else parts.path
            params = {}
        return result
