"""Client interface for powervs-client.

This module defines the abstract interface machine controllers program
against. PowerVSClient is the implementation.
"""
from abc import ABC, abstractmethod

from powervs_client.models import (
    Images,
    Networks,
    PVMInstance,
    PVMInstanceCreate,
    PVMInstances,
    ServiceInstance,
)


class Client(ABC):
    """Gateway to the Power VS compute provider."""

    @abstractmethod
    def list_images(self) -> Images:
        """List the boot images of the cloud instance."""
        pass

    @abstractmethod
    def list_networks(self) -> Networks:
        """List the networks of the cloud instance."""
        pass

    @abstractmethod
    def delete_instance(self, instance_id: str) -> None:
        """Delete a PVM instance."""
        pass

    @abstractmethod
    def create_instance(self, params: PVMInstanceCreate) -> list[PVMInstance]:
        """Create PVM instances. Returns the created instances."""
        pass

    @abstractmethod
    def get_instance(self, instance_id: str) -> PVMInstance:
        """Get a PVM instance by ID."""
        pass

    @abstractmethod
    def get_instance_by_name(self, name: str) -> PVMInstance:
        """Get a PVM instance by server name.

        Raises:
            InstanceNotFoundError: If no instance has that name
        """
        pass

    @abstractmethod
    def list_instances(self) -> PVMInstances:
        """List all PVM instances of the cloud instance."""
        pass

    @abstractmethod
    def list_service_instances(self) -> list[ServiceInstance]:
        """List the account's Power VS service instances."""
        pass
