"""Provider payload models returned by the client facade.

Only the fields the facade relies on are declared; everything else the
provider sends is preserved as model extras.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class PVMInstance(_WireModel):
    """A Power virtual machine instance."""
    pvm_instance_id: Optional[str] = Field(default=None, alias="pvmInstanceID")
    server_name: Optional[str] = Field(default=None, alias="serverName")
    status: Optional[str] = None
    health: Optional[dict] = None
    addresses: list[dict] = Field(default_factory=list)


class PVMInstances(_WireModel):
    pvm_instances: list[PVMInstance] = Field(default_factory=list, alias="pvmInstances")


class PVMNetworkRef(_WireModel):
    network_id: str = Field(alias="networkID")
    ip_address: Optional[str] = Field(default=None, alias="ipAddress")


class PVMInstanceCreate(_WireModel):
    """Parameters for creating PVM instances."""
    server_name: str = Field(alias="serverName")
    image_id: str = Field(alias="imageID")
    processors: float
    memory: float
    proc_type: str = Field(default="shared", alias="procType")
    sys_type: Optional[str] = Field(default=None, alias="sysType")
    networks: list[PVMNetworkRef] = Field(default_factory=list)
    key_pair_name: Optional[str] = Field(default=None, alias="keyPairName")
    user_data: Optional[str] = Field(default=None, alias="userData")

    def to_payload(self) -> dict:
        """Render the request body with provider field names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Network(_WireModel):
    network_id: Optional[str] = Field(default=None, alias="networkID")
    name: Optional[str] = None
    type: Optional[str] = None
    vlan_id: Optional[float] = Field(default=None, alias="vlanID")


class Networks(_WireModel):
    networks: list[Network] = Field(default_factory=list)


class Image(_WireModel):
    image_id: Optional[str] = Field(default=None, alias="imageID")
    name: Optional[str] = None
    state: Optional[str] = None


class Images(_WireModel):
    images: list[Image] = Field(default_factory=list)


class ServiceInstance(_WireModel):
    """A resource controller service instance."""
    id: Optional[str] = None
    guid: Optional[str] = None
    name: Optional[str] = None
    crn: Optional[str] = None
    region_id: Optional[str] = None
    resource_id: Optional[str] = None
    state: Optional[str] = None
    type: Optional[str] = None

    @property
    def service_name(self) -> Optional[str]:
        """Service name segment of the CRN (e.g. power-iaas)."""
        # crn:version:cname:ctype:service-name:location:scope:service-instance:resource-type:resource
        if not self.crn:
            return None
        parts = self.crn.split(":")
        return parts[4] if len(parts) > 4 else None
