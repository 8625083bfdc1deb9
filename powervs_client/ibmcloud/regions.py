"""Power VS zone to region resolution."""
from dataclasses import dataclass

from powervs_client.errors import UnknownRegionError


# Zone (resource instance region_id) -> Power VS API region
REGIONS = {
    "dal10": "dal",
    "dal12": "dal",
    "us-south": "us-south",
    "us-east": "us-east",
    "wdc06": "wdc",
    "wdc07": "wdc",
    "sao01": "sao",
    "sao04": "sao",
    "tor01": "tor",
    "mon01": "mon",
    "eu-de-1": "eu-de",
    "eu-de-2": "eu-de",
    "lon04": "lon",
    "lon06": "lon",
    "mad02": "mad",
    "mad04": "mad",
    "syd04": "syd",
    "syd05": "syd",
    "tok04": "tok",
    "osa21": "osa",
    "che01": "che",
}


@dataclass(frozen=True)
class ResourceLocation:
    """Where a cloud resource instance lives."""
    region_id: str
    zone: str


def resolve_region(region_id: str) -> str:
    """Map a resource instance region_id (zone) to its API region.

    Raises:
        UnknownRegionError: If the zone is not in REGIONS
    """
    try:
        return REGIONS[region_id]
    except KeyError:
        raise UnknownRegionError.for_region(region_id) from None


def resolve_location(region_id: str) -> ResourceLocation:
    """Resolve a resource instance region_id into a ResourceLocation."""
    return ResourceLocation(region_id=resolve_region(region_id), zone=region_id)
