from typing import Optional

from fastapi import APIRouter, Depends, Query

from bedreserve.deps import get_registry
from bedreserve.registry import BedRegistry
from bedreserve.schemas import FacilityAvailabilityOut, FacilityOut

router = APIRouter()


@router.get("", response_model=list[FacilityOut])
def list_facilities(
    search: Optional[str] = Query(default=None),
    location: Optional[str] = Query(default=None),
    registry: BedRegistry = Depends(get_registry),
):
    """
    List facilities. `search` matches name or city, `location` matches
    city or state/province.
    """
    return registry.list_facilities(search=search, location=location)


@router.get("/availability", response_model=list[FacilityAvailabilityOut])
def facility_availability(registry: BedRegistry = Depends(get_registry)):
    return [
        {"facility_id": facility_id, **counts.as_dict()}
        for facility_id, counts in registry.facility_availability().items()
    ]


@router.get("/{facility_id}", response_model=FacilityOut)
def get_facility(facility_id: str, registry: BedRegistry = Depends(get_registry)):
    return registry.get_facility(facility_id)
