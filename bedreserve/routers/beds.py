from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from bedreserve.deps import get_registry
from bedreserve.registry import BedFilter, BedRegistry
from bedreserve.schemas import BedOut, CountsOut, FilterOptionsOut

router = APIRouter()


class StatusBody(BaseModel):
    status: str
    is_available: Optional[bool] = None


def bed_filter(
    facility_id: Optional[str] = Query(default=None),
    department: Optional[str] = Query(default=None),
    room_type: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None),
) -> BedFilter:
    return BedFilter(facility_id=facility_id, department=department, room_type=room_type, status=status)


@router.get("", response_model=list[BedOut])
def list_beds(flt: BedFilter = Depends(bed_filter), registry: BedRegistry = Depends(get_registry)):
    """
    List beds matching every given filter. A filter left out or set to
    "all" does not constrain that dimension.
    """
    return registry.list_beds(flt)


@router.get("/counts", response_model=CountsOut)
def bed_counts(flt: BedFilter = Depends(bed_filter), registry: BedRegistry = Depends(get_registry)):
    return registry.compute_availability_counts(registry.list_beds(flt)).as_dict()


@router.get("/filters", response_model=FilterOptionsOut)
def bed_filter_options(
    facility_id: Optional[str] = Query(default=None),
    registry: BedRegistry = Depends(get_registry),
):
    return registry.filter_options(registry.list_beds(BedFilter(facility_id=facility_id)))


@router.get("/{bed_id}", response_model=BedOut)
def get_bed(bed_id: str, registry: BedRegistry = Depends(get_registry)):
    return registry.get_bed(bed_id)


@router.put("/{bed_id}/status", response_model=BedOut)
def update_bed_status(bed_id: str, body: StatusBody, registry: BedRegistry = Depends(get_registry)):
    """
    Status feed: cleaning, maintenance, emergency and back to available.
    Rejected with 409 while a confirmed reservation holds the bed.
    """
    return registry.update_status(bed_id, body.status, body.is_available)
