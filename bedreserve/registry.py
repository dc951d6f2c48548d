"""
Bed registry: availability queries over the bed inventory and the single
write path for a bed's (status, is_available) pair.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from bedreserve.bed_state import EMERGENCY, BedState
from bedreserve.errors import StateConflict
from bedreserve.models import Bed, Facility, utcnow
from bedreserve.store import RecordStore

logger = logging.getLogger(__name__)

ANY = "all"


def _unconstrained(value):
    return value is None or value == "" or value == ANY


def _contains(needle, *fields):
    return any(needle in (value or "").lower() for value in fields)


@dataclass(frozen=True)
class BedFilter:
    """Conjunction over the four bed dimensions; None/""/"all" match anything."""

    facility_id: str | None = None
    department: str | None = None
    room_type: str | None = None
    status: str | None = None

    def matches(self, bed: Bed) -> bool:
        if not _unconstrained(self.facility_id) and bed.facility_id != self.facility_id:
            return False
        if not _unconstrained(self.department) and bed.department != self.department:
            return False
        if not _unconstrained(self.room_type) and bed.room_type != self.room_type:
            return False
        if not _unconstrained(self.status) and (bed.status or "").lower() != self.status.strip().lower():
            return False
        return True


@dataclass(frozen=True)
class AvailabilityCounts:
    total: int
    available: int
    occupied: int
    emergency: int

    def as_dict(self):
        return {
            "total": self.total,
            "available": self.available,
            "occupied": self.occupied,
            "emergency": self.emergency,
        }


def compute_availability_counts(beds: Iterable[Bed]) -> AvailabilityCounts:
    # emergency is an overlay: those beds are also counted as available or occupied
    total = available = emergency = 0
    for bed in beds:
        total += 1
        if bed.is_available:
            available += 1
        if (bed.status or "").lower() == EMERGENCY:
            emergency += 1
    return AvailabilityCounts(total=total, available=available, occupied=total - available, emergency=emergency)


class BedRegistry:
    def __init__(self, store: RecordStore):
        self.store = store

    # -- reads --

    def list_beds(self, bed_filter: BedFilter | None = None) -> list[Bed]:
        bed_filter = bed_filter or BedFilter()
        if _unconstrained(bed_filter.facility_id):
            beds = self.store.list("bed")
        else:
            beds = self.store.list("bed", facility_id=bed_filter.facility_id)
        return [bed for bed in beds if bed_filter.matches(bed)]

    def get_bed(self, bed_id) -> Bed:
        return self.store.get_by_id("bed", bed_id)

    compute_availability_counts = staticmethod(compute_availability_counts)

    def filter_options(self, beds: Iterable[Bed]) -> dict:
        """Distinct values present in `beds`, for building filter choices."""
        beds = list(beds)
        return {
            "departments": sorted({b.department for b in beds if b.department}),
            "room_types": sorted({b.room_type for b in beds if b.room_type}),
            "statuses": sorted({b.status for b in beds if b.status}),
        }

    def list_facilities(self, search=None, location=None) -> list[Facility]:
        """
        `search` matches the facility name or city, `location` the city or
        state/province; both are case-insensitive substring matches.
        """
        facilities = self.store.list("facility")
        if search and search.strip():
            needle = search.strip().lower()
            facilities = [f for f in facilities if _contains(needle, f.name, f.city)]
        if location and location.strip():
            needle = location.strip().lower()
            facilities = [f for f in facilities if _contains(needle, f.city, f.state_province)]
        return facilities

    def get_facility(self, facility_id) -> Facility:
        return self.store.get_by_id("facility", facility_id)

    def facility_availability(self) -> dict[str, AvailabilityCounts]:
        by_facility = {facility.id: [] for facility in self.list_facilities()}
        for bed in self.store.list("bed"):
            if bed.facility_id in by_facility:
                by_facility[bed.facility_id].append(bed)
        return {facility_id: compute_availability_counts(beds) for facility_id, beds in by_facility.items()}

    # -- writes --

    def set_availability(self, bed_id, state: BedState, expected: dict | None = None) -> bool:
        """
        Overwrite status, is_available and last_updated together in one
        guarded UPDATE and bump the bed's version.

        `expected` holds column values the row must still have (for example
        {"is_available": True, "version": 3}); when they no longer match
        nothing is written and False is returned. Concurrent writers on the
        same bed are serialised by the database row write.
        """
        values = dict(state.as_values())
        values["last_updated"] = utcnow()
        values["version"] = Bed.version + 1

        changed = self.store.update_where("bed", bed_id, expected or {}, values)
        if changed == 0:
            # raises NotFound when the bed itself is gone
            self.get_bed(bed_id)
            logger.debug("Guarded availability write on bed %s lost: expected %s", bed_id, expected)
            return False
        return True

    def update_status(self, bed_id, status, is_available=None) -> Bed:
        """
        Status feed entry point (cleaning finished, maintenance started, ...).

        A bed held by a confirmed reservation is left alone: only cancelling
        the reservation changes its state.
        """
        state = BedState.of(status, is_available)
        bed = self.get_bed(bed_id)

        if self.store.list("reservation", bed_id=bed_id, status="confirmed"):
            logger.warning("Refused to set bed %s to %s: it has a confirmed reservation", bed_id, state.status)
            raise StateConflict(
                f"Bed {bed.bed_number} has a confirmed reservation and cannot be marked {state.status}.",
                entity="bed",
                entity_id=bed_id,
                field="status",
            )

        with self.store.transaction():
            if not self.set_availability(bed_id, state, expected={"version": bed.version}):
                raise StateConflict(
                    f"Bed {bed.bed_number} changed while its status was being updated.",
                    entity="bed",
                    entity_id=bed_id,
                )
        bed = self.get_bed(bed_id)
        logger.info("Bed %s status set to %s (available=%s)", bed_id, bed.status, bed.is_available)
        return bed
