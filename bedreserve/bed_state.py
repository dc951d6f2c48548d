"""
The (status, is_available) pair of a bed as one immutable value.

`status` is an open-ended label; the conventional ones are below. Only
`available` implies the bed can be booked, and only `emergency` is an
overlay that may sit on either side of the availability flag.
"""

from __future__ import annotations

from dataclasses import dataclass

from bedreserve.errors import ValidationError

AVAILABLE = "available"
OCCUPIED = "occupied"
CLEANING = "cleaning"
MAINTENANCE = "maintenance"
EMERGENCY = "emergency"

KNOWN_STATUSES = (AVAILABLE, OCCUPIED, CLEANING, MAINTENANCE, EMERGENCY)


@dataclass(frozen=True)
class BedState:
    status: str
    is_available: bool

    @classmethod
    def available(cls) -> BedState:
        return cls(AVAILABLE, True)

    @classmethod
    def occupied(cls) -> BedState:
        return cls(OCCUPIED, False)

    @classmethod
    def cleaning(cls) -> BedState:
        return cls(CLEANING, False)

    @classmethod
    def maintenance(cls) -> BedState:
        return cls(MAINTENANCE, False)

    @classmethod
    def emergency(cls, available: bool = False) -> BedState:
        return cls(EMERGENCY, bool(available))

    @classmethod
    def of(cls, status: str, is_available: bool | None = None) -> BedState:
        """Build a state from a raw label, rejecting a contradictory flag.

        Unknown labels are kept as-is but always count as unavailable.
        """
        label = (status or "").strip().lower()
        if not label:
            raise ValidationError("Bed status is required.", entity="bed", field="status")

        if label == EMERGENCY:
            return cls.emergency(bool(is_available))

        implied = label == AVAILABLE
        if is_available is not None and bool(is_available) != implied:
            raise ValidationError(
                f"A bed with status '{label}' cannot have is_available={bool(is_available)}.",
                entity="bed",
                field="is_available",
            )
        return cls(label, implied)

    @classmethod
    def from_bed(cls, bed) -> BedState:
        return cls(bed.status, bool(bed.is_available))

    def as_values(self) -> dict:
        return {"status": self.status, "is_available": self.is_available}
