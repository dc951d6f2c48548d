"""
Reservation coordinator: the reserve and cancel transitions.

Per bed, as seen through reservations:

    Free --reserve--> Reserved --cancel--> Free

A Reserved bed accepts no second confirmed reservation, and cancelling a
reservation that is no longer confirmed is rejected rather than ignored.

Both transitions run inside one store transaction. The availability check
and the flip of the bed are a single guarded UPDATE keyed on the bed's
version read moments before, so two callers racing for the same bed can't
both win: the loser's UPDATE matches no row and it gets a StateConflict.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from bedreserve.bed_state import BedState
from bedreserve.errors import NotFound, StateConflict, ValidationError
from bedreserve.models import Reservation, utcnow
from bedreserve.registry import BedRegistry
from bedreserve.store import RecordStore

logger = logging.getLogger(__name__)

email_adapter = TypeAdapter(EmailStr)

CONFIRMED = "confirmed"
CANCELLED = "cancelled"
PENDING = "pending"


@dataclass(frozen=True)
class PatientInfo:
    name: str
    email: str
    phone: str

    def validated(self) -> PatientInfo:
        name = (self.name or "").strip()
        email = (self.email or "").strip()
        phone = (self.phone or "").strip()
        if not name:
            raise ValidationError("Patient name is required.", entity="reservation", field="patient_name")
        if not email:
            raise ValidationError("Patient email is required.", entity="reservation", field="patient_email")
        try:
            email = email_adapter.validate_python(email)
        except PydanticValidationError as exc:
            raise ValidationError(
                f"'{email}' is not a valid email address.", entity="reservation", field="patient_email"
            ) from exc
        if not phone:
            raise ValidationError("Patient phone is required.", entity="reservation", field="patient_phone")
        return PatientInfo(name=name, email=email, phone=phone)


@dataclass
class CancellationResult:
    reservation: Reservation
    warnings: list[str] = field(default_factory=list)


def as_utc(value: datetime, field_name: str) -> datetime:
    """Normalise to the naive-UTC form the store keeps."""
    if not isinstance(value, datetime):
        raise ValidationError(f"{field_name} must be a datetime.", entity="reservation", field=field_name)
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class ReservationCoordinator:
    def __init__(self, store: RecordStore, registry: BedRegistry | None = None, now=utcnow):
        self.store = store
        self.registry = registry or BedRegistry(store)
        self.now = now

    def reserve(self, bed_id, patient: PatientInfo, start_time: datetime, end_time: datetime) -> Reservation:
        patient = patient.validated()
        start_time = as_utc(start_time, "start_time")
        end_time = as_utc(end_time, "end_time")
        if end_time <= start_time:
            raise ValidationError("End time must be after start time.", entity="reservation", field="end_time")
        if start_time < self.now():
            raise ValidationError("Start time cannot be in the past.", entity="reservation", field="start_time")

        with self.store.transaction():
            bed = self.registry.get_bed(bed_id)
            if not bed.is_available:
                logger.warning("Reserve rejected: bed %s is %s", bed_id, bed.status)
                raise self._not_available(bed)

            flipped = self.registry.set_availability(
                bed_id,
                BedState.occupied(),
                expected={"is_available": True, "version": bed.version},
            )
            if not flipped:
                logger.warning("Reserve rejected: bed %s was taken by a concurrent reservation", bed_id)
                raise self._not_available(bed)

            reservation = self.store.create("reservation", {
                "bed_id": bed_id,
                "patient_name": patient.name,
                "patient_email": patient.email,
                "patient_phone": patient.phone,
                "start_time": start_time,
                "end_time": end_time,
                "status": CONFIRMED,
            })

        logger.info("Reservation %s confirmed for bed %s", reservation.id, bed_id)
        return reservation

    def cancel(self, reservation_id) -> CancellationResult:
        warnings = []
        with self.store.transaction():
            reservation = self.store.get_by_id("reservation", reservation_id)
            changed = self.store.update_where(
                "reservation",
                reservation_id,
                {"status": CONFIRMED},
                {"status": CANCELLED, "updated_at": utcnow()},
            )
            if changed == 0:
                # re-read: a concurrent cancel may have just won
                current = self.store.get_by_id("reservation", reservation_id).status
                logger.warning("Cancel rejected: reservation %s is %s", reservation_id, current)
                raise StateConflict(
                    f"Reservation {reservation_id} is {current} and cannot be cancelled.",
                    entity="reservation",
                    entity_id=reservation_id,
                    field="status",
                )

            try:
                self.registry.set_availability(reservation.bed_id, BedState.available())
            except NotFound:
                message = f"Bed {reservation.bed_id} no longer exists; its availability was not restored."
                logger.warning("Reservation %s cancelled: %s", reservation_id, message)
                warnings.append(message)

        reservation = self.store.get_by_id("reservation", reservation_id)
        logger.info("Reservation %s cancelled", reservation_id)
        return CancellationResult(reservation=reservation, warnings=warnings)

    def get_reservation(self, reservation_id) -> Reservation:
        return self.store.get_by_id("reservation", reservation_id)

    def list_reservations(self, status=None, patient_email=None, bed_id=None) -> list[Reservation]:
        criteria = {}
        if status:
            criteria["status"] = status
        if bed_id:
            criteria["bed_id"] = bed_id
        reservations = self.store.list("reservation", **criteria)
        if patient_email:
            email = patient_email.strip().lower()
            reservations = [r for r in reservations if (r.patient_email or "").lower() == email]
        return sorted(reservations, key=lambda r: r.created_at or datetime.min, reverse=True)

    @staticmethod
    def _not_available(bed):
        return StateConflict(
            f"Bed {bed.bed_number} is no longer available.",
            entity="bed",
            entity_id=bed.id,
            field="is_available",
        )
