from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from bedreserve.coordinator import PatientInfo, ReservationCoordinator
from bedreserve.deps import get_coordinator
from bedreserve.schemas import CancellationOut, ReservationOut

router = APIRouter()


class ReserveBody(BaseModel):
    bed_id: str
    patient_name: str
    patient_email: str
    patient_phone: str
    start_time: datetime
    end_time: datetime


@router.post("", status_code=201, response_model=ReservationOut)
def create_reservation(body: ReserveBody, coordinator: ReservationCoordinator = Depends(get_coordinator)):
    """
    Reserve a bed. Availability is re-checked at write time:
      - 404 when the bed does not exist
      - 409 when the bed is no longer available
      - 422 when the patient details or the time window are invalid
    """
    patient = PatientInfo(name=body.patient_name, email=body.patient_email, phone=body.patient_phone)
    return coordinator.reserve(body.bed_id, patient, body.start_time, body.end_time)


@router.get("", response_model=list[ReservationOut])
def list_reservations(
    status: Optional[str] = Query(default=None),
    patient_email: Optional[str] = Query(default=None),
    bed_id: Optional[str] = Query(default=None),
    coordinator: ReservationCoordinator = Depends(get_coordinator),
):
    return coordinator.list_reservations(status=status, patient_email=patient_email, bed_id=bed_id)


@router.get("/{reservation_id}", response_model=ReservationOut)
def get_reservation(reservation_id: str, coordinator: ReservationCoordinator = Depends(get_coordinator)):
    return coordinator.get_reservation(reservation_id)


@router.post("/{reservation_id}/cancel", response_model=CancellationOut)
def cancel_reservation(reservation_id: str, coordinator: ReservationCoordinator = Depends(get_coordinator)):
    # A second cancel is a 409, not a silent success
    result = coordinator.cancel(reservation_id)
    return {"reservation": result.reservation, "warnings": result.warnings}
