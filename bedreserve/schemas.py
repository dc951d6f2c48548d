from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FacilityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state_province: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone_number: Optional[str] = None
    email_address: Optional[str] = None
    website_url: Optional[str] = None
    description: Optional[str] = None


class BedOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    facility_id: Optional[str] = None
    bed_number: str
    department: Optional[str] = None
    room_type: Optional[str] = None
    status: str
    is_available: bool
    last_updated: Optional[datetime] = None


class ReservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    bed_id: str
    patient_name: str
    patient_email: str
    patient_phone: str
    start_time: datetime
    end_time: datetime
    status: str
    created_at: Optional[datetime] = None


class CancellationOut(BaseModel):
    reservation: ReservationOut
    warnings: list[str] = []


class CountsOut(BaseModel):
    total: int
    available: int
    occupied: int
    emergency: int


class FacilityAvailabilityOut(CountsOut):
    facility_id: str


class FilterOptionsOut(BaseModel):
    departments: list[str]
    room_types: list[str]
    statuses: list[str]
