from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime, Boolean, ForeignKey, CheckConstraint, Float, Text

from bedreserve.db import Base


def utcnow():
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


RESERVATION_STATUSES = ("confirmed", "cancelled", "pending")


class Facility(Base):
    __tablename__ = "facilities"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    address = Column(String)
    city = Column(String)
    state_province = Column(String)
    postal_code = Column(String)
    country = Column(String)
    latitude = Column(Float)
    longitude = Column(Float)
    phone_number = Column(String)
    email_address = Column(String)
    website_url = Column(String)
    description = Column(Text)
    created_at = Column(DateTime, default=utcnow)


class Bed(Base):
    __tablename__ = "beds"
    id = Column(String, primary_key=True)
    facility_id = Column(String, ForeignKey("facilities.id"), nullable=True, index=True)
    bed_number = Column(String, nullable=False)
    department = Column(String)
    room_type = Column(String)
    status = Column(String, nullable=False, default="available")
    is_available = Column(Boolean, nullable=False, default=True)
    last_updated = Column(DateTime, default=utcnow)
    # bumped on every availability write; used as the compare-and-swap token
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=utcnow)

    __table_args__ = (
        CheckConstraint("is_available = 0 OR status IN ('available', 'emergency')", name="bed_availability_matches_status"),
    )


class Reservation(Base):
    __tablename__ = "reservations"
    id = Column(String, primary_key=True)
    bed_id = Column(String, ForeignKey("beds.id"), nullable=False, index=True)
    patient_name = Column(String, nullable=False)
    patient_email = Column(String, nullable=False)
    patient_phone = Column(String, nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    status = Column(String, nullable=False)  # confirmed|cancelled|pending
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="reservation_window_valid"),
        CheckConstraint("status in ('confirmed','cancelled','pending')", name="reservation_status_valid"),
    )
