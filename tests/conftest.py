# tests/conftest.py
import os
import tempfile
from datetime import timedelta

import pytest

os.environ["SKIP_DB_INIT"] = "1"

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from bedreserve.bed_state import BedState
from bedreserve.coordinator import PatientInfo, ReservationCoordinator
from bedreserve.db import Base, get_db, make_engine
from bedreserve.main import app
from bedreserve.models import Bed, Facility, Reservation, utcnow
from bedreserve.registry import BedRegistry
from bedreserve.store import RecordStore


@pytest.fixture(scope="function")
def session_factory():
    # temp DB file so several connections (threads) can share it
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    engine = make_engine(f"sqlite:///{tmp.name}", timeout=30)
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        engine.dispose()
        try:
            os.remove(tmp.name)
        except OSError:
            pass


@pytest.fixture(scope="function")
def test_db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(test_db_session):
    return RecordStore(test_db_session)


@pytest.fixture
def registry(store):
    return BedRegistry(store)


@pytest.fixture
def coordinator(store, registry):
    return ReservationCoordinator(store, registry)


@pytest.fixture(scope="function")
def client(test_db_session):
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def patient():
    return PatientInfo(name="Jane Doe", email="jane.doe@example.com", phone="+1-555-0142")


@pytest.fixture
def window():
    start = utcnow() + timedelta(hours=1)
    return start, start + timedelta(hours=2)


# —— Factories ——
@pytest.fixture
def make_facility(test_db_session):
    def _make_facility(facility_id="f-1", name="General Hospital", city="Springfield", state_province=None):
        f = Facility(id=facility_id, name=name, city=city, state_province=state_province)
        test_db_session.add(f)
        test_db_session.commit()
        return f
    return _make_facility


@pytest.fixture
def make_bed(test_db_session):
    def _make_bed(bed_id="b-1", bed_number=None, facility_id=None, department="General Medicine",
                  room_type="Private", status="available", is_available=None):
        state = BedState.of(status, is_available)
        b = Bed(
            id=bed_id,
            bed_number=bed_number or bed_id.upper(),
            facility_id=facility_id,
            department=department,
            room_type=room_type,
            status=state.status,
            is_available=state.is_available,
            last_updated=utcnow(),
        )
        test_db_session.add(b)
        test_db_session.commit()
        return b
    return _make_bed


@pytest.fixture
def make_reservation(test_db_session):
    def _make_reservation(reservation_id="r-1", bed_id="b-1", status="confirmed", start=None, end=None):
        start = start or (utcnow() + timedelta(hours=1))
        end = end or (start + timedelta(hours=1))
        r = Reservation(
            id=reservation_id,
            bed_id=bed_id,
            patient_name="John Roe",
            patient_email="john.roe@example.com",
            patient_phone="+1-555-0199",
            start_time=start,
            end_time=end,
            status=status,
        )
        test_db_session.add(r)
        test_db_session.commit()
        return r
    return _make_reservation
