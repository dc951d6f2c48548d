import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from bedreserve.config import config

logger = logging.getLogger(__name__)


def make_engine(url, timeout=None):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": timeout or config.DB_TIMEOUT}
    return create_engine(url, connect_args=connect_args)


engine = make_engine(config.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None, seed=None):
    # Import models here to create tables
    from bedreserve.models import Facility, Bed, Reservation  # noqa: F401
    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    if seed is None:
        seed = config.SEED_DEMO
    if not seed:
        return

    session = sessionmaker(autocommit=False, autoflush=False, bind=bind)()
    try:
        seed_demo_data(session)
        session.commit()
    finally:
        session.close()


def seed_demo_data(db):
    """Create one facility with a handful of beds if the inventory is empty."""
    from bedreserve.models import Facility, Bed

    if db.query(Bed).first():
        return

    facility = db.query(Facility).first()
    if not facility:
        facility = Facility(
            id="f-central",
            name="Central General Hospital",
            address="1 Main Street",
            city="Springfield",
            phone_number="+1-555-0100",
            email_address="beds@central.example.org",
        )
        db.add(facility)
        db.flush()

    beds = [
        ("b-101", "B101", "General Medicine", "Private", "available", True),
        ("b-102", "B102", "General Medicine", "Shared", "available", True),
        ("b-201", "B201", "Cardiology", "ICU", "occupied", False),
        ("b-202", "B202", "Cardiology", "ICU", "cleaning", False),
        ("b-301", "B301", "Emergency", "Trauma", "emergency", True),
        ("b-302", "B302", "Emergency", "Trauma", "maintenance", False),
    ]
    db.add_all([
        Bed(
            id=bed_id,
            bed_number=number,
            department=department,
            room_type=room_type,
            status=status,
            is_available=is_available,
            facility_id=facility.id,
        )
        for bed_id, number, department, room_type, status, is_available in beds
    ])
    logger.info("Seeded demo inventory: facility=%s beds=%d", facility.id, len(beds))
