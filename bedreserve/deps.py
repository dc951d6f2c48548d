from fastapi import Depends
from sqlalchemy.orm import Session

from bedreserve.coordinator import ReservationCoordinator
from bedreserve.db import get_db
from bedreserve.registry import BedRegistry
from bedreserve.store import RecordStore


def get_registry(db: Session = Depends(get_db)) -> BedRegistry:
    return BedRegistry(RecordStore(db))


def get_coordinator(db: Session = Depends(get_db)) -> ReservationCoordinator:
    return ReservationCoordinator(RecordStore(db))
