"""
Generic record access for the three record kinds (bed, reservation, facility).

The registry and coordinator only talk to the database through this class,
so every database failure surfaces as a StoreFailure and every missing id as
NotFound instead of a None default.
"""

import logging
import uuid
from contextlib import contextmanager

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bedreserve.errors import NotFound, StoreFailure
from bedreserve.models import Bed, Facility, Reservation

logger = logging.getLogger(__name__)

KINDS = {
    "bed": Bed,
    "reservation": Reservation,
    "facility": Facility,
}


def model_for(kind):
    try:
        return KINDS[kind]
    except KeyError:
        raise ValueError(f"Unknown record kind: {kind!r}") from None


class RecordStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def guard(self, operation, kind):
        """Translate driver errors into StoreFailure."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error("Record store %s on %s failed", operation, kind, exc_info=True)
            raise StoreFailure(f"Record store {operation} on {kind} failed.", entity=kind) from exc

    @contextmanager
    def transaction(self):
        """Commit everything done inside the block, or roll all of it back."""
        try:
            yield self
            with self.guard("commit", "transaction"):
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def create(self, kind, record):
        model = model_for(kind)
        values = dict(record)
        if not values.get("id"):
            values["id"] = str(uuid.uuid4())
        with self.guard("create", kind):
            row = model(**values)
            self.db.add(row)
            self.db.flush()
        return row

    def get_by_id(self, kind, record_id):
        model = model_for(kind)
        with self.guard("get", kind):
            row = self.db.get(model, record_id, populate_existing=True)
        if row is None:
            raise NotFound(kind, record_id)
        return row

    def update(self, kind, partial):
        """Apply only the fields present in `partial`, which must carry `id`."""
        values = dict(partial)
        record_id = values.pop("id", None)
        if record_id is None:
            raise ValueError("update() needs the record id")
        if values:
            if self.update_where(kind, record_id, {}, values) == 0:
                raise NotFound(kind, record_id)
        return self.get_by_id(kind, record_id)

    def update_where(self, kind, record_id, expected, values):
        """
        Conditional update: write `values` only if every column in `expected`
        still holds the expected value. Returns the number of rows changed.
        """
        model = model_for(kind)
        stmt = update(model).where(model.id == record_id)
        for column, value in expected.items():
            stmt = stmt.where(getattr(model, column) == value)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        with self.guard("update", kind):
            res = self.db.execute(stmt)
        return res.rowcount

    def list(self, kind, **criteria):
        model = model_for(kind)
        stmt = select(model)
        for column, value in criteria.items():
            stmt = stmt.where(getattr(model, column) == value)
        stmt = stmt.order_by(model.id)
        with self.guard("list", kind):
            return list(self.db.execute(stmt, execution_options={"populate_existing": True}).scalars())
