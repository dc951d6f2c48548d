"""
Failure kinds reported by the bed registry and the reservation coordinator.

Every error carries the entity kind, its id and, for input problems, the
offending field, so a caller can render a specific message.
"""


class BedReservationError(Exception):
    code = "error"

    def __init__(self, message, entity=None, entity_id=None, field=None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.entity_id = entity_id
        self.field = field

    def to_dict(self):
        return {
            "detail": self.message,
            "code": self.code,
            "entity": self.entity,
            "entity_id": self.entity_id,
            "field": self.field,
        }


class NotFound(BedReservationError):
    code = "not_found"

    def __init__(self, entity, entity_id, message=None):
        super().__init__(message or f"{entity} {entity_id} does not exist.", entity=entity, entity_id=entity_id)


class ValidationError(BedReservationError):
    code = "validation_error"


class StateConflict(BedReservationError):
    code = "state_conflict"


class StoreFailure(BedReservationError):
    code = "store_failure"
