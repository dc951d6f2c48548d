import pytest

from bedreserve.errors import NotFound, StoreFailure


def test_create_assigns_id_when_missing(store):
    facility = store.create("facility", {"name": "West Infirmary"})
    assert facility.id
    assert store.get_by_id("facility", facility.id).name == "West Infirmary"


def test_update_only_touches_given_fields(store, make_bed):
    make_bed("b-1", department="Cardiology", room_type="ICU")

    bed = store.update("bed", {"id": "b-1", "room_type": "Private"})

    assert bed.room_type == "Private"
    assert bed.department == "Cardiology"


def test_update_missing_record(store):
    with pytest.raises(NotFound):
        store.update("reservation", {"id": "r-x", "status": "cancelled"})


def test_update_where_is_conditional(store, make_bed):
    make_bed("b-1")
    assert store.update_where("bed", "b-1", {"department": "Oncology"}, {"room_type": "Shared"}) == 0
    assert store.update_where("bed", "b-1", {"department": "General Medicine"}, {"room_type": "Shared"}) == 1
    assert store.get_by_id("bed", "b-1").room_type == "Shared"


def test_duplicate_id_is_a_store_failure(store, make_bed):
    make_bed("b-1")
    with pytest.raises(StoreFailure):
        store.create("bed", {"id": "b-1", "bed_number": "B1", "status": "available", "is_available": True})


def test_unknown_kind(store):
    with pytest.raises(ValueError):
        store.list("ward")
