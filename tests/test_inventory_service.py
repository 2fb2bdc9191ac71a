from __future__ import annotations

import pytest

from supply_tracker.checksum import compute_checksum
from supply_tracker.exceptions import (
    BackendUnavailableError,
    CapacityExceededError,
    InvalidTransitionError,
    NotFoundError,
    StorageIOError,
    ValidationError,
)
from supply_tracker.models import Classification, EquipmentDraft, Priority, RequestStatus
from supply_tracker.services import InventoryStore, validate_draft
from supply_tracker.storage import FileBackend


def _draft(name="Tent, Arctic 10-person", quantity=20, min_threshold=5, **overrides):
    values = dict(
        name=name,
        description="Cold weather shelter",
        quantity=quantity,
        min_threshold=min_threshold,
        unit="ea",
        location="Depot A",
        classification=Classification.UNCLASSIFIED,
    )
    values.update(overrides)
    return EquipmentDraft(**values)


class FailingWritesBackend(FileBackend):
    """File backend whose write-through calls fail like a lost database."""

    def insert_equipment(self, item):
        raise BackendUnavailableError("Unable to connect to database")

    def update_equipment(self, item):
        raise BackendUnavailableError("Unable to connect to database")

    def insert_request(self, request):
        raise BackendUnavailableError("Unable to connect to database")

    def update_request(self, request):
        raise BackendUnavailableError("Unable to connect to database")


class NumberingBackend(FileBackend):
    """File backend that hands out its own identifiers, like a database."""

    def __init__(self, *args, first_id=100, **kwargs):
        super().__init__(*args, **kwargs)
        self._next = first_id

    def insert_equipment(self, item):
        self._next += 1
        return self._next - 1

    def insert_request(self, request):
        self._next += 1
        return self._next - 1


# ---------------------------------------------------------------------------
# validation
# ---------------------------------------------------------------------------


def test_validate_draft_strips_text_and_coerces_classification():
    clean = validate_draft(_draft(name="  Tent  ", classification=2))
    assert clean.name == "Tent"
    assert clean.classification is Classification.CONFIDENTIAL


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": ""},
        {"name": "   "},
        {"name": "x" * 64},
        {"description": "d" * 256},
        {"unit": "u" * 32},
        {"location": "l" * 64},
        {"quantity": -1},
        {"quantity": 1_000_000},
        {"quantity": "5"},
        {"quantity": True},
        {"min_threshold": -1},
        {"classification": 7},
    ],
)
def test_add_equipment_rejects_invalid_fields(store, overrides):
    with pytest.raises(ValidationError):
        store.add_equipment(_draft(**overrides))
    assert store.equipment_count == 0
    assert store.next_equipment_id == 1


def test_name_limit_counts_encoded_bytes(store):
    # 31 two-byte characters = 62 bytes fits, 32 = 64 bytes does not
    store.add_equipment(_draft(name="é" * 31))
    with pytest.raises(ValidationError):
        store.add_equipment(_draft(name="é" * 32))


# ---------------------------------------------------------------------------
# equipment
# ---------------------------------------------------------------------------


def test_add_equipment_assigns_sequential_ids_and_checksums(store):
    first = store.add_equipment(_draft())
    second = store.add_equipment(_draft(name="Rifle Cleaning Kit"))

    assert (first, second) == (1, 2)
    assert store.next_equipment_id == 3

    item = store.find_by_id(2)
    assert item.name == "Rifle Cleaning Kit"
    assert item.checksum == compute_checksum(item)
    assert item.last_updated.microsecond == 0


def test_add_equipment_capacity(file_backend):
    store = InventoryStore(file_backend, max_items=1)
    store.add_equipment(_draft())

    with pytest.raises(CapacityExceededError):
        store.add_equipment(_draft(name="Second"))
    assert store.equipment_count == 1


def test_update_quantity_refreshes_checksum(store):
    equipment_id = store.add_equipment(_draft(quantity=20))
    before = store.find_by_id(equipment_id).checksum

    item = store.update_quantity(equipment_id, 3)

    assert item.quantity == 3
    assert item.checksum == compute_checksum(item)
    assert item.checksum != before
    assert store.verify_checksums() == []


def test_update_quantity_errors(store):
    equipment_id = store.add_equipment(_draft(quantity=20))

    with pytest.raises(NotFoundError):
        store.update_quantity(99, 5)
    with pytest.raises(ValidationError):
        store.update_quantity(equipment_id, -4)

    assert store.find_by_id(equipment_id).quantity == 20


def test_find_by_id_missing(store):
    with pytest.raises(NotFoundError):
        store.find_by_id(1)


def test_search_is_case_insensitive_substring(store):
    store.add_equipment(_draft(name="Tent, Arctic 10-person"))
    store.add_equipment(_draft(name="TENT STAKES"))
    store.add_equipment(_draft(name="Stove"))

    assert store.search_by_name("tent").name in {"Tent, Arctic 10-person", "TENT STAKES"}
    assert [item.name for item in store.search_all_by_name("tent")] == [
        "Tent, Arctic 10-person",
        "TENT STAKES",
    ]
    assert store.search_by_name("arctic").id == 1
    assert store.search_by_name("Stove").id == 3


def test_search_misses_and_blank_query(store):
    store.add_equipment(_draft())

    with pytest.raises(NotFoundError):
        store.search_by_name("helicopter")
    with pytest.raises(ValidationError):
        store.search_by_name("  ")
    assert store.search_all_by_name("helicopter") == []


def test_list_low_stock_is_recomputed_and_idempotent(store):
    store.add_equipment(_draft(name="Water", quantity=50, min_threshold=10))
    store.add_equipment(_draft(name="Batteries", quantity=10, min_threshold=10))
    store.add_equipment(_draft(name="Rations", quantity=14, min_threshold=10))

    first = store.list_low_stock()
    second = store.list_low_stock()

    assert [item.name for item in first] == ["Batteries"]
    assert first == second
    assert store.low_stock_count == 1

    store.update_quantity(3, 2)
    assert [item.name for item in store.list_low_stock()] == ["Batteries", "Rations"]


# ---------------------------------------------------------------------------
# supply requests
# ---------------------------------------------------------------------------


def test_add_request_requires_existing_equipment(store):
    with pytest.raises(NotFoundError):
        store.add_request(99999, 5, "1st Platoon", Priority.HIGH)
    assert store.request_count == 0
    assert store.next_request_id == 1


def test_add_request_opens_pending_request(store):
    equipment_id = store.add_equipment(_draft())

    req_id = store.add_request(equipment_id, 5, "1st Platoon", 3)

    request = store.find_request(req_id)
    assert req_id == 1
    assert request.status is RequestStatus.PENDING
    assert request.priority is Priority.HIGH
    assert store.pending_request_count == 1


@pytest.mark.parametrize(
    "qty, unit, priority",
    [
        (0, "1st Platoon", 2),
        (5, "", 2),
        (5, "u" * 32, 2),
        (5, "1st Platoon", 0),
        (5, "1st Platoon", 5),
    ],
)
def test_add_request_rejects_invalid_fields(store, qty, unit, priority):
    equipment_id = store.add_equipment(_draft())
    with pytest.raises(ValidationError):
        store.add_request(equipment_id, qty, unit, priority)
    assert store.request_count == 0


def test_add_request_capacity(file_backend):
    store = InventoryStore(file_backend, max_requests=1)
    equipment_id = store.add_equipment(_draft())
    store.add_request(equipment_id, 1, "HQ", Priority.LOW)

    with pytest.raises(CapacityExceededError):
        store.add_request(equipment_id, 1, "HQ", Priority.LOW)


def test_request_lifecycle(store):
    equipment_id = store.add_equipment(_draft(quantity=20))
    req_id = store.add_request(equipment_id, 5, "HQ", Priority.NORMAL)

    assert store.approve_request(req_id).status is RequestStatus.APPROVED
    assert store.fulfill_request(req_id).status is RequestStatus.FULFILLED

    # Fulfilment is bookkeeping only
    assert store.find_by_id(equipment_id).quantity == 20
    assert store.pending_request_count == 0


def test_invalid_transitions(store):
    equipment_id = store.add_equipment(_draft())
    pending = store.add_request(equipment_id, 1, "HQ", Priority.LOW)
    denied = store.add_request(equipment_id, 1, "HQ", Priority.LOW)
    store.deny_request(denied)

    with pytest.raises(InvalidTransitionError):
        store.fulfill_request(pending)
    with pytest.raises(InvalidTransitionError):
        store.approve_request(denied)
    with pytest.raises(NotFoundError):
        store.approve_request(42)

    assert store.find_request(pending).status is RequestStatus.PENDING


# ---------------------------------------------------------------------------
# persistence through the store
# ---------------------------------------------------------------------------


def test_shutdown_saves_and_reload_continues_numbering(tmp_path):
    store = InventoryStore(FileBackend(tmp_path / "eq.dat", tmp_path / "rq.dat"))
    store.load()
    for name in ("Water", "Batteries", "Rations"):
        store.add_equipment(_draft(name=name))
    store.add_request(2, 4, "HQ", Priority.CRITICAL)
    store.shutdown()

    reloaded = InventoryStore(FileBackend(tmp_path / "eq.dat", tmp_path / "rq.dat"))
    reloaded.load()

    assert reloaded.equipment_count == 3
    assert reloaded.request_count == 1
    assert reloaded.next_equipment_id == 4
    assert reloaded.add_equipment(_draft(name="Stove")) == 4
    assert reloaded.add_request(4, 1, "HQ", Priority.LOW) == 2
    assert reloaded.search_by_name("batteries").id == 2
    assert reloaded.verify_checksums() == []


def test_load_moves_counter_past_highest_stored_id(tmp_path):
    backend = FileBackend(tmp_path / "eq.dat", tmp_path / "rq.dat")
    store = InventoryStore(backend)
    store.add_equipment(_draft())
    item = store.find_by_id(1)
    item.id = 7
    item.checksum = compute_checksum(item)
    # Stale counter in the header
    backend.save([item], [], 1, 1)

    reloaded = InventoryStore(backend)
    reloaded.load()

    assert reloaded.next_equipment_id == 8
    assert reloaded.add_equipment(_draft(name="Stove")) == 8


def test_load_truncates_to_capacity(tmp_path):
    backend = FileBackend(tmp_path / "eq.dat", tmp_path / "rq.dat")
    store = InventoryStore(backend)
    for name in ("A", "B", "C"):
        store.add_equipment(_draft(name=name))
    store.save()

    small = InventoryStore(backend, max_items=2)
    small.load()

    assert [item.name for item in small.list_equipment()] == ["A", "B"]
    assert small.next_equipment_id == 4


def test_shutdown_is_idempotent_and_context_manager(tmp_path):
    backend = FileBackend(tmp_path / "eq.dat", tmp_path / "rq.dat")
    with InventoryStore(backend) as store:
        store.add_equipment(_draft())
    store.shutdown()

    assert (tmp_path / "eq.dat").exists()


def test_shutdown_surfaces_save_failure(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    store = InventoryStore(FileBackend(blocker / "eq.dat", blocker / "rq.dat"))
    store.add_equipment(_draft())

    with pytest.raises(StorageIOError):
        store.shutdown()


# ---------------------------------------------------------------------------
# backends that assign ids or fail
# ---------------------------------------------------------------------------


def test_backend_assigned_ids_are_adopted(tmp_path):
    store = InventoryStore(NumberingBackend(tmp_path / "eq.dat", tmp_path / "rq.dat"))

    equipment_id = store.add_equipment(_draft())
    item = store.find_by_id(equipment_id)

    assert equipment_id == 100
    assert item.checksum == compute_checksum(item)
    assert store.next_equipment_id == 101
    assert store.search_by_name("tent") is item
    assert store.add_request(100, 1, "HQ", Priority.LOW) == 101


def test_failed_insert_leaves_store_untouched(tmp_path):
    store = InventoryStore(FailingWritesBackend(tmp_path / "eq.dat", tmp_path / "rq.dat"))

    with pytest.raises(BackendUnavailableError):
        store.add_equipment(_draft())

    assert store.equipment_count == 0
    assert store.next_equipment_id == 1


def test_failed_update_is_kept_in_memory(tmp_path, file_backend):
    store = InventoryStore(file_backend)
    equipment_id = store.add_equipment(_draft(quantity=20))
    req_id = store.add_request(equipment_id, 1, "HQ", Priority.LOW)
    store.backend = FailingWritesBackend(tmp_path / "eq.dat", tmp_path / "rq.dat")

    with pytest.raises(BackendUnavailableError):
        store.update_quantity(equipment_id, 2)
    with pytest.raises(BackendUnavailableError):
        store.approve_request(req_id)

    item = store.find_by_id(equipment_id)
    assert item.quantity == 2
    assert item.checksum == compute_checksum(item)
    assert store.find_request(req_id).status is RequestStatus.APPROVED


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "Tent\x00Poles"},
        {"description": "two\nlines"},
        {"unit": "ea\x07"},
        {"location": "Depot\tA"},
    ],
)
def test_control_characters_are_rejected(store, overrides):
    with pytest.raises(ValidationError):
        store.add_equipment(_draft(**overrides))
    assert store.equipment_count == 0


def test_control_characters_in_requesting_unit_are_rejected(store):
    equipment_id = store.add_equipment(_draft())
    with pytest.raises(ValidationError):
        store.add_request(equipment_id, 1, "HQ\x00", Priority.LOW)


def test_saved_names_reload_unchanged(tmp_path):
    backend = FileBackend(tmp_path / "eq.dat", tmp_path / "rq.dat")
    store = InventoryStore(backend)
    store.add_equipment(_draft(name="  Tent (Poles) [x2]  "))
    store.shutdown()

    reloaded = InventoryStore(backend)
    reloaded.load()

    assert reloaded.find_by_id(1).name == "Tent (Poles) [x2]"
    assert reloaded.verify_checksums() == []
