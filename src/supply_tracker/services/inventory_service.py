# services/inventory_service.py

"""
Inventory Store - owns every equipment record and supply request.

This layer handles:
- Identifier assignment (locally, or accepted from the database backend)
- Field validation against validation_rules
- Derived fields (checksum, last_updated) on every mutation
- The name index used by search
- Delegating durable writes to the active backend
- One audit line per mutation

Records live in insertion-ordered dicts keyed by identifier. Nothing
outside the store holds a record reference it relies on; the name index
keeps identifiers and asks the store for the record.
"""

from datetime import datetime
from typing import Dict, List

from supply_tracker.checksum import compute_checksum, stock_status
from supply_tracker.exceptions import (
    BackendUnavailableError,
    CapacityExceededError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from supply_tracker.logging_config import get_logger
from supply_tracker.models import (
    REQUEST_TRANSITIONS,
    Classification,
    Equipment,
    EquipmentDraft,
    Priority,
    RequestStatus,
    StockStatus,
    SupplyRequest,
)
from supply_tracker.name_index import NameIndex
from supply_tracker.validation_rules import (
    CONTROL_CHARACTER_ERROR,
    EquipmentRules,
    RequestRules,
    encoded_length,
    has_control_characters,
)

logger = get_logger(__name__)

DEFAULT_MAX_ITEMS = 1000
DEFAULT_MAX_REQUESTS = 500


def _now() -> datetime:
    # Second resolution, matching what the file backend can store
    return datetime.now().replace(microsecond=0)


# ============================================================================
# VALIDATION
# ============================================================================


def _check_text(value, max_length: int, error: str, required_error: str = None) -> str:
    if not isinstance(value, str):
        raise ValidationError(error)
    value = value.strip()
    if required_error and not value:
        raise ValidationError(required_error)
    if has_control_characters(value):
        raise ValidationError(CONTROL_CHARACTER_ERROR)
    if encoded_length(value) > max_length:
        raise ValidationError(error)
    return value


def _check_range(value, minimum: int, maximum: int, error: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(error)
    if value < minimum or value > maximum:
        raise ValidationError(error)
    return value


def validate_draft(draft: EquipmentDraft) -> EquipmentDraft:
    """
    Check every field of a new equipment record.

    Returns:
        A cleaned copy (text stripped, classification as enum)

    Raises:
        ValidationError: first field found out of bounds
    """
    errors = EquipmentRules.ERRORS

    name = _check_text(draft.name, EquipmentRules.NAME_MAX, errors["name_too_long"], errors["name_required"])
    description = _check_text(draft.description, EquipmentRules.DESCRIPTION_MAX, errors["description_too_long"])
    unit = _check_text(draft.unit, EquipmentRules.UNIT_MAX, errors["unit_too_long"])
    location = _check_text(draft.location, EquipmentRules.LOCATION_MAX, errors["location_too_long"])

    quantity = _check_range(
        draft.quantity, EquipmentRules.QUANTITY_MIN, EquipmentRules.QUANTITY_MAX, errors["quantity_range"]
    )
    min_threshold = _check_range(
        draft.min_threshold, EquipmentRules.THRESHOLD_MIN, EquipmentRules.THRESHOLD_MAX, errors["threshold_range"]
    )

    try:
        classification = Classification(draft.classification)
    except ValueError as e:
        raise ValidationError(errors["classification"]) from e

    return EquipmentDraft(
        name=name,
        description=description,
        quantity=quantity,
        min_threshold=min_threshold,
        unit=unit,
        location=location,
        classification=classification,
    )


class InventoryStore:
    def __init__(self, backend, audit=None, max_items=DEFAULT_MAX_ITEMS, max_requests=DEFAULT_MAX_REQUESTS):
        """
        Args:
            backend: active PersistenceBackend
            audit: AuditTrail, or None to skip audit lines
            max_items / max_requests: collection capacities
        """
        self.backend = backend
        self.audit = audit
        self.max_items = max_items
        self.max_requests = max_requests

        self._equipment: Dict[int, Equipment] = {}
        self._requests: Dict[int, SupplyRequest] = {}
        self._index = NameIndex(self._equipment.get)

        self._next_equipment_id = 1
        self._next_request_id = 1
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()

    # ========================================================================
    # STARTUP / SHUTDOWN
    # ========================================================================

    def load(self) -> None:
        """
        Replace in-memory state with the backend's durable state.

        Counters end up strictly above every loaded identifier, including
        records dropped for exceeding capacity.
        """
        state = self.backend.load()

        highest_item = max((item.id for item in state.equipment), default=0)
        highest_request = max((req.req_id for req in state.requests), default=0)

        equipment = state.equipment
        if len(equipment) > self.max_items:
            logger.warning(
                f"Storage contains {len(equipment)} equipment items, more than the "
                f"maximum. Truncating to {self.max_items}."
            )
            equipment = equipment[: self.max_items]

        requests = state.requests
        if len(requests) > self.max_requests:
            logger.warning(
                f"Storage contains {len(requests)} supply requests, more than the "
                f"maximum. Truncating to {self.max_requests}."
            )
            requests = requests[: self.max_requests]

        self._equipment.clear()
        self._equipment.update((item.id, item) for item in equipment)
        self._requests.clear()
        self._requests.update((req.req_id, req) for req in requests)

        self._index.rebuild(self._equipment.values())

        self._next_equipment_id = max(state.next_equipment_id, highest_item + 1, 1)
        self._next_request_id = max(state.next_request_id, highest_request + 1, 1)

        drifted = self.verify_checksums()
        if drifted:
            logger.warning(f"Checksum mismatch on loaded equipment IDs: {drifted}")

        logger.info(
            f"Store ready with {len(self._equipment)} equipment items and "
            f"{len(self._requests)} requests ({self.backend.name})"
        )

    def save(self) -> None:
        """Hand the full state to the backend (a no-op for the database)."""
        self.backend.save(
            list(self._equipment.values()),
            list(self._requests.values()),
            self._next_equipment_id,
            self._next_request_id,
        )

    def shutdown(self) -> None:
        """
        Save, write the shutdown audit line and release the backend.

        Raises:
            StorageIOError: the bulk save failed (resources are still released)
        """
        if self._closed:
            return
        self._closed = True

        try:
            self.save()
        finally:
            self.log_action("System shutdown")
            if self.audit is not None:
                self.audit.close()
            self.backend.close()

    # ========================================================================
    # AUDIT
    # ========================================================================

    def log_action(self, message: str) -> None:
        logger.info(message)
        if self.audit is not None:
            self.audit.record(message)

    # ========================================================================
    # EQUIPMENT
    # ========================================================================

    def add_equipment(self, draft: EquipmentDraft) -> int:
        """
        Validate, number, persist and index a new equipment record.

        Returns:
            The new equipment id (database-assigned when the backend is one)

        Raises:
            CapacityExceededError, ValidationError, BackendUnavailableError
        """
        if len(self._equipment) >= self.max_items:
            raise CapacityExceededError(f"Maximum equipment limit ({self.max_items}) reached")

        clean = validate_draft(draft)

        item = Equipment(
            id=self._next_equipment_id,
            name=clean.name,
            description=clean.description,
            quantity=clean.quantity,
            min_threshold=clean.min_threshold,
            unit=clean.unit,
            location=clean.location,
            classification=clean.classification,
            last_updated=_now(),
        )
        item.checksum = compute_checksum(item)

        # Durable first: a failed insert leaves the store and counter untouched
        db_id = self.backend.insert_equipment(item)
        if db_id is not None and db_id != item.id:
            item.id = db_id
            item.checksum = compute_checksum(item)

        self._next_equipment_id = max(self._next_equipment_id, item.id + 1)

        self._equipment[item.id] = item
        self._index.insert(item)

        self.log_action(f"Added equipment: {item.name} (ID: {item.id})")
        return item.id

    def update_quantity(self, equipment_id: int, new_qty: int) -> Equipment:
        """
        Overwrite the quantity of one record.

        Raises:
            NotFoundError: no record with equipment_id
            ValidationError: new_qty out of range
            BackendUnavailableError: write-through failed; the new quantity
                is kept in memory
        """
        item = self.find_by_id(equipment_id)
        _check_range(
            new_qty,
            EquipmentRules.QUANTITY_MIN,
            EquipmentRules.QUANTITY_MAX,
            EquipmentRules.ERRORS["quantity_range"],
        )

        old_qty = item.quantity
        item.quantity = new_qty
        item.last_updated = _now()
        item.checksum = compute_checksum(item)

        try:
            self.backend.update_equipment(item)
        except BackendUnavailableError:
            logger.warning(f"Quantity of equipment {item.id} changed in memory only")
            raise
        finally:
            self.log_action(f"Updated {item.name} quantity: {old_qty} -> {new_qty}")

        return item

    def find_by_id(self, equipment_id: int) -> Equipment:
        item = self._equipment.get(equipment_id)
        if item is None:
            raise NotFoundError(f"Equipment ID {equipment_id} not found")
        return item

    def search_by_name(self, query: str) -> Equipment:
        """
        First equipment whose name contains query (case-insensitive).

        The name index is tried first; on a miss every record is scanned,
        so the result never depends on which hash bucket a name landed in.
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search term is required")

        item = self._index.find(query)
        if item is not None:
            return item

        needle = query.lower()
        for item in self._equipment.values():
            if needle in item.name.lower():
                return item

        raise NotFoundError(f"No equipment found matching '{query}'")

    def search_all_by_name(self, query: str) -> List[Equipment]:
        """Every matching record in insertion order (may be empty)."""
        needle = (query or "").strip().lower()
        if not needle:
            raise ValidationError("Search term is required")
        return [item for item in self._equipment.values() if needle in item.name.lower()]

    def list_equipment(self) -> List[Equipment]:
        return list(self._equipment.values())

    def list_low_stock(self) -> List[Equipment]:
        """Records at or below their threshold, recomputed on every call."""
        return [item for item in self._equipment.values() if stock_status(item) == StockStatus.LOW]

    def verify_checksums(self) -> List[int]:
        """Ids whose stored checksum no longer matches their fields."""
        return [item.id for item in self._equipment.values() if item.checksum != compute_checksum(item)]

    # ========================================================================
    # SUPPLY REQUESTS
    # ========================================================================

    def add_request(self, equipment_id: int, qty: int, unit: str, priority) -> int:
        """
        Open a PENDING supply request against an existing equipment record.

        Returns:
            The new request id

        Raises:
            CapacityExceededError, NotFoundError, ValidationError,
            BackendUnavailableError
        """
        if len(self._requests) >= self.max_requests:
            raise CapacityExceededError(f"Maximum request limit ({self.max_requests}) reached")

        self.find_by_id(equipment_id)

        _check_range(qty, RequestRules.QUANTITY_MIN, RequestRules.QUANTITY_MAX, RequestRules.ERRORS["quantity_range"])
        unit = _check_text(unit, RequestRules.UNIT_MAX, RequestRules.ERRORS["unit_too_long"], RequestRules.ERRORS["unit_required"])
        try:
            priority = Priority(priority)
        except ValueError as e:
            raise ValidationError(RequestRules.ERRORS["priority"]) from e

        request = SupplyRequest(
            req_id=self._next_request_id,
            equipment_id=equipment_id,
            requested_qty=qty,
            requesting_unit=unit,
            priority=priority,
            request_time=_now(),
            status=RequestStatus.PENDING,
        )

        db_id = self.backend.insert_request(request)
        if db_id is not None:
            request.req_id = db_id

        self._next_request_id = max(self._next_request_id, request.req_id + 1)
        self._requests[request.req_id] = request

        self.log_action(f"Supply request created: REQ-{request.req_id} for equipment ID {equipment_id}")
        return request.req_id

    def find_request(self, req_id: int) -> SupplyRequest:
        request = self._requests.get(req_id)
        if request is None:
            raise NotFoundError(f"Supply request REQ-{req_id} not found")
        return request

    def list_requests(self) -> List[SupplyRequest]:
        return list(self._requests.values())

    def approve_request(self, req_id: int) -> SupplyRequest:
        return self._transition(req_id, RequestStatus.APPROVED)

    def deny_request(self, req_id: int) -> SupplyRequest:
        return self._transition(req_id, RequestStatus.DENIED)

    def fulfill_request(self, req_id: int) -> SupplyRequest:
        """Mark an APPROVED request FULFILLED. Stock levels are not touched."""
        return self._transition(req_id, RequestStatus.FULFILLED)

    def _transition(self, req_id: int, new_status: RequestStatus) -> SupplyRequest:
        request = self.find_request(req_id)
        old_status = request.status

        if new_status not in REQUEST_TRANSITIONS[old_status]:
            raise InvalidTransitionError(
                f"REQ-{req_id} is {old_status.name} and cannot become {new_status.name}"
            )

        request.status = new_status

        try:
            self.backend.update_request(request)
        except BackendUnavailableError:
            logger.warning(f"Status of REQ-{req_id} changed in memory only")
            raise
        finally:
            self.log_action(f"Request REQ-{req_id} status: {old_status.name} -> {new_status.name}")

        return request

    # ========================================================================
    # COUNTS
    # ========================================================================

    @property
    def backend_name(self) -> str:
        return self.backend.name

    @property
    def equipment_count(self) -> int:
        return len(self._equipment)

    @property
    def request_count(self) -> int:
        return len(self._requests)

    @property
    def pending_request_count(self) -> int:
        return sum(1 for req in self._requests.values() if req.status == RequestStatus.PENDING)

    @property
    def low_stock_count(self) -> int:
        return len(self.list_low_stock())

    @property
    def next_equipment_id(self) -> int:
        return self._next_equipment_id

    @property
    def next_request_id(self) -> int:
        return self._next_request_id
