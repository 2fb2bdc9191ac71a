"""
Flat-file backend.

Two binary tables, each laid out as:

    int32 count | int32 next_id | count x fixed-width record

Everything is little-endian. Text slots are UTF-8, NUL padded, and
timestamps are int64 epoch seconds. The store assigns identifiers
itself, so nothing is written until save() runs at shutdown.
"""

import os
import struct
from datetime import datetime
from pathlib import Path
from typing import List

from supply_tracker.exceptions import StorageIOError
from supply_tracker.logging_config import get_logger
from supply_tracker.models import (
    Classification,
    Equipment,
    Priority,
    RequestStatus,
    SupplyRequest,
)
from supply_tracker.storage.base import LoadedState, PersistenceBackend
from supply_tracker.validation_rules import EquipmentRules, RequestRules

logger = get_logger(__name__)

HEADER = struct.Struct("<ii")

# id, name, description, quantity, min_threshold, unit, location,
# last_updated, classification, checksum
EQUIPMENT_RECORD = struct.Struct(
    f"<i{EquipmentRules.NAME_WIDTH}s{EquipmentRules.DESCRIPTION_WIDTH}sii"
    f"{EquipmentRules.UNIT_WIDTH}s{EquipmentRules.LOCATION_WIDTH}sqi"
    f"{EquipmentRules.CHECKSUM_WIDTH}s"
)

# req_id, equipment_id, requested_qty, requesting_unit, request_time,
# status, priority
REQUEST_RECORD = struct.Struct(f"<iii{RequestRules.UNIT_WIDTH}sqii")


def _pack_text(value: str) -> bytes:
    # struct pads with NULs up to the slot width
    return value.encode("utf-8")


def _unpack_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def _pack_time(value: datetime) -> int:
    return int(value.timestamp())


def _unpack_time(value: int) -> datetime:
    return datetime.fromtimestamp(value)


def encode_equipment(item: Equipment) -> bytes:
    return EQUIPMENT_RECORD.pack(
        item.id,
        _pack_text(item.name),
        _pack_text(item.description),
        item.quantity,
        item.min_threshold,
        _pack_text(item.unit),
        _pack_text(item.location),
        _pack_time(item.last_updated),
        int(item.classification),
        _pack_text(item.checksum),
    )


def decode_equipment(fields) -> Equipment:
    (item_id, name, description, quantity, min_threshold,
     unit, location, last_updated, classification, checksum) = fields
    return Equipment(
        id=item_id,
        name=_unpack_text(name),
        description=_unpack_text(description),
        quantity=quantity,
        min_threshold=min_threshold,
        unit=_unpack_text(unit),
        location=_unpack_text(location),
        classification=Classification(classification),
        last_updated=_unpack_time(last_updated),
        checksum=_unpack_text(checksum),
    )


def encode_request(request: SupplyRequest) -> bytes:
    return REQUEST_RECORD.pack(
        request.req_id,
        request.equipment_id,
        request.requested_qty,
        _pack_text(request.requesting_unit),
        _pack_time(request.request_time),
        int(request.status),
        int(request.priority),
    )


def decode_request(fields) -> SupplyRequest:
    req_id, equipment_id, requested_qty, unit, request_time, status, priority = fields
    return SupplyRequest(
        req_id=req_id,
        equipment_id=equipment_id,
        requested_qty=requested_qty,
        requesting_unit=_unpack_text(unit),
        request_time=_unpack_time(request_time),
        status=RequestStatus(status),
        priority=Priority(priority),
    )


def read_table(path: Path, record: struct.Struct):
    """
    Read one table file.

    Returns:
        (list of unpacked tuples, stored next_id). A missing file is an
        empty table with next_id 1.

    Raises:
        StorageIOError: unreadable or truncated file
    """
    if not path.exists():
        return [], 1

    try:
        data = path.read_bytes()
    except OSError as e:
        logger.error(f"Could not read {path}: {e}", exc_info=True)
        raise StorageIOError(f"Could not read {path}") from e

    if len(data) < HEADER.size:
        raise StorageIOError(f"{path} is truncated (no header)")

    count, next_id = HEADER.unpack_from(data, 0)
    if count < 0 or len(data) < HEADER.size + count * record.size:
        raise StorageIOError(f"{path} is truncated: header says {count} records")

    rows = [
        record.unpack_from(data, HEADER.size + i * record.size)
        for i in range(count)
    ]
    return rows, next_id


def write_table(path: Path, next_id: int, encoded: List[bytes]) -> None:
    """Replace path with a new table; the old file survives a failed write."""
    payload = HEADER.pack(len(encoded), next_id) + b"".join(encoded)
    tmp_path = path.with_name(path.name + ".tmp")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "wb") as f:
            f.write(payload)
        os.replace(tmp_path, path)
    except OSError as e:
        logger.error(f"Could not write {path}: {e}", exc_info=True)
        raise StorageIOError(f"Could not write {path}") from e


class FileBackend(PersistenceBackend):
    name = "Local Files"

    def __init__(self, equipment_path, request_path):
        self.equipment_path = Path(equipment_path)
        self.request_path = Path(request_path)

    def load(self) -> LoadedState:
        equipment_rows, next_equipment_id = read_table(self.equipment_path, EQUIPMENT_RECORD)
        request_rows, next_request_id = read_table(self.request_path, REQUEST_RECORD)

        try:
            equipment = [decode_equipment(row) for row in equipment_rows]
            requests = [decode_request(row) for row in request_rows]
        except ValueError as e:
            # Enum value outside its range: the file is not one we wrote
            raise StorageIOError(f"Corrupt record in local data files: {e}") from e

        logger.info(f"Loaded {len(equipment)} equipment items from {self.equipment_path}")
        logger.info(f"Loaded {len(requests)} supply requests from {self.request_path}")

        return LoadedState(
            equipment=equipment,
            requests=requests,
            next_equipment_id=next_equipment_id,
            next_request_id=next_request_id,
        )

    def save(self, equipment, requests, next_equipment_id, next_request_id) -> None:
        write_table(
            self.equipment_path,
            next_equipment_id,
            [encode_equipment(item) for item in equipment],
        )
        write_table(
            self.request_path,
            next_request_id,
            [encode_request(request) for request in requests],
        )
        logger.info(f"Data saved to local files ({len(equipment)} items, {len(requests)} requests)")

    # Mutations are buffered in the store until save()
    def insert_equipment(self, item):
        return None

    def update_equipment(self, item):
        pass

    def insert_request(self, request):
        return None

    def update_request(self, request):
        pass
