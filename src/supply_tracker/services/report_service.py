# services/report_service.py

"""
Plain-text inventory report, written on demand and never read back.
"""

from datetime import datetime
from pathlib import Path

from supply_tracker.checksum import stock_status
from supply_tracker.exceptions import StorageIOError
from supply_tracker.logging_config import get_logger

logger = get_logger(__name__)

REPORT_TITLE = "TACTICAL SUPPLY INVENTORY REPORT"


def equipment_line(item) -> str:
    return (
        f"ID: {item.id} | {item.name} | Qty: {item.quantity} {item.unit} | "
        f"Location: {item.location} | Status: {stock_status(item).name} | "
        f"Class: {item.classification.name}"
    )


def request_line(request) -> str:
    return (
        f"REQ-{request.req_id} | Equipment ID: {request.equipment_id} | "
        f"Qty: {request.requested_qty} | Unit: {request.requesting_unit} | "
        f"Priority: {request.priority.name} | Status: {request.status.name} | "
        f"Requested: {request.request_time.strftime('%Y-%m-%d %H:%M:%S')}"
    )


def build_report(store) -> str:
    """
    Render the report text for the store's current state.

    Args:
        store: InventoryStore

    Returns:
        Report body, newline terminated
    """
    equipment = store.list_equipment()
    requests = store.list_requests()

    lines = [
        REPORT_TITLE,
        f"Generated: {datetime.now().strftime('%a %b %d %H:%M:%S %Y')}",
        f"Data Source: {store.backend_name}",
        "================================",
        "",
        "INVENTORY SUMMARY:",
        f"Total Items: {len(equipment)}",
        f"Items requiring resupply: {store.low_stock_count}",
        "",
        "DETAILED INVENTORY:",
    ]
    lines.extend(equipment_line(item) for item in equipment)

    lines.extend([
        "",
        "SUPPLY REQUESTS:",
        f"Total Requests: {len(requests)} ({store.pending_request_count} pending)",
    ])
    lines.extend(request_line(request) for request in requests)

    return "\n".join(lines) + "\n"


def export_report(store, path) -> Path:
    """
    Write the report to path (overwriting) and audit the export.

    Raises:
        StorageIOError: the file could not be written
    """
    path = Path(path)
    content = build_report(store)

    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.error(f"Error creating report file {path}: {e}", exc_info=True)
        raise StorageIOError(f"Could not write report to {path}") from e

    store.log_action("Inventory report exported")
    return path
