from .equipment_crud import *
from .supply_request_crud import *
from .audit_log_crud import *

__all__ = [
    # Equipment CRUD
    "create_equipment",
    "get_equipment_by_id",
    "get_all_equipment",
    "update_equipment_stock",

    # Supply Request CRUD
    "create_request",
    "get_request_by_id",
    "get_all_requests",
    "update_request_status",

    # Audit Log CRUD
    "create_audit_entry",
    "get_recent_entries",
]
