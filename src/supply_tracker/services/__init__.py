from .inventory_service import InventoryStore, validate_draft
from .audit_service import AuditTrail
from . import report_service

__all__ = [
    "InventoryStore",
    "validate_draft",
    "AuditTrail",
    "report_service",
]
