from .equipment import EquipmentRow
from .supply_request import SupplyRequestRow
from .audit_log import AuditLog

__all__ = [
    "EquipmentRow",
    "SupplyRequestRow",
    "AuditLog",
]
