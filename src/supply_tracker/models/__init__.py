from .enums import Classification, Priority, RequestStatus, StockStatus, REQUEST_TRANSITIONS
from .equipment import Equipment, EquipmentDraft
from .supply_request import SupplyRequest

__all__ = [
    "Classification",
    "Priority",
    "RequestStatus",
    "StockStatus",
    "REQUEST_TRANSITIONS",
    "Equipment",
    "EquipmentDraft",
    "SupplyRequest",
]
