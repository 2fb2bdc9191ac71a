# supply_request.py
from dataclasses import dataclass
from datetime import datetime

from .enums import Priority, RequestStatus


@dataclass
class SupplyRequest:
    """
    A request for more of one equipment item.

    equipment_id is checked against the inventory only when the request
    is created. request_time never changes after that.
    """

    req_id: int
    equipment_id: int
    requested_qty: int
    requesting_unit: str
    priority: Priority
    request_time: datetime
    status: RequestStatus = RequestStatus.PENDING
