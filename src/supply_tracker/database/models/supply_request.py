from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from datetime import datetime
from supply_tracker.database.base import Base
from supply_tracker.validation_rules import RequestRules


class SupplyRequestRow(Base):
    __tablename__ = "supply_requests"

    req_id = Column(Integer, primary_key=True, autoincrement=True, index=True)

    equipment_id = Column(Integer, ForeignKey("equipment.id"), nullable=False)

    requested_qty = Column(Integer, nullable=False)
    requesting_unit = Column(String(RequestRules.UNIT_WIDTH), nullable=False)

    status = Column(Integer, nullable=False, default=0)    # 0=PENDING .. 3=DENIED
    priority = Column(Integer, nullable=False, default=2)  # 1=LOW .. 4=CRITICAL

    request_time = Column(DateTime, default=datetime.now, nullable=False)

    def __repr__(self):
        return (
            f"SupplyRequestRow(req_id={self.req_id}, equipment_id={self.equipment_id}, "
            f"qty={self.requested_qty}, unit='{self.requesting_unit}', "
            f"status={self.status}, priority={self.priority})"
        )
