from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime
from supply_tracker.database.base import Base
from supply_tracker.validation_rules import EquipmentRules


class EquipmentRow(Base):
    __tablename__ = "equipment"

    # Assigned by the database, handed back to the store
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)

    name = Column(String(EquipmentRules.NAME_WIDTH), nullable=False)
    description = Column(String(EquipmentRules.DESCRIPTION_WIDTH), nullable=False, default="")
    quantity = Column(Integer, nullable=False, default=0)
    min_threshold = Column(Integer, nullable=False, default=0)
    unit = Column(String(EquipmentRules.UNIT_WIDTH), nullable=False, default="")
    location = Column(String(EquipmentRules.LOCATION_WIDTH), nullable=False, default="")

    # 0=UNCLASSIFIED .. 3=SECRET
    classification = Column(Integer, nullable=False, default=0)
    checksum = Column(String(EquipmentRules.CHECKSUM_WIDTH), nullable=False)

    last_updated = Column(DateTime, default=datetime.now, nullable=False)

    def __repr__(self):
        return (
            f"EquipmentRow(id={self.id}, name='{self.name}', "
            f"qty={self.quantity}, min={self.min_threshold}, "
            f"checksum='{self.checksum}', last_updated='{self.last_updated}')"
        )
