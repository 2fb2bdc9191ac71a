from sqlalchemy.orm import Session
from supply_tracker.database.models import EquipmentRow


# 1. Create equipment row (database assigns the id)
def create_equipment(
    db: Session,
    name: str,
    description: str,
    quantity: int,
    min_threshold: int,
    unit: str,
    location: str,
    classification: int,
    checksum: str,
    last_updated,
):
    row = EquipmentRow(
        name=name,
        description=description,
        quantity=quantity,
        min_threshold=min_threshold,
        unit=unit,
        location=location,
        classification=classification,
        checksum=checksum,
        last_updated=last_updated,
    )

    db.add(row)
    db.flush()  # Assign id without committing

    return row


# 2. Get equipment by ID
def get_equipment_by_id(db: Session, equipment_id: int):
    return db.query(EquipmentRow).filter(EquipmentRow.id == equipment_id).first()


# 3. Get all equipment in id order
def get_all_equipment(db: Session):
    return db.query(EquipmentRow).order_by(EquipmentRow.id).all()


# 4. Update stock fields (quantity change recomputes checksum + timestamp)
def update_equipment_stock(db: Session, equipment_id: int, quantity: int, checksum: str, last_updated):
    row = get_equipment_by_id(db, equipment_id)
    if not row:
        return None

    row.quantity = quantity
    row.checksum = checksum
    row.last_updated = last_updated
    db.flush()
    return row
