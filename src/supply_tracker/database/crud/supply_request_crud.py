from sqlalchemy.orm import Session
from supply_tracker.database.models import SupplyRequestRow


# 1. Create a supply request row (database assigns req_id)
def create_request(
    db: Session,
    equipment_id: int,
    requested_qty: int,
    requesting_unit: str,
    status: int,
    priority: int,
    request_time,
):
    row = SupplyRequestRow(
        equipment_id=equipment_id,
        requested_qty=requested_qty,
        requesting_unit=requesting_unit,
        status=status,
        priority=priority,
        request_time=request_time,
    )

    db.add(row)
    db.flush()  # Assign req_id safely

    return row


# 2. Get request by ID
def get_request_by_id(db: Session, req_id: int):
    return db.query(SupplyRequestRow).filter(SupplyRequestRow.req_id == req_id).first()


# 3. Get all requests in id order
def get_all_requests(db: Session):
    return db.query(SupplyRequestRow).order_by(SupplyRequestRow.req_id).all()


# 4. Update request status
def update_request_status(db: Session, req_id: int, status: int):
    row = get_request_by_id(db, req_id)
    if not row:
        return None

    row.status = status
    db.flush()
    return row
