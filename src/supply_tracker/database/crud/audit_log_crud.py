from sqlalchemy.orm import Session
from supply_tracker.database.models import AuditLog


# 1. Record an action
def create_audit_entry(db: Session, action: str, user_info: str = "system"):
    entry = AuditLog(action=action, user_info=user_info)

    db.add(entry)
    db.flush()

    return entry


# 2. Most recent actions first
def get_recent_entries(db: Session, limit: int = 50):
    return (
        db.query(AuditLog)
        .order_by(AuditLog.log_id.desc())
        .limit(limit)
        .all()
    )
