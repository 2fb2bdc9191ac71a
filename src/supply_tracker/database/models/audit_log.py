from sqlalchemy import Column, Integer, String, DateTime, Text, func
from supply_tracker.database.base import Base


class AuditLog(Base):
    __tablename__ = "audit_log"

    log_id = Column(Integer, primary_key=True, autoincrement=True)

    action = Column(Text, nullable=False)
    user_info = Column(String(64), nullable=False, default="system")

    timestamp = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return (
            f"AuditLog(id={self.log_id}, action='{self.action}', "
            f"user='{self.user_info}', timestamp='{self.timestamp}')"
        )
