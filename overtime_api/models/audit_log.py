from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, String

from overtime_api.db.session import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(36), nullable=True, index=True)
    action = Column(String(10), nullable=False)  # INSERT|UPDATE|DELETE
    table_name = Column(String(50), nullable=True)
    record_id = Column(String(36), nullable=True)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
