from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Numeric, String, Time
from sqlalchemy.orm import relationship

from overtime_api.db.session import Base


class OvertimeRecord(Base):
    __tablename__ = "overtime_records"
    __table_args__ = (
        CheckConstraint("total_hours > 0", name="overtime_records_hours_positive"),
        CheckConstraint("net_hours > 0", name="overtime_records_net_hours_positive"),
        CheckConstraint("total_value > 0", name="overtime_records_value_positive"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    total_hours = Column(Numeric(5, 2), nullable=False)
    lunch_discount = Column(Boolean, nullable=False, default=False)
    net_hours = Column(Numeric(5, 2), nullable=False)
    hourly_rate = Column(Numeric(10, 2), nullable=False)  # rate in force when the record was created
    total_value = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User")
