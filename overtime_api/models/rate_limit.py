from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from overtime_api.db.session import Base


class RateLimitEntry(Base):
    __tablename__ = "rate_limits"
    __table_args__ = (UniqueConstraint("identifier", "action", "window_start"),)

    id = Column(Integer, primary_key=True, index=True)
    identifier = Column(String(254), nullable=False, index=True)
    action = Column(String(50), nullable=False)  # login|signup|api_call
    attempts = Column(Integer, nullable=False, default=1)
    window_start = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
