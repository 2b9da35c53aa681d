from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, String

from overtime_api.db.session import Base

ROLE_ADMIN = "admin"
ROLE_EMPLOYEE = "employee"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    email = Column(String(254), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Profile fields shown on the admin dashboard
    full_name = Column(String(100), nullable=False)
    cpf = Column(String(11), nullable=False, unique=True)

    role = Column(String(20), nullable=False, default=ROLE_EMPLOYEE)  # admin|employee

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
