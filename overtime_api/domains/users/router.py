from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from overtime_api.db.session import get_session
from overtime_api.domains.auth.dependencies import require_admin
from overtime_api.models.user import User

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


class UserOut(BaseModel):
    id: str
    email: str
    full_name: str
    cpf: str
    role: Literal["admin", "employee"]
    created_at: datetime


def _sanitize(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        cpf=user.cpf,
        role=user.role,
        created_at=user.created_at or datetime.utcnow(),
    )


@router.get("", response_model=list[UserOut])
def list_users(db: Session = Depends(get_session)) -> list[UserOut]:
    users = db.query(User).order_by(User.created_at.desc(), User.full_name).all()
    return [_sanitize(user) for user in users]
