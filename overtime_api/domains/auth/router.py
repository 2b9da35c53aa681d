from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from overtime.rate_limit import RateLimiter
from overtime.security import (
    CSRFTokenStore,
    inspect_input,
    is_valid_cpf,
    is_valid_email,
    normalize_cpf,
    sanitize_input,
    validate_password,
)
from overtime_api.core.config import Settings
from overtime_api.core.logging import get_logger
from overtime_api.db.session import get_session
from overtime_api.domains.auth.dependencies import (
    get_app_settings,
    get_csrf_store,
    get_current_session,
    get_current_user,
    get_login_limiter,
    hash_password,
    issue_session,
    verify_csrf,
    verify_password,
)
from overtime_api.domains.auth.throttle import check_rate_limit
from overtime_api.models.session_token import SessionToken
from overtime_api.models.user import ROLE_EMPLOYEE, User

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


def _normalize_email(value: str) -> str:
    email = sanitize_input(value).lower()
    if not is_valid_email(email):
        raise ValueError("Formato de email inválido")
    return email


class LoginRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)


class SignupRequest(BaseModel):
    email: str
    password: str
    full_name: str
    cpf: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        password = sanitize_input(value)
        valid, message = validate_password(password)
        if not valid:
            raise ValueError(message)
        return password

    @field_validator("full_name")
    @classmethod
    def clean_full_name(cls, value: str) -> str:
        name = sanitize_input(value)
        if len(name) < 2 or len(name) > 100:
            raise ValueError("Nome deve ter entre 2 e 100 caracteres")
        safe, message = inspect_input(name, "full_name")
        if not safe:
            raise ValueError(message)
        return name

    @field_validator("cpf")
    @classmethod
    def valid_cpf(cls, value: str) -> str:
        cpf = sanitize_input(value)
        if not is_valid_cpf(cpf):
            raise ValueError("CPF inválido")
        return normalize_cpf(cpf)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user_id: str
    email: str
    full_name: str
    role: str


class MeResponse(BaseModel):
    id: str
    email: str
    full_name: str
    cpf: str
    role: str
    is_admin: bool


class CsrfResponse(BaseModel):
    csrf_token: str


def _login_response(user: User, session_token: SessionToken) -> LoginResponse:
    return LoginResponse(
        access_token=session_token.token,
        expires_at=session_token.expires_at,
        user_id=user.id,
        email=user.email,
        full_name=user.full_name,
        role=user.role,
    )


@router.get("/csrf", response_model=CsrfResponse)
def issue_csrf_token(store: CSRFTokenStore = Depends(get_csrf_store)) -> CsrfResponse:
    store.cleanup()
    return CsrfResponse(csrf_token=store.generate_token())


@router.post("/signup", response_model=LoginResponse, status_code=201, dependencies=[Depends(verify_csrf)])
def signup(
    payload: SignupRequest,
    db: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> LoginResponse:
    allowed = check_rate_limit(
        db,
        payload.email,
        "signup",
        max_attempts=settings.signup_max_attempts,
        window_minutes=settings.signup_window_minutes,
    )
    if not allowed:
        logger.warning("signup_throttled", email=payload.email)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Muitas tentativas de cadastro. Tente novamente em {settings.signup_window_minutes} minutos.",
        )

    existing_user = (
        db.query(User)
        .filter(or_(func.lower(User.email) == payload.email, User.cpf == payload.cpf))
        .first()
    )
    if existing_user:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")

    user = User(
        email=payload.email,
        hashed_password=hash_password(payload.password),
        full_name=payload.full_name,
        cpf=payload.cpf,
        role=ROLE_EMPLOYEE,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    session_token = issue_session(db, user, settings.session_timeout_minutes)
    logger.info("user_signed_up", user_id=user.id, email=user.email)
    return _login_response(user, session_token)


@router.post("/login", response_model=LoginResponse, dependencies=[Depends(verify_csrf)])
def login(
    payload: LoginRequest,
    db: Session = Depends(get_session),
    limiter: RateLimiter = Depends(get_login_limiter),
    settings: Settings = Depends(get_app_settings),
) -> LoginResponse:
    logger.info("login_attempt", email=payload.email)
    if not limiter.is_allowed(payload.email):
        logger.warning("login_throttled", email=payload.email)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Muitas tentativas de login. Tente novamente em {settings.login_window_minutes} minutos.",
        )

    user = db.query(User).filter(func.lower(User.email) == payload.email).one_or_none()
    if not user or not verify_password(payload.password, user.hashed_password):
        logger.info("login_failed", email=payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    limiter.reset(payload.email)
    session_token = issue_session(db, user, settings.session_timeout_minutes)
    logger.info("login_success", user_id=user.id, role=user.role)
    return _login_response(user, session_token)


@router.post("/logout", status_code=204)
def logout(
    session_token: SessionToken = Depends(get_current_session),
    db: Session = Depends(get_session),
) -> None:
    user_id = session_token.user_id
    db.delete(session_token)
    db.commit()
    logger.info("logout", user_id=user_id)
    return None


@router.get("/me", response_model=MeResponse)
def me(user: User = Depends(get_current_user)) -> MeResponse:
    return MeResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        cpf=user.cpf,
        role=user.role,
        is_admin=user.is_admin,
    )
