from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from hashlib import sha256
from hmac import compare_digest

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from overtime.rate_limit import RateLimiter
from overtime.security import CSRFTokenStore
from overtime_api.core.config import Settings, get_settings
from overtime_api.core.logging import get_logger
from overtime_api.db.session import get_session
from overtime_api.models.session_token import SessionToken
from overtime_api.models.user import User

logger = get_logger(__name__)
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(raw: str, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(8)
    digest = sha256(f"{salt}{raw}".encode("utf-8")).hexdigest()
    return f"{salt}${digest}"


def verify_password(raw: str, hashed: str) -> bool:
    salt, _, _ = hashed.partition("$")
    return compare_digest(hashed, hash_password(raw, salt))


def issue_session(db: Session, user: User, lifetime_minutes: int) -> SessionToken:
    now = datetime.utcnow()
    session_token = SessionToken(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        created_at=now,
        expires_at=now + timedelta(minutes=lifetime_minutes),
    )
    db.add(session_token)
    db.commit()
    return session_token


def get_app_settings() -> Settings:
    return get_settings()


def get_login_limiter(request: Request) -> RateLimiter:
    return request.app.state.login_limiter


def get_csrf_store(request: Request) -> CSRFTokenStore:
    return request.app.state.csrf_store


def verify_csrf(
    x_csrf_token: str | None = Header(default=None),
    store: CSRFTokenStore = Depends(get_csrf_store),
    settings: Settings = Depends(get_app_settings),
) -> None:
    if not settings.require_csrf:
        return
    if not store.validate_token(x_csrf_token):
        logger.warning("csrf_rejected")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid CSRF token")


def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_session),
) -> SessionToken:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    session_token = db.get(SessionToken, credentials.credentials)
    if session_token is None or session_token.expires_at <= datetime.utcnow():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session_token


def get_current_user(session_token: SessionToken = Depends(get_current_session)) -> User:
    return session_token.user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        logger.warning("admin_access_denied", user_id=user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user
