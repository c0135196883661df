from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from hashlib import sha256
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from guardtime.core.config import settings
from guardtime.core.errors import ForbiddenError, UnauthorizedError
from guardtime.db.session import get_session
from guardtime.models import User, UserSession

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(raw: str) -> str:
    return sha256(raw.encode("utf-8")).hexdigest()


def hash_token(token: str) -> str:
    return sha256(token.encode("utf-8")).hexdigest()


def issue_session(db: Session, user: User) -> str:
    """Create a session row and return the raw bearer token; only its hash is stored."""
    token = secrets.token_urlsafe(32)
    db.add(
        UserSession(
            user_id=user.id,
            token_hash=hash_token(token),
            expires_at=datetime.utcnow() + timedelta(hours=settings.session_ttl_hours),
        )
    )
    return token


def find_session(db: Session, token: str) -> Optional[UserSession]:
    session = db.query(UserSession).filter(UserSession.token_hash == hash_token(token)).one_or_none()
    if session is None or session.expires_at <= datetime.utcnow():
        return None
    return session


def require_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_session),
) -> User:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    session = find_session(db, credentials.credentials)
    if session is None:
        raise UnauthorizedError("Invalid or expired session")
    return session.user


def require_caller_with_role(*roles: str) -> Callable[..., User]:
    allowed = set(roles) | {"admin"}

    def dependency(caller: User = Depends(require_caller)) -> User:
        if caller.role not in allowed:
            raise ForbiddenError()
        return caller

    return dependency
