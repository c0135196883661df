from __future__ import annotations

from hmac import compare_digest

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import func
from sqlalchemy.orm import Session

from guardtime.core.errors import UnauthorizedError
from guardtime.core.logging import get_logger
from guardtime.core.schemas import RequestModel
from guardtime.core.security import bearer_scheme, find_session, hash_password, issue_session
from guardtime.db.session import get_session
from guardtime.models import User

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


class LoginRequest(RequestModel):
    email: str
    password: str = Field(..., min_length=8)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        email = value.strip()
        if "@" not in email:
            raise ValueError("Invalid email")
        return email


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    email: str
    role: str


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_session)) -> LoginResponse:
    logger.info("login_attempt", email=payload.email)
    user = (
        db.query(User)
        .filter(func.lower(User.email) == payload.email.lower())
        .one_or_none()
    )

    if not user or not compare_digest(user.hashed_password, hash_password(payload.password)):
        logger.info("login_rejected", email=payload.email)
        raise UnauthorizedError("Invalid credentials")

    token = issue_session(db, user)
    db.commit()
    logger.info("login_success", email=user.email, role=user.role)

    return LoginResponse(access_token=token, email=user.email, role=user.role)


@router.post("/logout", status_code=204)
def logout(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_session),
) -> None:
    if credentials is None:
        raise UnauthorizedError()
    session = find_session(db, credentials.credentials)
    if session is None:
        raise UnauthorizedError("Invalid or expired session")
    db.delete(session)
    db.commit()
    return None
