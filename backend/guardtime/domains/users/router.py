from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import Field, field_validator
from sqlalchemy import func
from sqlalchemy.orm import Session

from guardtime.core.errors import ConflictError
from guardtime.core.logging import get_logger
from guardtime.core.schemas import RequestModel, ResponseModel, Role
from guardtime.core.security import hash_password, require_caller_with_role
from guardtime.db.session import get_session
from guardtime.models import User

router = APIRouter(prefix="/users", tags=["users"])
logger = get_logger(__name__)


class UserCreate(RequestModel):
    email: str
    password: str = Field(..., min_length=8)
    role: Role = "viewer"

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        email = value.strip()
        if "@" not in email:
            raise ValueError("Invalid email format")
        return email


class UserOut(ResponseModel):
    id: int
    email: str
    role: Role
    created_at: datetime


def _sanitize(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        role=user.role,
        created_at=user.created_at or datetime.utcnow(),
    )


def create_user(db: Session, email: str, password: str, role: str) -> User:
    existing_user = db.query(User).filter(func.lower(User.email) == email.lower()).one_or_none()
    if existing_user:
        raise ConflictError("User already exists")

    user = User(email=email.strip(), hashed_password=hash_password(password), role=role)
    db.add(user)
    db.flush()
    logger.info("user_created", email=user.email, role=role)
    return user


@router.get("", response_model=list[UserOut])
def list_users(
    db: Session = Depends(get_session),
    caller: User = Depends(require_caller_with_role("admin")),
) -> list[UserOut]:
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return [_sanitize(user) for user in users]


@router.post("", response_model=UserOut, status_code=201)
def create_user_endpoint(
    payload: UserCreate,
    db: Session = Depends(get_session),
    caller: User = Depends(require_caller_with_role("admin")),
) -> UserOut:
    user = create_user(db, payload.email, payload.password, payload.role)
    db.commit()
    db.refresh(user)
    return _sanitize(user)
