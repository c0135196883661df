from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from guardtime.db.session import get_session

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", summary="Liveness check")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/db", summary="Database readiness check")
def database_check(db: Session = Depends(get_session)) -> dict[str, str]:
    db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "reachable"}
