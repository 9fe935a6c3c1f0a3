from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.config import build_sqlalchemy_db_url, settings
from app.database import engine, mask_db_url


router = APIRouter(prefix="/health", tags=["health"])


class HealthStatus(BaseModel):
    status: str
    database: str
    db_url: str
    version: str
    timestamp: datetime


@router.get("", response_model=HealthStatus, summary="API heartbeat and ORM connectivity")
def health_check() -> HealthStatus:
    database = "ok"
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        database = "error"

    return HealthStatus(
        status="ok" if database == "ok" else "degraded",
        database=database,
        db_url=mask_db_url(build_sqlalchemy_db_url(settings)),
        version=settings.version,
        timestamp=datetime.now(timezone.utc),
    )
