"""GET /health: liveness plus a database round trip."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from library_api.core.config import settings
from library_api.core.database import check_db_connected, get_db
from library_api.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Public; a failed database check still answers 200 with ``database: disconnected``."""
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
    )
