"""Health check endpoint with optional database connectivity check."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from users_api.core.database import check_db_connected, get_db
from users_api.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(request: Request, db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Served outside the API prefix so health checks skip the gateway secret check.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=request.app.state.settings.APP_ENV,
        database=db_status,
    )
