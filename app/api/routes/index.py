from datetime import datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy import text
from sqlmodel import Session

from app.core.config import settings
from app.db.core import get_session
from app.models.analytics import HealthRead
from app.models.common import APIResponse
from app.services.analytics import AnalyticsService

router = APIRouter()


@router.get("/", status_code=status.HTTP_200_OK)
def index():
    return {"success": True, "data": {"status": "API is running"}}


@router.get(
    "/health",
    response_model=APIResponse[HealthRead],
    status_code=status.HTTP_200_OK,
    summary="Store connectivity probe",
    tags=["System"]
)
def health_check(session: Session = Depends(get_session)):
    try:
        session.exec(text("SELECT 1"))
    except Exception as e:
        logger.exception("Database health check failed")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "success": False,
                "error": str(e),
                "data": {
                    "status": "unhealthy",
                    "database": "disconnected",
                    "timestamp": datetime.utcnow().isoformat(),
                },
            },
        )

    return APIResponse(data=HealthRead(
        status="healthy",
        database="connected",
        statistics=AnalyticsService(session).get_health_statistics(),
        version=settings.app_version,
        timestamp=datetime.utcnow(),
    ))
