from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_current_user, get_analytics_service, require_roles
from app.db.schema import User, UserRole
from app.models.analytics import AnalyticsRead, DashboardRead
from app.models.common import APIResponse
from app.services.analytics import AnalyticsService

router = APIRouter()


@router.get(
    "/analytics",
    response_model=APIResponse[AnalyticsRead],
    status_code=status.HTTP_200_OK,
    summary="Get analytics snapshot",
    description="Status/zone/rating distributions, health score, inspection rate and recent activity."
)
def get_analytics(
    zone: Optional[str] = None,
    division: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    current_user: User = Depends(
        require_roles(UserRole.ADMIN, UserRole.SUPERVISOR)),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return APIResponse(data=service.get_analytics(zone, division, date_from, date_to))


@router.get(
    "/dashboard",
    response_model=APIResponse[DashboardRead],
    status_code=status.HTTP_200_OK,
    summary="Get dashboard KPIs"
)
def get_dashboard(
    current_user: User = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return APIResponse(data=service.get_dashboard())
