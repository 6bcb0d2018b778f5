from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import get_current_user, get_maintenance_service
from app.db.schema import User, MaintenanceType, MaintenanceStatus
from app.models.common import APIResponse
from app.models.maintenance import MaintenanceCreate, MaintenanceRead
from app.services.maintenance import MaintenanceService

router = APIRouter()


@router.get(
    "",
    response_model=APIResponse[List[MaintenanceRead]],
    summary="List maintenance records"
)
def list_maintenance(
    maintenance_status: Optional[MaintenanceStatus] = Query(default=None, alias="status"),
    maintenance_type: Optional[MaintenanceType] = None,
    technician_id: Optional[UUID] = None,
    qr_code_id: Optional[UUID] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    limit: int = Query(default=100, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    service: MaintenanceService = Depends(get_maintenance_service)
):
    records = service.list_maintenance(
        maintenance_status=maintenance_status,
        maintenance_type=maintenance_type,
        technician_id=technician_id,
        qr_code_id=qr_code_id,
        date_from=date_from,
        date_to=date_to,
        limit=limit
    )
    return APIResponse(data=records, count=len(records))


@router.post(
    "",
    response_model=APIResponse[MaintenanceRead],
    status_code=status.HTTP_201_CREATED,
    summary="Record a maintenance action"
)
def create_maintenance(
    payload: MaintenanceCreate,
    current_user: User = Depends(get_current_user),
    service: MaintenanceService = Depends(get_maintenance_service)
):
    record = service.create_maintenance(current_user, payload)
    return APIResponse(data=record, message="Maintenance record created successfully")
