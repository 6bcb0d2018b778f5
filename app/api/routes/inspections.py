from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import get_current_user, get_inspection_service
from app.db.schema import User, InspectionType, InspectionStatus
from app.models.common import APIResponse
from app.models.inspection import InspectionCreate, InspectionRead
from app.services.inspection import InspectionService

router = APIRouter()


@router.get(
    "",
    response_model=APIResponse[List[InspectionRead]],
    summary="List inspections"
)
def list_inspections(
    inspection_status: Optional[InspectionStatus] = Query(default=None, alias="status"),
    inspection_type: Optional[InspectionType] = None,
    inspector_id: Optional[UUID] = None,
    qr_code_id: Optional[UUID] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    limit: int = Query(default=100, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    service: InspectionService = Depends(get_inspection_service)
):
    records = service.list_inspections(
        inspection_status=inspection_status,
        inspection_type=inspection_type,
        inspector_id=inspector_id,
        qr_code_id=qr_code_id,
        date_from=date_from,
        date_to=date_to,
        limit=limit
    )
    return APIResponse(data=records, count=len(records))


@router.post(
    "",
    response_model=APIResponse[InspectionRead],
    status_code=status.HTTP_201_CREATED,
    summary="Record an inspection"
)
def create_inspection(
    payload: InspectionCreate,
    current_user: User = Depends(get_current_user),
    service: InspectionService = Depends(get_inspection_service)
):
    # Any active account may record an inspection, viewers included
    record = service.create_inspection(current_user, payload)
    return APIResponse(data=record, message="Inspection recorded successfully")
