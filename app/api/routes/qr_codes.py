from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from app.core.dependencies import (
    get_current_user, get_qr_code_service, get_scan_service, require_roles
)
from app.db.schema import User, UserRole, QRStatus
from app.models.common import APIResponse
from app.models.qr_code import (
    QRCodeCreate, QRCodeUpdate, QRCodeRead, QRCodeDetailRead,
    ScanRequest, ScanResult
)
from app.services.qr_code import QRCodeService
from app.services.scan import ScanService

router = APIRouter()

can_manage_qr = require_roles(UserRole.ADMIN, UserRole.SUPERVISOR)


@router.get(
    "",
    response_model=APIResponse[List[QRCodeRead]],
    summary="List QR records",
    description="Newest first, with the fitting and the registering user."
)
def list_qr_codes(
    qr_status: Optional[QRStatus] = Query(default=None, alias="status"),
    zone: Optional[str] = None,
    division: Optional[str] = None,
    section: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    current_user: User = Depends(get_current_user),
    service: QRCodeService = Depends(get_qr_code_service)
):
    records = service.list_qr_codes(
        qr_status=qr_status,
        zone=zone,
        division=division,
        section=section,
        limit=limit,
        offset=offset
    )
    return APIResponse(data=records, count=len(records))


@router.post(
    "",
    response_model=APIResponse[QRCodeRead],
    status_code=status.HTTP_201_CREATED,
    summary="Register a fitting and generate its QR code"
)
def create_qr_code(
    payload: QRCodeCreate,
    current_user: User = Depends(can_manage_qr),
    service: QRCodeService = Depends(get_qr_code_service)
):
    """
    Generates a unique 'IR...' code for a newly installed fitting.
    Only admins and supervisors may register fittings.
    """
    record = service.create_qr_code(current_user, payload)
    return APIResponse(data=record, message="QR code created successfully")


@router.post(
    "/scan",
    response_model=APIResponse[ScanResult],
    status_code=status.HTTP_200_OK,
    summary="Resolve a scanned or typed code"
)
def scan_qr_code(
    payload: ScanRequest,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    service: ScanService = Depends(get_scan_service)
):
    """
    Returns the fitting, location and the latest inspections and
    maintenance, and records the scan in the activity log.
    """
    result = service.scan(current_user, payload, background_tasks)
    return APIResponse(data=result, message="QR code scanned successfully")


@router.get(
    "/{qr_id}",
    response_model=APIResponse[QRCodeDetailRead],
    summary="Get a QR record with its full history"
)
def get_qr_code(
    qr_id: UUID,
    current_user: User = Depends(get_current_user),
    service: QRCodeService = Depends(get_qr_code_service)
):
    return APIResponse(data=service.get_qr_full(qr_id))


@router.put(
    "/{qr_id}",
    response_model=APIResponse[QRCodeRead],
    summary="Update status or location"
)
def update_qr_code(
    qr_id: UUID,
    payload: QRCodeUpdate,
    current_user: User = Depends(can_manage_qr),
    service: QRCodeService = Depends(get_qr_code_service)
):
    record = service.update_qr_code(current_user, qr_id, payload)
    return APIResponse(data=record, message="QR code updated successfully")
