from fastapi import APIRouter, BackgroundTasks, Depends, status

from app.core.dependencies import (
    get_external_sync_service, read_external_request, require_api_key
)
from app.models.common import APIResponse
from app.models.external import ExternalRequest
from app.services.external import ExternalSyncService

router = APIRouter()


# The envelope is read by a dependency rather than declared as a body
# parameter; FastAPI decodes declared bodies before any dependency runs.
@router.post(
    "/ircept",
    response_model=APIResponse,
    status_code=status.HTTP_200_OK,
    summary="IRCEPT track management integration",
    description="Actions: 'get_track_status', 'update_maintenance_schedule'.",
    dependencies=[Depends(require_api_key("ircept_api_key"))]
)
def ircept(
    background_tasks: BackgroundTasks,
    payload: ExternalRequest = Depends(read_external_request),
    service: ExternalSyncService = Depends(get_external_sync_service)
):
    return service.handle_ircept(payload, background_tasks)


@router.post(
    "/ireps",
    response_model=APIResponse,
    status_code=status.HTTP_200_OK,
    summary="IREPS procurement catalog integration",
    description="Actions: 'sync_track_fittings', 'get_qr_status'.",
    dependencies=[Depends(require_api_key("ireps_api_key"))]
)
def ireps(
    payload: ExternalRequest = Depends(read_external_request),
    service: ExternalSyncService = Depends(get_external_sync_service)
):
    return service.handle_ireps(payload)
