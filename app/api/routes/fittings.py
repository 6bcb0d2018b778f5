from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from app.core.dependencies import get_current_user, get_fitting_service, require_roles
from app.db.schema import User, UserRole
from app.models.common import APIResponse
from app.models.fitting import FittingRead, FittingUpsert
from app.services.fitting import FittingService

router = APIRouter()


@router.get(
    "",
    response_model=APIResponse[List[FittingRead]],
    summary="List catalog fittings"
)
def list_fittings(
    category: Optional[str] = None,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    service: FittingService = Depends(get_fitting_service)
):
    fittings = [FittingRead.model_validate(f)
                for f in service.list_fittings(category, search)]
    return APIResponse(data=fittings, count=len(fittings))


@router.post(
    "",
    response_model=APIResponse[FittingRead],
    summary="Create or update a catalog fitting",
    description="Upserts by part number. Re-submitting identical data changes nothing."
)
def upsert_fitting(
    payload: FittingUpsert,
    response: Response,
    current_user: User = Depends(
        require_roles(UserRole.ADMIN, UserRole.SUPERVISOR)),
    service: FittingService = Depends(get_fitting_service)
):
    fitting, created = service.upsert_fitting(payload)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return APIResponse(
        data=FittingRead.model_validate(fitting),
        message="Track fitting created" if created else "Track fitting updated"
    )


@router.get(
    "/{fitting_id}",
    response_model=APIResponse[FittingRead],
    summary="Get a catalog fitting"
)
def get_fitting(
    fitting_id: UUID,
    current_user: User = Depends(get_current_user),
    service: FittingService = Depends(get_fitting_service)
):
    return APIResponse(data=FittingRead.model_validate(service.get_fitting_by_id(fitting_id)))
