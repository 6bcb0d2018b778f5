import secrets
from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from pydantic import ValidationError
from sqlmodel import Session

from app.core.config import settings
from app.core.errors import validation_http_error
from app.db.core import get_session
from app.db.schema import User, UserRole, AccountStatus
from app.models.external import ExternalRequest

from app.services.user import UserService
from app.services.fitting import FittingService
from app.services.qr_code import QRCodeService
from app.services.scan import ScanService
from app.services.inspection import InspectionService
from app.services.maintenance import MaintenanceService
from app.services.analytics import AnalyticsService
from app.services.external import ExternalSyncService

bearer_scheme = HTTPBearer(auto_error=False)


def get_user_service(session: Session = Depends(get_session)) -> UserService:
    """Creates a UserService instance using the active DB session."""
    return UserService(session)


def get_fitting_service(session: Session = Depends(get_session)) -> FittingService:
    return FittingService(session=session)


def get_qr_code_service(session: Session = Depends(get_session)) -> QRCodeService:
    return QRCodeService(session=session)


def get_scan_service(session: Session = Depends(get_session)) -> ScanService:
    return ScanService(session=session)


def get_inspection_service(session: Session = Depends(get_session)) -> InspectionService:
    return InspectionService(session=session)


def get_maintenance_service(session: Session = Depends(get_session)) -> MaintenanceService:
    return MaintenanceService(session=session)


def get_analytics_service(session: Session = Depends(get_session)) -> AnalyticsService:
    return AnalyticsService(session=session)


def get_external_sync_service(session: Session = Depends(get_session)) -> ExternalSyncService:
    return ExternalSyncService(session=session)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    service: UserService = Depends(get_user_service)
) -> User:
    """
    Validates the bearer token and retrieves the user.
    This is the gatekeeper for protected routes: the returned User is the
    explicit session context handed to every service call.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or not credentials.credentials:
        raise credentials_exception

    token_data = service.verify_access_token(credentials.credentials)
    if not token_data:
        raise credentials_exception

    user = service.get_user_by_id(token_data.user_id)
    if user is None:
        raise credentials_exception

    if user.status != AccountStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Account is {user.status.value}. Please contact an administrator."
        )

    return user


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """
    Dependency factory: the current user must hold one of `roles`.
    Example: Depends(require_roles(UserRole.ADMIN, UserRole.SUPERVISOR))
    """
    allowed = set(roles)

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(
                f"Access denied: user {current_user.id} with role "
                f"{current_user.role.value} needs one of {sorted(r.value for r in allowed)}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions"
            )
        return current_user

    return checker


def require_api_key(setting_name: str) -> Callable[..., None]:
    """
    Dependency factory for the shared-secret integrations. The x-api-key
    header must equal the configured secret; an unset secret rejects all.
    """

    def checker(x_api_key: Optional[str] = Header(default=None)) -> None:
        expected = getattr(settings, setting_name)
        if not x_api_key or not expected or not secrets.compare_digest(
                x_api_key.encode(), expected.encode()):
            logger.warning(f"Rejected integration call: bad {setting_name}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid API key"
            )

    return checker


async def read_external_request(request: Request) -> ExternalRequest:
    """
    Reads the integration envelope from the raw body. Declared as a
    dependency so the route-level API key check is resolved first and an
    unauthenticated caller never learns anything about body validation.
    """
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON body"
        )

    try:
        return ExternalRequest.model_validate(body)
    except ValidationError as e:
        raise validation_http_error(e)
