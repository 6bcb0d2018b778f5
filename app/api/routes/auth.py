from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from app.core.config import settings
from app.core.dependencies import get_user_service, get_current_user
from app.services.user import UserService
from app.db.schema import User, AccountStatus
from app.models.auth import Token, TokenAccess, TokenRefresh
from app.models.common import APIResponse
from app.models.user import UserSignin, UserRead, UserCreate


router = APIRouter()


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=APIResponse[UserRead],
    summary="Register a new user",
    description="Creates a pending 'viewer' account that an admin must approve."
)
def signup(
    user_in: UserCreate,
    service: UserService = Depends(get_user_service)
):
    """
    1. Validates input (Pydantic).
    2. Checks for Email and Employee ID uniqueness.
    3. Returns public user info.
    """
    try:
        new_user = service.create_user(user_in)
    except ValueError as e:
        logger.warning(f"Signup validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )

    return APIResponse(
        data=UserRead.model_validate(new_user),
        message="Account created and awaiting approval"
    )


@router.post(
    "/token",
    response_model=APIResponse[Token],
    status_code=status.HTTP_200_OK,
    summary="Signin to get tokens",
    description="Returns an Access Token (short-lived) and Refresh Token (long-lived)."
)
def token(
    signin_data: UserSignin,
    service: UserService = Depends(get_user_service)
):
    """
    1. Verifies password.
    2. Checks if the account is active.
    3. Issues JWTs.
    """
    user = service.authenticate_user(signin_data.email, signin_data.password)

    if not user:
        # Security: Return generic error to prevent user enumeration
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if user.status != AccountStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Account is {user.status.value}. Please contact an administrator."
        )

    tokens = service.generate_tokens(user)

    logger.info(f"User logged in: {user.id}")

    return APIResponse(data=tokens)


@router.post(
    "/refresh",
    response_model=APIResponse[TokenAccess],
    status_code=status.HTTP_200_OK,
    summary="Refresh Session",
    description="Exchanges a valid Refresh Token for a new Access Token."
)
def refresh_token(
    refresh_data: TokenRefresh,
    service: UserService = Depends(get_user_service)
):
    return APIResponse(data=TokenAccess(
        access_token=service.refresh_session(refresh_data.refresh_token),
        expires_in=settings.access_token_expire_minutes * 60
    ))


@router.get(
    "/me",
    response_model=APIResponse[UserRead],
    status_code=status.HTTP_200_OK,
    summary="Get current user"
)
def get_me(
    current_user: User = Depends(get_current_user)
):
    return APIResponse(data=UserRead.model_validate(current_user))
