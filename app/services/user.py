from typing import List, Optional
import uuid
from datetime import datetime, timedelta

import jwt
from loguru import logger
from sqlalchemy import or_
from sqlmodel import Session, select, func
from fastapi import HTTPException, status

from app.core.config import settings
from app.db.schema import (
    User, UserRole, AccountStatus, QRCode, Inspection, MaintenanceRecord
)
from app.models.auth import Token, TokenData
from app.models.user import UserCreate, UserActivityStats
from .password import get_password_hash, verify_password


class UserService:
    ALGORITHM = "HS256"

    def __init__(self, session: Session):
        self.session = session

    def _create_jwt(self, subject: str, expires_delta: timedelta, type: str) -> str:
        """Helper to sign JWTs with specific types."""
        to_encode = {
            "sub": str(subject),
            "exp": datetime.utcnow() + expires_delta,
            "type": type
        }
        return jwt.encode(to_encode, settings.secret_key, algorithm=self.ALGORITHM)

    def _decode_jwt(self, token: str, expected_type: str) -> Optional[TokenData]:
        try:
            payload = jwt.decode(token, settings.secret_key,
                                 algorithms=[self.ALGORITHM])
            user_id = payload.get("sub")
            token_type = payload.get("type")

            if not user_id or token_type != expected_type:
                return None

            return TokenData(user_id=uuid.UUID(user_id), token_type=token_type)
        except (jwt.PyJWTError, ValueError):
            return None

    def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == email)
        return self.session.exec(statement).first()

    def get_user_or_404(self, user_id: uuid.UUID) -> User:
        user = self.get_user_by_id(user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found."
            )
        return user

    def create_user(self, user_in: UserCreate) -> User:
        """
        Self sign-up. The account starts as a pending viewer.
        """
        existing = self.session.exec(
            select(User).where(or_(
                User.email == user_in.email,
                User.employee_id == user_in.employee_id
            ))
        ).first()
        if existing:
            if existing.email == user_in.email:
                raise ValueError("A user with this email already exists.")
            raise ValueError("A user with this employee ID already exists.")

        try:
            new_user = User(
                email=user_in.email,
                hashed_password=get_password_hash(user_in.password),
                name=user_in.name,
                employee_id=user_in.employee_id,
                department=user_in.department,
                zone=user_in.zone,
                division=user_in.division,
                role=UserRole.VIEWER,
                status=AccountStatus.PENDING,
            )
            self.session.add(new_user)
            self.session.commit()
            self.session.refresh(new_user)

            logger.info(f"Registration successful for {new_user.email}")
            return new_user

        except Exception as e:
            self.session.rollback()
            logger.error(f"Registration failed: {str(e)}")
            raise e

    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Verify email and password hash."""
        user = self.get_user_by_email(email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def generate_access_token(self, user: User) -> str:
        return self._create_jwt(
            subject=user.id,
            expires_delta=timedelta(
                minutes=settings.access_token_expire_minutes),
            type="access"
        )

    def generate_refresh_token(self, user: User) -> str:
        return self._create_jwt(
            subject=user.id,
            expires_delta=timedelta(
                minutes=settings.refresh_token_expire_minutes),
            type="refresh"
        )

    def generate_tokens(self, user: User) -> Token:
        return Token(
            access_token=self.generate_access_token(user),
            refresh_token=self.generate_refresh_token(user),
            token_type="bearer",
            expires_in=settings.access_token_expire_minutes * 60
        )

    def verify_access_token(self, token: str) -> Optional[TokenData]:
        return self._decode_jwt(token, "access")

    def verify_refresh_token(self, token: str) -> Optional[TokenData]:
        return self._decode_jwt(token, "refresh")

    def refresh_session(self, refresh_token: str) -> str:
        """
        Exchange a valid refresh token for a new access token.
        Strictly validates the user state before issuing.
        """
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

        token_data = self.verify_refresh_token(refresh_token)
        if not token_data:
            raise credentials_exception

        user = self.get_user_by_id(token_data.user_id)
        if not user or user.status != AccountStatus.ACTIVE:
            raise credentials_exception

        return self.generate_access_token(user)

    # ==========================================================================
    # ADMIN: ROLE & ACCOUNT MANAGEMENT
    # ==========================================================================

    def list_users(
        self,
        role: Optional[UserRole] = None,
        account_status: Optional[AccountStatus] = None
    ) -> List[User]:
        query = select(User)
        if role:
            query = query.where(User.role == role)
        if account_status:
            query = query.where(User.status == account_status)
        return self.session.exec(query.order_by(User.created_at.desc())).all()

    def update_role(self, actor: User, user_id: uuid.UUID, role: UserRole) -> User:
        user = self.get_user_or_404(user_id)
        user.role = role
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        logger.info(f"Admin {actor.id} set role of {user.id} to {role.value}")
        return user

    def update_status(self, actor: User, user_id: uuid.UUID, account_status: AccountStatus) -> User:
        user = self.get_user_or_404(user_id)
        if user.id == actor.id and account_status != AccountStatus.ACTIVE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot deactivate your own account."
            )
        user.status = account_status
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        logger.info(
            f"Admin {actor.id} set status of {user.id} to {account_status.value}")
        return user

    def get_activity_stats(self, user: User) -> UserActivityStats:
        qr_codes_created = self.session.exec(
            select(func.count(QRCode.id)).where(QRCode.created_by == user.id)
        ).one()
        inspections_performed = self.session.exec(
            select(func.count(Inspection.id)).where(
                Inspection.inspector_id == user.id)
        ).one()
        maintenance_performed = self.session.exec(
            select(func.count(MaintenanceRecord.id)).where(
                MaintenanceRecord.technician_id == user.id)
        ).one()

        return UserActivityStats(
            qr_codes_created=qr_codes_created,
            inspections_performed=inspections_performed,
            maintenance_performed=maintenance_performed
        )
