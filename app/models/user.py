from uuid import UUID
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field
from pydantic import EmailStr, StringConstraints
from typing_extensions import Annotated
from app.db.schema import UserRole, AccountStatus


class UserRead(SQLModel):
    id: UUID
    email: str
    name: str
    employee_id: str
    role: UserRole
    department: Optional[str] = None
    zone: Optional[str] = None
    division: Optional[str] = None
    status: AccountStatus
    created_at: datetime


class UserSignin(SQLModel):
    email: Annotated[EmailStr, StringConstraints(to_lower=True)] = Field(
        description="Registered email address of the user.",
        max_length=255
    )
    password: str = Field(
        min_length=8,
        max_length=72,
        description="Plain text password."
    )


class UserCreate(SQLModel):
    """
    DTO for self sign-up.
    The account is created as a 'viewer' in 'pending' status; an admin
    approves it and assigns the working role.
    """
    name: str = Field(
        min_length=1,
        max_length=100,
        description="Full name."
    )
    email: Annotated[EmailStr, StringConstraints(to_lower=True)] = Field(
        description="Unique email address for signin.",
        max_length=255
    )
    password: str = Field(
        min_length=8,
        max_length=72,
        description="Plain text password."
    )
    employee_id: str = Field(
        min_length=1,
        max_length=50,
        description="Railway employee number."
    )
    department: Optional[str] = Field(default=None, max_length=100)
    zone: Optional[str] = Field(default=None, max_length=100)
    division: Optional[str] = Field(default=None, max_length=100)


class UserRoleUpdate(SQLModel):
    role: UserRole


class UserStatusUpdate(SQLModel):
    status: AccountStatus


class UserActivityStats(SQLModel):
    """Per-user contribution counters shown on the profile page."""
    qr_codes_created: int
    inspections_performed: int
    maintenance_performed: int
