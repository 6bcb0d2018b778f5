from typing import List, Optional
from datetime import datetime
from uuid import UUID
from pydantic import field_validator
from sqlmodel import SQLModel, Field

from app.db.schema import MaintenanceType, MaintenanceStatus
from app.models.common import UserSummary, QRCodeSummary
from app.models.inspection import split_csv


class PartUsed(SQLModel):
    name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)


class MaintenanceCreate(SQLModel):
    qr_code_id: UUID
    maintenance_type: MaintenanceType
    work_description: str = Field(min_length=1)
    parts_used: List[PartUsed] = Field(
        default_factory=list,
        description="Parts with quantities; a comma-separated list of names counts each once."
    )
    labor_hours: Optional[float] = Field(default=None, ge=0)
    cost: Optional[float] = Field(default=None, ge=0)
    maintenance_date: Optional[datetime] = Field(
        default=None,
        description="Defaults to now when omitted."
    )
    status: MaintenanceStatus = MaintenanceStatus.COMPLETED

    @field_validator("parts_used", mode="before")
    @classmethod
    def normalize_parts(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [{"name": name, "quantity": 1} for name in split_csv(value)]
        return value


class MaintenanceHistoryItem(SQLModel):
    id: UUID
    qr_code_id: UUID
    technician_id: Optional[UUID] = None
    maintenance_date: datetime
    maintenance_type: MaintenanceType
    work_description: str
    parts_used: List[PartUsed] = []
    labor_hours: Optional[float] = None
    cost: Optional[float] = None
    status: MaintenanceStatus
    technician: Optional[UserSummary] = None


class MaintenanceRead(MaintenanceHistoryItem):
    created_at: datetime
    qr_code: Optional[QRCodeSummary] = None
