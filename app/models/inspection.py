from typing import List, Optional
from datetime import date, datetime
from uuid import UUID
from pydantic import field_validator
from sqlmodel import SQLModel, Field

from app.db.schema import InspectionType, InspectionStatus
from app.models.common import UserSummary, QRCodeSummary


def split_csv(value: str) -> List[str]:
    """'gauge wide, , clip missing' -> ['gauge wide', 'clip missing']"""
    return [item.strip() for item in value.split(",") if item.strip()]


class InspectionCreate(SQLModel):
    qr_code_id: UUID
    inspection_type: InspectionType
    condition_rating: int = Field(
        ge=1, le=5,
        description="1 (critical) to 5 (excellent). Out-of-range values are rejected."
    )
    observations: Optional[str] = None
    defects_found: List[str] = Field(
        default_factory=list,
        description="Defect labels; a comma-separated string is also accepted."
    )
    recommendations: Optional[str] = None
    next_inspection_due: Optional[date] = None
    inspection_date: Optional[datetime] = Field(
        default=None,
        description="Defaults to now when omitted."
    )
    status: InspectionStatus = InspectionStatus.COMPLETED

    @field_validator("defects_found", mode="before")
    @classmethod
    def normalize_defects(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return split_csv(value)
        return [str(item).strip() for item in value if str(item).strip()]


class InspectionHistoryItem(SQLModel):
    """An inspection as shown inside a QR record's history."""
    id: UUID
    qr_code_id: UUID
    inspector_id: Optional[UUID] = None
    inspection_date: datetime
    inspection_type: InspectionType
    condition_rating: int
    observations: Optional[str] = None
    defects_found: List[str] = []
    recommendations: Optional[str] = None
    next_inspection_due: Optional[date] = None
    status: InspectionStatus
    inspector: Optional[UserSummary] = None


class InspectionRead(InspectionHistoryItem):
    created_at: datetime
    qr_code: Optional[QRCodeSummary] = None
