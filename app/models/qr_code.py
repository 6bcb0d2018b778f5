import re
from typing import Any, Dict, List, Optional
from datetime import date, datetime
from uuid import UUID
from pydantic import field_validator
from sqlmodel import SQLModel, Field

from app.db.schema import QRStatus
from app.models.common import FittingSummary, UserSummary
from app.models.inspection import InspectionHistoryItem
from app.models.maintenance import MaintenanceHistoryItem


KM_POST_PATTERN = re.compile(r"^\d+(\.\d+)?$")


def _clean_km_post(value: str) -> str:
    value = value.strip()
    if not KM_POST_PATTERN.match(value):
        raise ValueError("must be a kilometre value such as '125.500'")
    return value


class QRCodeCreate(SQLModel):
    """Registration payload. The code itself is always generated server-side."""
    fitting_id: UUID
    zone: str = Field(min_length=1, max_length=100)
    division: str = Field(min_length=1, max_length=100)
    section: str = Field(min_length=1, max_length=100)
    km_post: str = Field(min_length=1, max_length=20)
    track_number: Optional[str] = None
    batch_number: Optional[str] = None
    manufacturing_date: Optional[date] = None
    installation_date: Optional[date] = None

    # Folded into QRCode.location_details
    location_details: Optional[str] = None
    coordinates: Optional[Any] = None
    landmarks: Optional[str] = None

    @field_validator("zone", "division", "section", mode="before")
    @classmethod
    def strip_location(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("km_post")
    @classmethod
    def validate_km_post(cls, value: str) -> str:
        return _clean_km_post(value)

    def location_blob(self) -> Dict[str, Any]:
        return {
            "description": self.location_details or None,
            "coordinates": self.coordinates or None,
            "landmarks": self.landmarks or None,
        }


class QRCodeUpdate(SQLModel):
    """Only the fields present in the request body are changed."""
    status: Optional[QRStatus] = None
    zone: Optional[str] = Field(default=None, min_length=1, max_length=100)
    division: Optional[str] = Field(default=None, min_length=1, max_length=100)
    section: Optional[str] = Field(default=None, min_length=1, max_length=100)
    km_post: Optional[str] = Field(default=None, min_length=1, max_length=20)
    track_number: Optional[str] = None
    location_details: Optional[Dict[str, Any]] = None

    @field_validator("km_post")
    @classmethod
    def validate_km_post(cls, value: Optional[str]) -> Optional[str]:
        return _clean_km_post(value) if value is not None else value


class QRCodeRead(SQLModel):
    id: UUID
    qr_code: str
    fitting_id: UUID
    batch_number: Optional[str] = None
    manufacturing_date: Optional[date] = None
    installation_date: Optional[date] = None
    zone: str
    division: str
    section: str
    km_post: str
    track_number: Optional[str] = None
    location_details: Dict[str, Any] = {}
    status: QRStatus
    qr_image_url: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
    fitting: Optional[FittingSummary] = None
    creator: Optional[UserSummary] = None


class QRCodeDetailRead(QRCodeRead):
    """A QR record with its complete history, newest first."""
    inspections: List[InspectionHistoryItem] = []
    maintenance_records: List[MaintenanceHistoryItem] = []


class ScanRequest(SQLModel):
    qr_code: str = Field(max_length=64)
    scan_method: Optional[str] = Field(
        default=None,
        description="How the code was entered, e.g. 'manual_entry' or 'camera'. Defaults to 'api'."
    )
    location: Optional[Any] = None
    device_info: Optional[Any] = None


class ScanResult(QRCodeRead):
    """A resolved scan: the record plus its most recent history."""
    recent_inspections: List[InspectionHistoryItem] = []
    recent_maintenance: List[MaintenanceHistoryItem] = []
