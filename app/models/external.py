from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import Field as PydanticField
from sqlmodel import SQLModel, Field

from app.db.schema import QRStatus


class ExternalRequest(SQLModel):
    """Envelope both integrations post: an action name and its payload."""
    action: str = Field(min_length=1)
    data: Dict[str, Any]


# --- Maintenance scheduling (IRCEPT TMS) -------------------------------------

class TrackStatusQuery(SQLModel):
    zone: Optional[str] = None
    division: Optional[str] = None
    section: Optional[str] = None
    km_from: Optional[float] = Field(default=None, ge=0)
    km_to: Optional[float] = Field(default=None, ge=0)


class ScheduleUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    qr_code: str = PydanticField(min_length=1)
    status: QRStatus

    @field_validator("qr_code", mode="before")
    @classmethod
    def strip_code(cls, v):
        return v.strip() if isinstance(v, str) else v


class LocationRead(SQLModel):
    zone: str
    division: str
    section: str
    km_post: str
    track_number: Optional[str] = None


class TrackFittingInfo(SQLModel):
    name: Optional[str] = None
    part_number: Optional[str] = None
    specifications: Optional[Dict[str, Any]] = None
    manufacturer: Optional[str] = None


class ConditionRead(SQLModel):
    rating: Optional[int] = None
    last_inspection: Optional[datetime] = None
    defects: List[str] = []


class TrackStatusItem(SQLModel):
    qr_code: str
    location: LocationRead
    fitting: TrackFittingInfo
    status: QRStatus
    condition: ConditionRead


# --- Procurement catalog sync (IREPS UDM) ----------------------------------

class QRStatusQuery(SQLModel):
    qr_code: str = Field(min_length=1)

    @field_validator("qr_code", mode="before")
    @classmethod
    def strip_code(cls, v):
        return v.strip() if isinstance(v, str) else v


class QRStatusRead(SQLModel):
    qr_code: str
    status: QRStatus
    location: LocationRead
    track_fitting: TrackFittingInfo
    last_updated: datetime
