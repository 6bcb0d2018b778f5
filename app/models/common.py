from typing import Any, Dict, Generic, Optional, TypeVar
from uuid import UUID
from pydantic import BaseModel
from sqlmodel import SQLModel

from app.db.schema import QRStatus


T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """
    The JSON envelope every endpoint answers with.
    Errors use the same shape with success=False and 'error' instead of
    'data' (see app.core.errors).
    """
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    count: Optional[int] = None


class UserSummary(SQLModel):
    """Minimal performer details embedded in records."""
    name: str
    employee_id: str


class FittingSummary(SQLModel):
    id: UUID
    name: str
    part_number: str
    manufacturer: Optional[str] = None
    material: Optional[str] = None
    weight_kg: Optional[float] = None
    specifications: Optional[Dict[str, Any]] = None


class FittingBrief(SQLModel):
    name: str
    part_number: str


class QRCodeSummary(SQLModel):
    """QR record location summary embedded in inspection/maintenance lists."""
    id: UUID
    qr_code: str
    zone: str
    division: str
    section: str
    km_post: str
    status: QRStatus
    fitting: Optional[FittingBrief] = None
