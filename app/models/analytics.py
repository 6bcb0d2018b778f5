from typing import Any, Dict, List, Optional
from uuid import UUID
from datetime import datetime
from sqlmodel import SQLModel, Field

from app.models.qr_code import QRCodeRead


class AnalyticsSummary(SQLModel):
    """Point-in-time KPIs for the analytics page."""
    total_qr_codes: int = 0
    active_qr_codes: int = 0
    inactive_qr_codes: int = 0
    maintenance_qr_codes: int = 0
    total_inspections: int = 0
    pending_inspections: int = 0
    total_maintenance: int = 0
    emergency_maintenance: int = 0
    health_score: int = Field(
        default=0, ge=0, le=100,
        description="Percentage of QR records that are active."
    )
    inspection_rate: int = Field(
        default=0, ge=0, le=100,
        description="Inspections per QR record, as a percentage capped at 100."
    )


class ZoneCount(SQLModel):
    zone: str
    count: int


class RatingCount(SQLModel):
    rating: int
    count: int


class AnalyticsDistributions(SQLModel):
    zones: List[ZoneCount] = []
    condition_ratings: List[RatingCount] = []


class ActivityItem(SQLModel):
    id: UUID
    action: str
    details: Dict[str, Any] = {}
    created_at: datetime
    qr_code_id: Optional[UUID] = None
    qr_code: Optional[str] = None
    fitting_name: Optional[str] = None
    user_name: Optional[str] = None


class AnalyticsRead(SQLModel):
    summary: AnalyticsSummary
    distributions: AnalyticsDistributions
    recent_activity: List[ActivityItem] = []


class DashboardRead(SQLModel):
    total_qr_codes: int
    active_qr_codes: int
    pending_inspections: int
    recent_qr_codes: List[QRCodeRead] = []


class HealthRead(SQLModel):
    status: str
    database: str
    statistics: Dict[str, int] = {}
    version: str
    timestamp: datetime
