from typing import Any, Dict, List, Optional
from datetime import datetime
from uuid import UUID
from sqlmodel import SQLModel, Field


class FittingBase(SQLModel):
    part_number: str = Field(
        min_length=1,
        max_length=64,
        description="Procurement part number; the upsert key."
    )
    name: str = Field(min_length=1, max_length=200)
    category: Optional[str] = Field(default=None, max_length=100)
    manufacturer: Optional[str] = None
    material: Optional[str] = None
    weight_kg: Optional[float] = Field(default=None, ge=0)
    dimensions: Optional[Dict[str, Any]] = None
    specifications: Dict[str, Any] = Field(default_factory=dict)
    safety_standards: List[str] = Field(default_factory=list)


class FittingUpsert(FittingBase):
    """Payload for manual entry and for the procurement sync."""
    pass


class FittingRead(FittingBase):
    id: UUID
    created_at: datetime
    updated_at: datetime
