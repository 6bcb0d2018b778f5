from datetime import date, datetime, time
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from app.db.schema import (
    User, QRCode, Inspection, InspectionType, InspectionStatus
)
from app.models.inspection import InspectionCreate, InspectionRead


def day_start(value: date) -> datetime:
    return datetime.combine(value, time.min)


def day_end(value: date) -> datetime:
    return datetime.combine(value, time.max)


def ensure_qr_exists(session: Session, qr_code_id: UUID) -> QRCode:
    """History records may only reference an existing QR record."""
    qr = session.get(QRCode, qr_code_id)
    if not qr:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="QR code not found"
        )
    return qr


class InspectionService:
    def __init__(self, session: Session):
        self.session = session

    def list_inspections(
        self,
        inspection_status: Optional[InspectionStatus] = None,
        inspection_type: Optional[InspectionType] = None,
        inspector_id: Optional[UUID] = None,
        qr_code_id: Optional[UUID] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 100
    ) -> List[InspectionRead]:
        query = select(Inspection).options(
            selectinload(Inspection.inspector),
            selectinload(Inspection.qr_code).selectinload(QRCode.fitting)
        )

        if inspection_status:
            query = query.where(Inspection.status == inspection_status)
        if inspection_type:
            query = query.where(Inspection.inspection_type == inspection_type)
        if inspector_id:
            query = query.where(Inspection.inspector_id == inspector_id)
        if qr_code_id:
            query = query.where(Inspection.qr_code_id == qr_code_id)
        if date_from:
            query = query.where(Inspection.inspection_date >= day_start(date_from))
        if date_to:
            query = query.where(Inspection.inspection_date <= day_end(date_to))

        query = query.order_by(Inspection.inspection_date.desc()).limit(limit)
        return [InspectionRead.model_validate(i) for i in self.session.exec(query).all()]

    def create_inspection(self, user: User, data: InspectionCreate) -> InspectionRead:
        qr = ensure_qr_exists(self.session, data.qr_code_id)

        inspection = Inspection(
            **data.model_dump(exclude={"inspection_date"}),
            inspector_id=user.id,
        )
        if data.inspection_date:
            inspection.inspection_date = data.inspection_date

        self.session.add(inspection)
        self.session.commit()
        self.session.refresh(inspection)

        logger.info(
            f"Inspection {inspection.id} recorded on {qr.qr_code} "
            f"(rating {inspection.condition_rating}) by {user.id}")
        return InspectionRead.model_validate(inspection)
