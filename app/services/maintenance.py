from datetime import date
from typing import List, Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from app.db.schema import (
    User, QRCode, MaintenanceRecord, MaintenanceType, MaintenanceStatus
)
from app.models.maintenance import MaintenanceCreate, MaintenanceRead
from app.services.inspection import day_start, day_end, ensure_qr_exists


class MaintenanceService:
    def __init__(self, session: Session):
        self.session = session

    def list_maintenance(
        self,
        maintenance_status: Optional[MaintenanceStatus] = None,
        maintenance_type: Optional[MaintenanceType] = None,
        technician_id: Optional[UUID] = None,
        qr_code_id: Optional[UUID] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 100
    ) -> List[MaintenanceRead]:
        query = select(MaintenanceRecord).options(
            selectinload(MaintenanceRecord.technician),
            selectinload(MaintenanceRecord.qr_code).selectinload(QRCode.fitting)
        )

        if maintenance_status:
            query = query.where(MaintenanceRecord.status == maintenance_status)
        if maintenance_type:
            query = query.where(
                MaintenanceRecord.maintenance_type == maintenance_type)
        if technician_id:
            query = query.where(MaintenanceRecord.technician_id == technician_id)
        if qr_code_id:
            query = query.where(MaintenanceRecord.qr_code_id == qr_code_id)
        if date_from:
            query = query.where(
                MaintenanceRecord.maintenance_date >= day_start(date_from))
        if date_to:
            query = query.where(
                MaintenanceRecord.maintenance_date <= day_end(date_to))

        query = query.order_by(
            MaintenanceRecord.maintenance_date.desc()).limit(limit)
        return [MaintenanceRead.model_validate(m) for m in self.session.exec(query).all()]

    def create_maintenance(self, user: User, data: MaintenanceCreate) -> MaintenanceRead:
        qr = ensure_qr_exists(self.session, data.qr_code_id)

        record = MaintenanceRecord(
            qr_code_id=data.qr_code_id,
            technician_id=user.id,
            maintenance_type=data.maintenance_type,
            work_description=data.work_description,
            parts_used=[part.model_dump() for part in data.parts_used],
            labor_hours=data.labor_hours,
            cost=data.cost,
            status=data.status,
        )
        if data.maintenance_date:
            record.maintenance_date = data.maintenance_date

        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)

        logger.info(
            f"Maintenance {record.id} ({record.maintenance_type.value}) "
            f"recorded on {qr.qr_code} by {user.id}")
        return MaintenanceRead.model_validate(record)
