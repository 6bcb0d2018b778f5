from typing import List, Optional, Tuple
from uuid import UUID

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from app.core.config import settings
from app.db.schema import (
    User, QRCode, QRStatus, Inspection, MaintenanceRecord
)
from app.models.qr_code import (
    QRCodeCreate, QRCodeUpdate, QRCodeRead, QRCodeDetailRead
)
from app.models.inspection import InspectionHistoryItem
from app.models.maintenance import MaintenanceHistoryItem
from app.services.fitting import FittingService
from app.utils.qr import generate_qr_code, generate_and_save_qr


class QRCodeService:
    def __init__(self, session: Session):
        self.session = session

    # ==========================================================================
    # READ OPERATIONS
    # ==========================================================================

    def get_qr_by_id(self, qr_id: UUID) -> QRCode:
        qr = self.session.exec(
            select(QRCode)
            .where(QRCode.id == qr_id)
            .options(selectinload(QRCode.fitting), selectinload(QRCode.creator))
        ).first()

        if not qr:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="QR code not found"
            )
        return qr

    def find_by_code(self, code: str) -> Optional[QRCode]:
        return self.session.exec(
            select(QRCode)
            .where(QRCode.qr_code == code)
            .options(selectinload(QRCode.fitting), selectinload(QRCode.creator))
        ).first()

    def list_qr_codes(
        self,
        qr_status: Optional[QRStatus] = None,
        zone: Optional[str] = None,
        division: Optional[str] = None,
        section: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[QRCodeRead]:
        query = select(QRCode).options(
            selectinload(QRCode.fitting), selectinload(QRCode.creator))

        if qr_status:
            query = query.where(QRCode.status == qr_status)
        if zone:
            query = query.where(QRCode.zone == zone)
        if division:
            query = query.where(QRCode.division == division)
        if section:
            query = query.where(QRCode.section == section)

        query = query.order_by(QRCode.created_at.desc()).offset(offset).limit(limit)
        return [QRCodeRead.model_validate(qr) for qr in self.session.exec(query).all()]

    def get_history(
        self,
        qr_id: UUID,
        limit: Optional[int] = None
    ) -> Tuple[List[InspectionHistoryItem], List[MaintenanceHistoryItem]]:
        """
        Inspections and maintenance records of one QR record, newest first.
        """
        inspections_query = (
            select(Inspection)
            .where(Inspection.qr_code_id == qr_id)
            .options(selectinload(Inspection.inspector))
            .order_by(Inspection.inspection_date.desc())
        )
        maintenance_query = (
            select(MaintenanceRecord)
            .where(MaintenanceRecord.qr_code_id == qr_id)
            .options(selectinload(MaintenanceRecord.technician))
            .order_by(MaintenanceRecord.maintenance_date.desc())
        )
        if limit is not None:
            inspections_query = inspections_query.limit(limit)
            maintenance_query = maintenance_query.limit(limit)

        inspections = [
            InspectionHistoryItem.model_validate(i)
            for i in self.session.exec(inspections_query).all()
        ]
        maintenance = [
            MaintenanceHistoryItem.model_validate(m)
            for m in self.session.exec(maintenance_query).all()
        ]
        return inspections, maintenance

    def get_qr_full(self, qr_id: UUID) -> QRCodeDetailRead:
        qr = self.get_qr_by_id(qr_id)
        inspections, maintenance = self.get_history(qr.id)

        return QRCodeDetailRead.model_validate(
            qr,
            update={"inspections": inspections,
                    "maintenance_records": maintenance}
        )

    # ==========================================================================
    # WRITE OPERATIONS
    # ==========================================================================

    def create_qr_code(self, user: User, data: QRCodeCreate) -> QRCodeRead:
        """
        Registers an installed fitting under a freshly generated code.
        A collision on the unique code is retried with a new candidate up
        to `qr_code_max_attempts` times.
        """
        FittingService(self.session).get_fitting_by_id(data.fitting_id)

        max_attempts = settings.qr_code_max_attempts
        for attempt in range(1, max_attempts + 1):
            code = generate_qr_code()
            qr = QRCode(
                qr_code=code,
                fitting_id=data.fitting_id,
                batch_number=data.batch_number,
                manufacturing_date=data.manufacturing_date,
                installation_date=data.installation_date,
                location_details=data.location_blob(),
                zone=data.zone,
                division=data.division,
                section=data.section,
                km_post=data.km_post,
                track_number=data.track_number,
                status=QRStatus.ACTIVE,
                created_by=user.id,
            )
            self.session.add(qr)

            try:
                self.session.commit()
            except IntegrityError:
                self.session.rollback()
                if self.find_by_code(code) is None:
                    # Not a code collision
                    raise
                logger.warning(
                    f"QR code collision on {code} (attempt {attempt}/{max_attempts})")
                continue

            qr.qr_image_url = generate_and_save_qr(code, code)
            self.session.add(qr)
            self.session.commit()

            logger.info(f"User {user.id} registered QR code {code}")
            return QRCodeRead.model_validate(self.get_qr_by_id(qr.id))

        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Duplicate QR code: could not generate a unique code, please retry."
        )

    def update_qr_code(self, user: User, qr_id: UUID, data: QRCodeUpdate) -> QRCodeRead:
        qr = self.get_qr_by_id(qr_id)

        # Explicit nulls only clear nullable columns
        update_data = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key == "track_number"
        }
        for key, value in update_data.items():
            setattr(qr, key, value)

        self.session.add(qr)
        self.session.commit()

        logger.info(
            f"User {user.id} updated QR code {qr.qr_code}: {sorted(update_data)}")
        return QRCodeRead.model_validate(self.get_qr_by_id(qr_id))
