from datetime import datetime
from typing import Dict, List, Type, TypeVar

from fastapi import BackgroundTasks, HTTPException, status
from loguru import logger
from pydantic import BaseModel, ValidationError
from sqlalchemy import Float, cast
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from app.core.audit import record_activity
from app.core.errors import validation_http_error
from app.db.schema import QRCode, Inspection, AuditAction
from app.models.common import APIResponse
from app.models.external import (
    ExternalRequest, TrackStatusQuery, ScheduleUpdate, QRStatusQuery,
    TrackStatusItem, LocationRead, TrackFittingInfo, ConditionRead, QRStatusRead
)
from app.models.fitting import FittingUpsert, FittingRead
from app.models.qr_code import QRCodeRead
from app.services.fitting import FittingService
from app.services.qr_code import QRCodeService


M = TypeVar("M", bound=BaseModel)

TMS_SOURCE = "IRCEPT_TMS"


def parse_payload(model: Type[M], data: Dict) -> M:
    """Validates an action's `data` payload; failures are client errors."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise validation_http_error(e)


def _location(qr: QRCode) -> LocationRead:
    return LocationRead(
        zone=qr.zone,
        division=qr.division,
        section=qr.section,
        km_post=qr.km_post,
        track_number=qr.track_number,
    )


class ExternalSyncService:
    """
    Inbound integrations: the IRCEPT track management system (maintenance
    scheduling) and the IREPS UDM procurement catalog. Both post
    `{action, data}`; the shared-secret check happens in the route
    dependency before this service is reached.
    """

    def __init__(self, session: Session):
        self.session = session
        self.qr_codes = QRCodeService(session)
        self.fittings = FittingService(session)

    # ==========================================================================
    # IRCEPT (MAINTENANCE SCHEDULING)
    # ==========================================================================

    def get_track_status(self, query: TrackStatusQuery) -> List[TrackStatusItem]:
        km_value = cast(QRCode.km_post, Float)
        statement = select(QRCode).options(selectinload(QRCode.fitting))

        if query.zone:
            statement = statement.where(QRCode.zone == query.zone)
        if query.division:
            statement = statement.where(QRCode.division == query.division)
        if query.section:
            statement = statement.where(QRCode.section == query.section)
        if query.km_from is not None and query.km_to is not None:
            statement = statement.where(
                km_value >= query.km_from, km_value <= query.km_to)

        records = self.session.exec(statement.order_by(km_value)).all()
        if not records:
            return []

        # Most recent inspection per record
        latest: Dict = {}
        inspections = self.session.exec(
            select(Inspection)
            .where(Inspection.qr_code_id.in_([qr.id for qr in records]))
            .order_by(Inspection.inspection_date.desc())
        ).all()
        for inspection in inspections:
            latest.setdefault(inspection.qr_code_id, inspection)

        items = []
        for qr in records:
            last = latest.get(qr.id)
            items.append(TrackStatusItem(
                qr_code=qr.qr_code,
                location=_location(qr),
                fitting=TrackFittingInfo(
                    name=qr.fitting.name,
                    part_number=qr.fitting.part_number,
                    specifications=qr.fitting.specifications,
                ),
                status=qr.status,
                condition=ConditionRead(
                    rating=last.condition_rating if last else None,
                    last_inspection=last.inspection_date if last else None,
                    defects=last.defects_found if last else [],
                ),
            ))
        return items

    def update_maintenance_schedule(
        self,
        data: ScheduleUpdate,
        background_tasks: BackgroundTasks
    ) -> QRCodeRead:
        qr = self.qr_codes.find_by_code(data.qr_code)
        if qr is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="QR code not found"
            )

        previous = qr.status
        qr.status = data.status
        self.session.add(qr)
        self.session.commit()

        logger.info(
            f"{TMS_SOURCE} moved {qr.qr_code} from {previous.value} to {data.status.value}")

        # System update: no user reference
        background_tasks.add_task(
            record_activity,
            action=AuditAction.TMS_UPDATE.value,
            details={
                "source": TMS_SOURCE,
                "schedule_data": data.model_dump(mode="json"),
                "previous_status": previous.value,
                "updated_at": datetime.utcnow().isoformat(),
            },
            qr_code_id=qr.id,
            user_id=None,
        )

        return QRCodeRead.model_validate(self.qr_codes.get_qr_by_id(qr.id))

    def handle_ircept(self, request: ExternalRequest, background_tasks: BackgroundTasks) -> APIResponse:
        if request.action == "get_track_status":
            items = self.get_track_status(
                parse_payload(TrackStatusQuery, request.data))
            return APIResponse(data=items, count=len(items))

        if request.action == "update_maintenance_schedule":
            updated = self.update_maintenance_schedule(
                parse_payload(ScheduleUpdate, request.data), background_tasks)
            return APIResponse(
                data=updated,
                message="Maintenance schedule updated successfully"
            )

        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid action")

    # ==========================================================================
    # IREPS (PROCUREMENT CATALOG SYNC)
    # ==========================================================================

    def sync_track_fitting(self, data: FittingUpsert) -> FittingRead:
        fitting, _ = self.fittings.upsert_fitting(data)
        return FittingRead.model_validate(fitting)

    def get_qr_status(self, query: QRStatusQuery) -> QRStatusRead:
        qr = self.qr_codes.find_by_code(query.qr_code)
        if qr is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="QR code not found"
            )

        return QRStatusRead(
            qr_code=qr.qr_code,
            status=qr.status,
            location=_location(qr),
            track_fitting=TrackFittingInfo(
                name=qr.fitting.name,
                part_number=qr.fitting.part_number,
                manufacturer=qr.fitting.manufacturer,
            ),
            last_updated=qr.updated_at,
        )

    def handle_ireps(self, request: ExternalRequest) -> APIResponse:
        if request.action == "sync_track_fittings":
            fitting = self.sync_track_fitting(
                parse_payload(FittingUpsert, request.data))
            return APIResponse(
                data=fitting,
                message="Track fitting synced successfully"
            )

        if request.action == "get_qr_status":
            return APIResponse(
                data=self.get_qr_status(parse_payload(QRStatusQuery, request.data)))

        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid action")
