from datetime import datetime

from fastapi import BackgroundTasks, HTTPException, status
from loguru import logger
from sqlmodel import Session

from app.core.audit import record_activity
from app.core.config import settings
from app.db.schema import User, AuditAction
from app.models.qr_code import ScanRequest, ScanResult
from app.services.qr_code import QRCodeService


DEFAULT_SCAN_METHOD = "api"


class ScanService:
    """
    Resolves a typed or scanned code to the fitting, its location and its
    most recent history, and records that the lookup happened.
    """

    def __init__(self, session: Session):
        self.session = session
        self.qr_codes = QRCodeService(session)

    def scan(
        self,
        user: User,
        data: ScanRequest,
        background_tasks: BackgroundTasks
    ) -> ScanResult:
        code = (data.qr_code or "").strip()
        if not code:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="QR code is required"
            )

        qr = self.qr_codes.find_by_code(code)
        if qr is None:
            logger.info(f"Scan by {user.id} found no QR code '{code}'")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="QR code not found"
            )

        inspections, maintenance = self.qr_codes.get_history(
            qr.id, limit=settings.scan_history_limit)

        result = ScanResult.model_validate(
            qr,
            update={"recent_inspections": inspections,
                    "recent_maintenance": maintenance}
        )

        # Best-effort: runs after the response, failures only reach the log
        background_tasks.add_task(
            record_activity,
            action=AuditAction.QR_SCAN.value,
            details={
                "scanned_at": datetime.utcnow().isoformat(),
                "scan_method": data.scan_method or DEFAULT_SCAN_METHOD,
                "location": data.location,
                "device_info": data.device_info,
            },
            qr_code_id=qr.id,
            user_id=user.id,
        )

        return result
