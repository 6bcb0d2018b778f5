import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from loguru import logger
from sqlmodel import Session

from app.db.core import engine
from app.db.schema import AuditLog


def record_activity(
    action: str,
    details: Dict[str, Any],
    qr_code_id: Optional[uuid.UUID] = None,
    user_id: Optional[uuid.UUID] = None,
) -> bool:
    """
    Background worker for the activity log.
    Creates its OWN session using the global engine so it can run after the
    response has been sent. Failures are logged and swallowed: the activity
    log never decides whether the primary operation succeeded.
    """
    try:
        with Session(engine) as session:
            entry = AuditLog(
                qr_code_id=qr_code_id,
                user_id=user_id,
                action=action,
                details=details,
                created_at=datetime.utcnow(),
            )
            session.add(entry)
            session.commit()
        return True

    except Exception:
        logger.exception(
            f"Failed to record activity '{action}' for QR record {qr_code_id}")
        return False
