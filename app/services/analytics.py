import math
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select, func

from app.core.config import settings
from app.db.schema import (
    QRCode, QRStatus, Inspection, InspectionStatus,
    MaintenanceRecord, MaintenanceType, AuditLog, User
)
from app.models.analytics import (
    AnalyticsSummary, AnalyticsDistributions, AnalyticsRead,
    ZoneCount, RatingCount, ActivityItem, DashboardRead
)
from app.models.qr_code import QRCodeRead
from app.services.inspection import day_start, day_end


CONDITION_RATINGS = (1, 2, 3, 4, 5)


def percentage(part: int, total: int) -> int:
    """
    round(100 * part / total), half rounded up, clamped to [0, 100].
    An empty denominator yields 0.
    """
    if not total:
        return 0
    value = math.floor(100 * part / total + 0.5)
    return max(0, min(100, value))


def health_score(active: int, total: int) -> int:
    return percentage(active, total)


def inspection_coverage(total_inspections: int, total_qr_codes: int) -> int:
    return percentage(total_inspections, total_qr_codes)


class AnalyticsService:
    """
    Dashboard aggregates. Every call is a fresh snapshot computed with
    COUNT / GROUP BY in the database; nothing is cached.
    """

    def __init__(self, session: Session):
        self.session = session

    # ==========================================================================
    # FILTER HELPERS
    # ==========================================================================

    @staticmethod
    def _scope_qr(query, zone: Optional[str], division: Optional[str]):
        if zone:
            query = query.where(QRCode.zone == zone)
        if division:
            query = query.where(QRCode.division == division)
        return query

    def _scope_history(self, query, model, date_column, zone, division, date_from, date_to):
        if zone or division:
            query = self._scope_qr(
                query.join(QRCode, model.qr_code_id == QRCode.id), zone, division)
        if date_from:
            query = query.where(date_column >= day_start(date_from))
        if date_to:
            query = query.where(date_column <= day_end(date_to))
        return query

    # ==========================================================================
    # AGGREGATES
    # ==========================================================================

    def count_by_status(
        self,
        zone: Optional[str] = None,
        division: Optional[str] = None
    ) -> Dict[str, int]:
        """total / active / inactive / maintenance."""
        query = self._scope_qr(
            select(QRCode.status, func.count(QRCode.id)).group_by(QRCode.status),
            zone, division
        )
        counts = {s.value: 0 for s in QRStatus}
        for qr_status, count in self.session.exec(query).all():
            counts[QRStatus(qr_status).value] = count
        counts["total"] = sum(counts.values())
        return counts

    def count_by_zone(
        self,
        zone: Optional[str] = None,
        division: Optional[str] = None
    ) -> Dict[str, int]:
        query = self._scope_qr(
            select(QRCode.zone, func.count(QRCode.id)).group_by(QRCode.zone),
            zone, division
        )
        return {name: count for name, count in self.session.exec(query).all()}

    def count_by_condition_rating(
        self,
        zone: Optional[str] = None,
        division: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None
    ) -> Dict[int, int]:
        """Inspections per rating 1..5, zero-filled."""
        query = self._scope_history(
            select(Inspection.condition_rating, func.count(Inspection.id))
            .group_by(Inspection.condition_rating),
            Inspection, Inspection.inspection_date,
            zone, division, date_from, date_to
        )
        counts = {rating: 0 for rating in CONDITION_RATINGS}
        for rating, count in self.session.exec(query).all():
            if rating in counts:
                counts[rating] = count
        return counts

    def _count_inspections(self, zone, division, date_from, date_to, inspection_status=None) -> int:
        query = self._scope_history(
            select(func.count(Inspection.id)),
            Inspection, Inspection.inspection_date,
            zone, division, date_from, date_to
        )
        if inspection_status:
            query = query.where(Inspection.status == inspection_status)
        return self.session.exec(query).one()

    def _count_maintenance(self, zone, division, date_from, date_to, maintenance_type=None) -> int:
        query = self._scope_history(
            select(func.count(MaintenanceRecord.id)),
            MaintenanceRecord, MaintenanceRecord.maintenance_date,
            zone, division, date_from, date_to
        )
        if maintenance_type:
            query = query.where(
                MaintenanceRecord.maintenance_type == maintenance_type)
        return self.session.exec(query).one()

    def recent_activity(self, limit: Optional[int] = None) -> List[ActivityItem]:
        query = (
            select(AuditLog)
            .options(
                selectinload(AuditLog.qr_code).selectinload(QRCode.fitting),
                selectinload(AuditLog.user)
            )
            .order_by(AuditLog.created_at.desc())
            .limit(limit or settings.recent_activity_limit)
        )

        items = []
        for entry in self.session.exec(query).all():
            items.append(ActivityItem(
                id=entry.id,
                action=entry.action,
                details=entry.details or {},
                created_at=entry.created_at,
                qr_code_id=entry.qr_code_id,
                qr_code=entry.qr_code.qr_code if entry.qr_code else None,
                fitting_name=(entry.qr_code.fitting.name
                              if entry.qr_code and entry.qr_code.fitting else None),
                user_name=entry.user.name if entry.user else None,
            ))
        return items

    # ==========================================================================
    # MAIN ANALYTICS API
    # ==========================================================================

    def get_analytics(
        self,
        zone: Optional[str] = None,
        division: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None
    ) -> AnalyticsRead:
        status_counts = self.count_by_status(zone, division)
        total_inspections = self._count_inspections(
            zone, division, date_from, date_to)

        summary = AnalyticsSummary(
            total_qr_codes=status_counts["total"],
            active_qr_codes=status_counts[QRStatus.ACTIVE.value],
            inactive_qr_codes=status_counts[QRStatus.INACTIVE.value],
            maintenance_qr_codes=status_counts[QRStatus.MAINTENANCE.value],
            total_inspections=total_inspections,
            pending_inspections=self._count_inspections(
                zone, division, date_from, date_to, InspectionStatus.PENDING),
            total_maintenance=self._count_maintenance(
                zone, division, date_from, date_to),
            emergency_maintenance=self._count_maintenance(
                zone, division, date_from, date_to, MaintenanceType.EMERGENCY),
            health_score=health_score(
                status_counts[QRStatus.ACTIVE.value], status_counts["total"]),
            inspection_rate=inspection_coverage(
                total_inspections, status_counts["total"]),
        )

        zones = self.count_by_zone(zone, division)
        ratings = self.count_by_condition_rating(
            zone, division, date_from, date_to)

        return AnalyticsRead(
            summary=summary,
            distributions=AnalyticsDistributions(
                zones=[ZoneCount(zone=z, count=c) for z, c in zones.items()],
                condition_ratings=[RatingCount(rating=r, count=c)
                                   for r, c in ratings.items()],
            ),
            recent_activity=self.recent_activity(),
        )

    def get_dashboard(self) -> DashboardRead:
        """Landing-page counters plus the five newest registrations."""
        status_counts = self.count_by_status()
        pending = self.session.exec(
            select(func.count(Inspection.id))
            .where(Inspection.status == InspectionStatus.PENDING)
        ).one()

        recent = self.session.exec(
            select(QRCode)
            .options(selectinload(QRCode.fitting), selectinload(QRCode.creator))
            .order_by(QRCode.created_at.desc())
            .limit(5)
        ).all()

        return DashboardRead(
            total_qr_codes=status_counts["total"],
            active_qr_codes=status_counts[QRStatus.ACTIVE.value],
            pending_inspections=pending,
            recent_qr_codes=[QRCodeRead.model_validate(qr) for qr in recent],
        )

    def get_health_statistics(self) -> Dict[str, int]:
        return {
            "total_qr_codes": self.session.exec(select(func.count(QRCode.id))).one(),
            "total_users": self.session.exec(select(func.count(User.id))).one(),
            "total_inspections": self.session.exec(select(func.count(Inspection.id))).one(),
        }
