from typing import List, Optional, Tuple
from uuid import UUID

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy import or_
from sqlmodel import Session, select

from app.db.schema import TrackFitting
from app.models.fitting import FittingUpsert


class FittingService:
    def __init__(self, session: Session):
        self.session = session

    def get_fitting_by_id(self, fitting_id: UUID) -> TrackFitting:
        fitting = self.session.get(TrackFitting, fitting_id)
        if not fitting:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Track fitting not found."
            )
        return fitting

    def get_fitting_by_part_number(self, part_number: str) -> Optional[TrackFitting]:
        return self.session.exec(
            select(TrackFitting).where(TrackFitting.part_number == part_number)
        ).first()

    def list_fittings(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[TrackFitting]:
        query = select(TrackFitting)
        if category:
            query = query.where(TrackFitting.category == category)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                TrackFitting.name.ilike(pattern),
                TrackFitting.part_number.ilike(pattern)
            ))
        return self.session.exec(query.order_by(TrackFitting.name)).all()

    def upsert_fitting(self, data: FittingUpsert) -> Tuple[TrackFitting, bool]:
        """
        Idempotent (Upsert) keyed by part number:
        If the part exists, UPDATE its fields; if not, CREATE it.
        Returns the entry and whether it was created.
        """
        fitting = self.get_fitting_by_part_number(data.part_number)
        created = fitting is None

        if created:
            fitting = TrackFitting(**data.model_dump())
        else:
            for key, value in data.model_dump(exclude={"part_number"}, exclude_unset=True).items():
                setattr(fitting, key, value)

        self.session.add(fitting)
        self.session.commit()
        self.session.refresh(fitting)

        logger.info(
            f"{'Created' if created else 'Updated'} track fitting {fitting.part_number}")
        return fitting, created
