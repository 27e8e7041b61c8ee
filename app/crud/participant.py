from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session, selectinload

from app.core.errors import ValidationError
from app.crud.base import CRUDBase
from app.models.check_in_log import CheckInLog
from app.models.participant import DEMOGRAPHIC_FIELDS, Participant
from app.schemas.participant import ParticipantUpdate, ParticipantUpsert


@dataclass
class ParticipantFilters:
    no_id: bool = False
    no_phone: bool = False
    duplicates: bool = False
    county: Optional[str] = None
    constituency: Optional[str] = None
    ward: Optional[str] = None
    search: Optional[str] = None


def _blank(col):
    return or_(col.is_(None), col == "")


class CRUDParticipant(CRUDBase[Participant, ParticipantUpsert, ParticipantUpdate]):
    def _with_logs(self):
        return selectinload(Participant.check_in_logs).joinedload(CheckInLog.checked_in_by)

    def find_by_id_number(self, db: Session, *, event_id: str, id_number: str) -> List[Participant]:
        """Todos os registros do idNumber no evento, do mais antigo ao mais novo."""
        stmt = (
            select(Participant)
            .options(self._with_logs())
            .where(Participant.event_id == event_id, Participant.id_number == id_number)
            .order_by(Participant.created_at.asc(), Participant.id.asc())
        )
        return list(db.execute(stmt).scalars().all())

    def upsert(self, db: Session, obj_in: ParticipantUpsert | Dict[str, Any]) -> Tuple[Participant, bool]:
        """Idempotent registration keyed by (event_id, id_number). Never touches the ledger.

        Returns ``(participant, created)``.
        """
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        event_id = (data.get("event_id") or "").strip()
        id_number = (data.get("id_number") or "").strip()
        if not event_id or not id_number:
            raise ValidationError("Event ID and ID number are required")

        existing = self.find_by_id_number(db, event_id=event_id, id_number=id_number)
        if existing:
            changes = {f: data[f] for f in DEMOGRAPHIC_FIELDS if f in data and data[f] is not None}
            return self.update(db, existing[0], changes), False

        fields = {f: data.get(f) for f in DEMOGRAPHIC_FIELDS if data.get(f) is not None}
        obj = Participant(
            id=data.get("id") or str(uuid.uuid4()),
            event_id=event_id,
            id_number=id_number,
            **fields,
        )
        db.add(obj); db.commit(); db.refresh(obj)
        return obj, True

    def _filtered(self, event_id: str, filters: ParticipantFilters):
        stmt = select(Participant).where(Participant.event_id == event_id)
        if filters.no_id:
            stmt = stmt.where(_blank(Participant.id_number))
        if filters.no_phone:
            stmt = stmt.where(_blank(Participant.phone_number))
        if filters.county:
            stmt = stmt.where(Participant.county == filters.county)
        if filters.constituency:
            stmt = stmt.where(Participant.constituency == filters.constituency)
        if filters.ward:
            stmt = stmt.where(Participant.ward == filters.ward)
        if filters.search:
            term = f"%{filters.search}%"
            stmt = stmt.where(or_(Participant.name.ilike(term), Participant.id_number.ilike(term)))
        if filters.duplicates:
            stmt = stmt.where(Participant.id_number.in_(self._duplicate_ids(event_id)))
        return stmt

    def _duplicate_ids(self, event_id: str):
        return (
            select(Participant.id_number)
            .where(Participant.event_id == event_id, ~_blank(Participant.id_number))
            .group_by(Participant.id_number)
            .having(func.count() > 1)
        )

    def list_for_event(
        self, db: Session, *, event_id: str, filters: ParticipantFilters, page: int = 1, limit: int = 10
    ) -> Tuple[List[Participant], int]:
        base = self._filtered(event_id, filters)
        total = db.scalar(select(func.count()).select_from(base.subquery())) or 0
        stmt = (
            base.options(self._with_logs())
            .order_by(Participant.created_at.desc(), Participant.id.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(db.execute(stmt).scalars().all()), total

    def list_stats(self, db: Session, *, event_id: str) -> Dict[str, int]:
        row = db.execute(
            select(
                func.count(),
                func.count(case((_blank(Participant.id_number), 1))),
                func.count(case((_blank(Participant.phone_number), 1))),
            ).where(Participant.event_id == event_id)
        ).one()
        # soma de todos os registros que fazem parte de algum grupo duplicado
        dup_groups = (
            select(func.count().label("n"))
            .where(Participant.event_id == event_id, ~_blank(Participant.id_number))
            .group_by(Participant.id_number)
            .having(func.count() > 1)
            .subquery()
        )
        duplicates = db.scalar(select(func.coalesce(func.sum(dup_groups.c.n), 0))) or 0
        return {
            "total_participants": row[0] or 0,
            "missing_ids": row[1] or 0,
            "missing_phones": row[2] or 0,
            "duplicates": int(duplicates),
        }


participant_crud = CRUDParticipant(Participant)
