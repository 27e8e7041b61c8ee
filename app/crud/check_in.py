from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.clock import checkin_date_for
from app.core.errors import CheckInStorageError, DuplicateCheckIn, NotFound, ValidationError
from app.crud.base import CRUDBase
from app.models.check_in_log import CheckInLog
from app.models.event import Event
from app.models.participant import Participant

log = logging.getLogger(__name__)


@dataclass
class CheckInResult:
    check_in: CheckInLog
    participant: Participant


class CRUDCheckIn(CRUDBase[CheckInLog, None, None]):
    def find(self, db: Session, *, participant_id: str, event_id: str, day: dt.date) -> Optional[CheckInLog]:
        return db.execute(
            select(CheckInLog).where(
                CheckInLog.participant_id == participant_id,
                CheckInLog.event_id == event_id,
                CheckInLog.check_in_date == day,
            )
        ).scalar_one_or_none()

    def check_in(
        self,
        db: Session,
        *,
        event_id: Optional[str],
        id_number: Optional[str],
        actor_id: Optional[str],
        now: dt.datetime,
    ) -> CheckInResult:
        event_id = (event_id or "").strip()
        id_number = (id_number or "").strip()
        if not event_id or not id_number:
            raise ValidationError("Event ID and ID number are required")

        if not db.get(Event, event_id):
            raise NotFound("Event not found")

        # duplicados de idNumber no mesmo evento: vale o mais antigo
        participant = db.execute(
            select(Participant)
            .where(Participant.event_id == event_id, Participant.id_number == id_number)
            .order_by(Participant.created_at.asc(), Participant.id.asc())
            .limit(1)
        ).scalar_one_or_none()
        if not participant:
            raise NotFound("Participant not found. Please register first.")

        day = checkin_date_for(now)
        if self.find(db, participant_id=participant.id, event_id=event_id, day=day):
            log.info("duplicate check-in participant=%s event=%s actor=%s day=%s",
                     participant.id, event_id, actor_id, day)
            raise DuplicateCheckIn()

        return self._insert(db, participant=participant, event_id=event_id, actor_id=actor_id, day=day, now=now)

    def _insert(self, db: Session, *, participant: Participant, event_id: str, actor_id: Optional[str],
                day: dt.date, now: dt.datetime) -> CheckInResult:
        participant_id = participant.id
        row = CheckInLog(
            participant_id=participant_id,
            event_id=event_id,
            checked_in_by_id=actor_id,
            check_in_date=day,
            checked_in_at=now,
        )
        db.add(row)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            # outra requisição gravou o mesmo (participante, evento, dia) entre o pré-check e o insert
            if self.find(db, participant_id=participant_id, event_id=event_id, day=day):
                log.info("concurrent duplicate check-in participant=%s event=%s actor=%s day=%s",
                         participant_id, event_id, actor_id, day)
                raise DuplicateCheckIn()
            # FK ou outra restrição: não é duplicidade, sobe como erro interno
            log.error("check-in insert failed participant=%s event=%s actor=%s day=%s: %s",
                      participant_id, event_id, actor_id, day, getattr(exc, "orig", exc))
            raise CheckInStorageError(f"Could not record check-in for participant {participant_id}") from exc
        db.refresh(row)
        log.info("check-in participant=%s event=%s actor=%s day=%s", participant.id, event_id, actor_id, day)
        return CheckInResult(check_in=row, participant=participant)

    def _ledger_query(self, event_id: str):
        return (
            select(CheckInLog)
            .options(joinedload(CheckInLog.participant), joinedload(CheckInLog.checked_in_by))
            .where(CheckInLog.event_id == event_id)
            .order_by(CheckInLog.checked_in_at.desc())
        )

    def on_date(self, db: Session, *, event_id: str, day: dt.date) -> List[CheckInLog]:
        stmt = self._ledger_query(event_id).where(CheckInLog.check_in_date == day)
        return list(db.execute(stmt).scalars().all())

    def for_event(self, db: Session, *, event_id: str) -> List[CheckInLog]:
        return list(db.execute(self._ledger_query(event_id)).scalars().all())


check_in_crud = CRUDCheckIn(CheckInLog)
