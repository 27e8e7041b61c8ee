from typing import List, Sequence, Tuple
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy import select
from app.core.access import scoped_events_clause
from app.crud.base import CRUDBase
from app.models.event import Event
from app.models.user import User
from app.schemas.event import EventCreate

class CRUDEvent(CRUDBase[Event, EventCreate, EventCreate]):
    def get_detail(self, db: Session, event_id: str) -> Event | None:
        stmt = (
            select(Event)
            .options(joinedload(Event.created_by), selectinload(Event.assigned_users))
            .where(Event.id == event_id)
        )
        return db.execute(stmt).scalar_one_or_none()

    def list_for(self, db: Session, user: User, *, page: int = 1, limit: int = 10) -> Tuple[List[Event], int]:
        clause = scoped_events_clause(user)
        total = self.count(db, clause)
        stmt = (
            select(Event)
            .options(joinedload(Event.created_by))
            .where(clause)
            .order_by(Event.created_at.desc(), Event.id.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(db.execute(stmt).scalars().all()), total

    def assign_users(self, db: Session, event: Event, user_ids: Sequence[str]) -> int:
        """Acrescenta usuários ao evento (ids desconhecidos ou repetidos são ignorados)."""
        wanted = set(user_ids) - {u.id for u in event.assigned_users}
        if not wanted:
            return 0
        users = db.execute(select(User).where(User.id.in_(wanted))).scalars().all()
        event.assigned_users.extend(users)
        db.add(event); db.commit(); db.refresh(event)
        return len(users)

event_crud = CRUDEvent(Event)
