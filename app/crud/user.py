from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, or_
from app.crud.base import CRUDBase
from app.models.event import Event
from app.models.user import User, UserRole
from app.schemas.user import UserCreate, UserBase

from app.core.security_password import hash_password

def normalize_email(email: str) -> str:
    return (email or "").strip().lower()

class CRUDUser(CRUDBase[User, UserCreate, UserBase]):
    def create(self, db: Session, obj_in: UserCreate, extra=None) -> User:
        data = obj_in.model_dump()
        data["email"] = normalize_email(data["email"])
        data["hashed_password"] = hash_password(data.pop("password"))
        if extra: data.update(extra)
        user = User(**data)
        db.add(user); db.commit(); db.refresh(user)
        return user

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.execute(select(User).where(User.email == normalize_email(email))).scalar_one_or_none()

    def visible_to(self, db: Session, actor: User) -> List[User]:
        """super_admin vê todos; admin vê a si mesmo e os seus usuários."""
        stmt = select(User).order_by(User.created_at.desc(), User.email.asc())
        if actor.role != UserRole.SUPER_ADMIN:
            stmt = stmt.where(or_(User.id == actor.id, User.admin_id == actor.id))
        return list(db.execute(stmt).scalars().all())

    def owns_events(self, db: Session, user_id: str) -> bool:
        return db.scalar(select(Event.id).where(Event.created_by_id == user_id).limit(1)) is not None

    def set_refresh_jti(self, db: Session, user: User, jti: Optional[str]) -> None:
        user.refresh_token = jti
        db.add(user); db.commit()

user_crud = CRUDUser(User)
