# app/db/init_db.py
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security_password import hash_password
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

def init_db(db: Session) -> None:
    """Cria o primeiro super_admin se ainda não houver nenhum."""
    exists = db.scalar(select(User.id).where(User.role == UserRole.SUPER_ADMIN).limit(1))
    if exists:
        return

    email = settings.SEED_SUPERADMIN_EMAIL.strip().lower()
    if db.scalar(select(User.id).where(User.email == email)):
        return

    admin = User(
        name="Super Admin",
        email=email,
        hashed_password=hash_password(settings.SEED_SUPERADMIN_PASSWORD),
        role=UserRole.SUPER_ADMIN,
    )
    db.add(admin)
    db.commit()
    logger.info("seeded super admin %s", email)
