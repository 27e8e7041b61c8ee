# app/core/security_password.py
from __future__ import annotations
from typing import Optional, Tuple
from passlib.context import CryptContext

from app.core.config import settings


def build_context(schemes: Optional[list] = None) -> CryptContext:
    """O primeiro esquema é o usado para hashes novos; os demais só verificam (e são migrados no login)."""
    return CryptContext(
        schemes=schemes or settings.PASSWORD_SCHEMES,
        deprecated="auto",
        argon2__time_cost=settings.ARGON2_TIME_COST,
        argon2__memory_cost=settings.ARGON2_MEMORY_COST,
        argon2__parallelism=1,
    )


pwd_context = build_context()


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_and_maybe_upgrade(plain: str, stored_hash: str) -> Tuple[bool, Optional[str]]:
    """(ok, novo_hash); novo_hash vem preenchido quando o hash gravado usa esquema obsoleto."""
    if not stored_hash or not pwd_context.identify(stored_hash):
        return False, None
    if not pwd_context.verify(plain, stored_hash):
        return False, None
    if pwd_context.needs_update(stored_hash):
        return True, pwd_context.hash(plain)
    return True, None
