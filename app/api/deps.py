from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.clock import get_now
from app.core.errors import Unauthenticated
from app.core.tokens import decode_access
from app.db.session import get_db
from app.models.user import User, UserRole

__all__ = ["get_db", "get_now", "get_bearer_token", "get_current_user"]

# ----------------------------------------------------------------------
# Lê o Bearer do header Authorization (sem usar OAuth2PasswordBearer)
# ----------------------------------------------------------------------
def get_bearer_token(authorization: str = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise Unauthenticated("Authentication required")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise Unauthenticated("Invalid Authorization header")
    return parts[1]

# ----------------------------------------------------------------------
# Usuário atual a partir do access token
# ----------------------------------------------------------------------
def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    payload = decode_access(token)
    if not payload:
        raise Unauthenticated("Invalid or expired token")
    try:
        UserRole(payload.get("role"))
    except ValueError:
        raise Unauthenticated("Invalid or expired token")

    user = db.get(User, payload["sub"])
    if not user:
        raise Unauthenticated("User found in token no longer exists")
    return user
