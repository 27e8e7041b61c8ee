# app/core/rbac.py
from fastapi import Depends

from app.api.deps import get_current_user
from app.core.errors import AccessDenied
from app.models.user import User, UserRole

_HIERARCHY = [UserRole.USER, UserRole.ADMIN, UserRole.SUPER_ADMIN]
_RANK = {role: idx for idx, role in enumerate(_HIERARCHY)}

def require_min_role(min_role: UserRole):
    need = _RANK[min_role]
    def dep(user: User = Depends(get_current_user)) -> User:
        if _RANK.get(user.role, -1) < need:
            if min_role == UserRole.SUPER_ADMIN:
                raise AccessDenied("Super Admin access required")
            raise AccessDenied("Admin access required")
        return user
    return dep

require_admin = require_min_role(UserRole.ADMIN)
require_super_admin = require_min_role(UserRole.SUPER_ADMIN)
