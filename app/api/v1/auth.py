# app/api/v1/auth.py
from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.core.errors import AccessDenied, NotFound, Unauthenticated, ValidationError
from app.core.rbac import require_admin
from app.core.security_password import verify_and_maybe_upgrade
from app.core.tokens import create_access_token, create_refresh_token, decode_refresh
from app.crud.user import normalize_email, user_crud
from app.models.user import User, UserRole
from app.schemas.common import Message
from app.schemas.token import AuthResponse, LoginIn, RefreshIn
from app.schemas.user import SignupIn, UserCreate, UserOut

router = APIRouter()

# ---------- helpers ----------
def issue_tokens_for(db: Session, user: User) -> AuthResponse:
    claims = dict(sub=user.id, email=user.email, role=user.role.value)
    access = create_access_token(**claims)
    refresh = create_refresh_token(**claims)
    # guarda só o jti do refresh vigente; rotação invalida o anterior
    user_crud.set_refresh_jti(db, user, decode_refresh(refresh)["jti"])
    return AuthResponse(access_token=access, refresh_token=refresh, user=UserOut.model_validate(user))

def _ensure_email_free(db: Session, email: str):
    if user_crud.get_by_email(db, email):
        raise ValidationError("User with this email already exists")

# ---------- endpoints ----------
@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(body: SignupIn, db: Session = Depends(get_db)):
    _ensure_email_free(db, body.email)
    data = UserCreate(**body.model_dump(), role=UserRole.USER)
    return user_crud.create(db, data)

@router.post("/login", response_model=AuthResponse)
def login(body: LoginIn, db: Session = Depends(get_db)):
    user = user_crud.get_by_email(db, body.email)
    if not user:
        raise Unauthenticated("Invalid credentials")

    ok, new_hash = verify_and_maybe_upgrade(body.password, user.hashed_password)
    if not ok:
        raise Unauthenticated("Invalid credentials")
    if new_hash:
        user.hashed_password = new_hash
        db.add(user); db.commit()

    return issue_tokens_for(db, user)

@router.post("/refresh", response_model=AuthResponse)
def refresh(body: RefreshIn, db: Session = Depends(get_db)):
    payload = decode_refresh(body.refresh_token)
    if not payload:
        raise Unauthenticated("Invalid refresh token")
    user = user_crud.get(db, payload["sub"])
    # jti diferente = token já rotacionado ou revogado no logout
    if not user or user.refresh_token != payload["jti"]:
        raise Unauthenticated("Invalid refresh token")
    return issue_tokens_for(db, user)

@router.post("/logout", response_model=Message)
def logout(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    user_crud.set_refresh_jti(db, user, None)
    return Message(message="Logged out successfully")

@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user

# ---------- gestão de usuários ----------
@router.get("/users", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db), actor: User = Depends(require_admin)):
    return user_crud.visible_to(db, actor)

@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreate, db: Session = Depends(get_db), actor: User = Depends(require_admin)):
    _ensure_email_free(db, body.email)
    if actor.role == UserRole.ADMIN:
        if body.role != UserRole.USER:
            raise AccessDenied("Admins can only create users")
        # usuário de admin fica sempre preso ao admin que o criou
        body = body.model_copy(update={"admin_id": actor.id})
    elif body.admin_id and not user_crud.get(db, body.admin_id):
        raise ValidationError("Admin not found")
    return user_crud.create(db, body)

@router.delete("/users/{email}", response_model=Message)
def delete_user(email: str, db: Session = Depends(get_db), actor: User = Depends(require_admin)):
    target = user_crud.get_by_email(db, email)
    if not target:
        raise NotFound("User not found")
    if target.id == actor.id:
        raise ValidationError("You cannot delete your own account")
    if actor.role == UserRole.ADMIN and target.admin_id != actor.id:
        raise AccessDenied("You can only delete your own users")
    if user_crud.owns_events(db, target.id):
        raise ValidationError("User has created events and cannot be deleted")
    # check-ins feitos por ele ficam com checkedInById = NULL
    user_crud.remove(db, target.id)
    return Message(message="User deleted successfully")
