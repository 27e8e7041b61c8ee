# app/core/access.py
"""Ownership-based visibility of events.

super_admin sees everything, an admin sees the events it created and a plain
user sees the events created by its admin. A user without ``admin_id`` sees
nothing.
"""
from __future__ import annotations

from sqlalchemy import false, true
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from app.core.errors import AccessDenied, NotFound
from app.models.event import Event
from app.models.user import User, UserRole


def owner_id_for(user: User) -> str | None:
    """Id of the admin whose events ``user`` may see (None for super_admin and orphan users)."""
    if user.role == UserRole.ADMIN:
        return user.id
    if user.role == UserRole.USER:
        return user.admin_id
    return None


def can_access(event: Event, user: User) -> bool:
    if user.role == UserRole.SUPER_ADMIN:
        return True
    owner = owner_id_for(user)
    return owner is not None and event.created_by_id == owner


def scoped_events_clause(user: User) -> ColumnElement[bool]:
    """Same rule as ``can_access`` as a WHERE clause over ``Event``."""
    if user.role == UserRole.SUPER_ADMIN:
        return true()
    owner = owner_id_for(user)
    if owner is None:
        return false()
    return Event.created_by_id == owner


def ensure_event_access(db: Session, event_id: str, user: User) -> Event:
    event = db.get(Event, event_id)
    if not event:
        raise NotFound("Event not found")
    if not can_access(event, user):
        raise AccessDenied("Access denied to this event")
    return event


def can_delete_event(event: Event, user: User) -> bool:
    return user.role == UserRole.SUPER_ADMIN or (
        user.role == UserRole.ADMIN and event.created_by_id == user.id
    )
