from __future__ import annotations
import datetime as dt
from typing import List, Optional
from pydantic import AliasChoices, Field

from app.schemas.common import CamelModel, Pagination
from app.schemas.user import UserOut, UserRef

# ---------------------------
# Event Schemas
# ---------------------------

class EventCreate(CamelModel):
    event_name: str = Field(min_length=1, max_length=255)
    location: Optional[str] = None
    date: Optional[dt.date] = None

class EventOut(CamelModel):
    event_id: str = Field(validation_alias=AliasChoices("id", "eventId", "event_id"), serialization_alias="eventId")
    event_name: str
    location: Optional[str] = None
    date: Optional[dt.date] = None
    created_by: Optional[UserRef] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

class EventDetail(EventOut):
    assigned_users: List[UserOut] = Field(default_factory=list)

class EventCreated(CamelModel):
    message: str = "Event created successfully"
    event: EventOut

class EventList(CamelModel):
    message: str = "Events retrieved successfully"
    events: List[EventOut]
    pagination: Pagination

class AssignUsersIn(CamelModel):
    user_ids: List[str]

class AssignUsersOut(CamelModel):
    message: str = "Users assigned to event successfully"
    assigned_count: int
