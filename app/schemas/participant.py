from __future__ import annotations
import datetime as dt
from typing import List, Optional
from pydantic import Field, field_validator

from app.schemas.common import CamelModel, Pagination
from app.schemas.user import UserRef


class ParticipantFields(CamelModel):
    name: Optional[str] = None
    date_of_birth: Optional[dt.date] = None
    sex: Optional[str] = None
    county: Optional[str] = None
    constituency: Optional[str] = None
    ward: Optional[str] = None
    polling_center: Optional[str] = None
    group: Optional[str] = None
    phone_number: Optional[str] = None
    is_registered_voter: Optional[bool] = None
    is_invited: Optional[bool] = None

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _blank_dob(cls, v):
        # o registro externo devolve "" quando não há data
        if isinstance(v, str) and not v.strip():
            return None
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v


class ParticipantUpsert(ParticipantFields):
    id: Optional[str] = None
    event_id: str = Field(min_length=1)
    id_number: str = Field(min_length=1, max_length=50)

    @field_validator("event_id", "id_number", mode="before")
    @classmethod
    def _strip_keys(cls, v):
        # "   " vira "" e cai no min_length
        return v.strip() if isinstance(v, str) else v


class ParticipantUpdate(ParticipantFields):
    id_number: Optional[str] = Field(default=None, min_length=1, max_length=50)

    @field_validator("id_number", mode="before")
    @classmethod
    def _strip_id(cls, v):
        return v.strip() if isinstance(v, str) else v


class ParticipantSearchIn(CamelModel):
    event_id: Optional[str] = None
    id_number: Optional[str] = None


class LookupIn(CamelModel):
    event_id: str = Field(min_length=1)
    id_number: str = Field(min_length=1)
    county: Optional[str] = None
    constituency: Optional[str] = None
    ward: Optional[str] = None
    # None mantém o convite já gravado
    is_invited: Optional[bool] = None

    @field_validator("event_id", "id_number", mode="before")
    @classmethod
    def _strip_keys(cls, v):
        # "   " vira "" e cai no min_length
        return v.strip() if isinstance(v, str) else v


class CheckInLogRef(CamelModel):
    id: str
    check_in_date: dt.date
    checked_in_at: dt.datetime
    checked_in_by: Optional[UserRef] = None


class ParticipantOut(CamelModel):
    id: str
    id_number: Optional[str] = None
    name: Optional[str] = None
    date_of_birth: Optional[dt.date] = None
    sex: Optional[str] = None
    county: Optional[str] = None
    constituency: Optional[str] = None
    ward: Optional[str] = None
    polling_center: Optional[str] = None
    group: Optional[str] = None
    phone_number: Optional[str] = None
    is_registered_voter: bool = False
    is_invited: bool = False
    event_id: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    @field_validator("is_registered_voter", "is_invited", mode="before")
    @classmethod
    def _null_is_false(cls, v):
        return bool(v)


class ParticipantWithLogs(ParticipantOut):
    check_in_logs: List[CheckInLogRef] = Field(default_factory=list)


class ParticipantSaved(CamelModel):
    message: str
    created: bool
    participant: ParticipantOut


class ParticipantSearchOut(CamelModel):
    message: str = "Participant found"
    participant: ParticipantWithLogs
    all_matches: List[ParticipantWithLogs]


class ParticipantListStats(CamelModel):
    total_participants: int
    missing_ids: int
    missing_phones: int
    duplicates: int


class ParticipantListOut(CamelModel):
    message: str = "Participants retrieved successfully"
    participants: List[ParticipantWithLogs]
    pagination: Pagination
    stats: ParticipantListStats
