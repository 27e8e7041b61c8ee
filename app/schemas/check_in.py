from __future__ import annotations
import datetime as dt
from typing import List, Optional

from pydantic import field_validator

from app.schemas.common import CamelModel
from app.schemas.user import UserRef


class CheckInIn(CamelModel):
    event_id: Optional[str] = None
    id_number: Optional[str] = None


class CheckInRecord(CamelModel):
    id: str
    participant_id: str
    event_id: str
    check_in_date: dt.date
    checked_in_at: dt.datetime


class ParticipantIdentity(CamelModel):
    id: str
    id_number: Optional[str] = None
    name: Optional[str] = None


class CheckInResponse(CamelModel):
    message: str = "Participant checked in successfully"
    check_in: CheckInRecord
    participant: ParticipantIdentity


# ---- ledger joins (por data / dump completo) ----

class LedgerParticipant(CamelModel):
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
    is_registered_voter: bool = False
    is_invited: bool = False

    @field_validator("is_registered_voter", "is_invited", mode="before")
    @classmethod
    def _null_is_false(cls, v):
        return bool(v)


class LedgerEntry(CamelModel):
    id: str
    check_in_date: dt.date
    checked_in_at: dt.datetime
    participant: LedgerParticipant
    checked_in_by: Optional[UserRef] = None


class CheckInsByDate(CamelModel):
    message: str = "Participants retrieved successfully"
    date: str
    count: int
    participants: List[LedgerEntry]


class EventCheckIns(CamelModel):
    message: str = "Check-ins retrieved successfully"
    count: int
    check_ins: List[LedgerEntry]
