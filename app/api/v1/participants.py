import datetime as dt
import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_now
from app.core.access import ensure_event_access
from app.core.errors import AccessDenied, NotFound, ValidationError
from app.crud.check_in import check_in_crud
from app.crud.participant import ParticipantFilters, participant_crud
from app.models.user import User, UserRole
from app.schemas.check_in import CheckInIn, CheckInRecord, CheckInResponse, CheckInsByDate, ParticipantIdentity
from app.schemas.common import Pagination
from app.schemas.participant import (
    LookupIn,
    ParticipantListOut,
    ParticipantListStats,
    ParticipantOut,
    ParticipantSaved,
    ParticipantSearchIn,
    ParticipantSearchOut,
    ParticipantUpdate,
    ParticipantUpsert,
    ParticipantWithLogs,
)
from app.services import analytics
from app.services.voter_lookup import VoterLookupClient, get_voter_lookup

log = logging.getLogger(__name__)

router = APIRouter()

_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_day(value: str) -> dt.date:
    if not _DAY_RE.match(value or ""):
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")


def _saved(response: Response, participant, created: bool) -> ParticipantSaved:
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ParticipantSaved(
        message="Participant added successfully" if created else "Participant updated successfully",
        created=created,
        participant=ParticipantOut.model_validate(participant),
    )


@router.post("/search", response_model=ParticipantSearchOut)
def search_participant(body: ParticipantSearchIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if not body.event_id or not body.id_number:
        raise ValidationError("Event ID and ID number are required")
    ensure_event_access(db, body.event_id, user)
    matches = participant_crud.find_by_id_number(db, event_id=body.event_id, id_number=body.id_number.strip())
    if not matches:
        raise NotFound("Participant not found")
    rows = [ParticipantWithLogs.model_validate(p) for p in matches]
    return ParticipantSearchOut(participant=rows[0], all_matches=rows)


@router.post("/add", response_model=ParticipantSaved, status_code=status.HTTP_201_CREATED)
def add_participant(
    body: ParticipantUpsert,
    response: Response,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ensure_event_access(db, body.event_id, user)
    participant, created = participant_crud.upsert(db, body)
    return _saved(response, participant, created)


@router.post("/lookup", response_model=ParticipantSaved, status_code=status.HTTP_201_CREATED)
def lookup_participant(
    body: LookupIn,
    response: Response,
    db: Session = Depends(get_db),
    voters: VoterLookupClient = Depends(get_voter_lookup),
    user: User = Depends(get_current_user),
):
    ensure_event_access(db, body.event_id, user)
    found = voters.lookup(body.id_number, county=body.county, constituency=body.constituency, ward=body.ward)
    if not found:
        log.info("voter lookup found no match id_number=%s event=%s", body.id_number, body.event_id)
        raise NotFound("Voter not found")
    found.update(event_id=body.event_id, id_number=found.get("id_number") or body.id_number, is_invited=body.is_invited)
    participant, created = participant_crud.upsert(db, ParticipantUpsert.model_validate(found))
    return _saved(response, participant, created)


@router.patch("/{participant_id}", response_model=ParticipantOut)
def edit_participant(
    participant_id: str,
    body: ParticipantUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    p = participant_crud.get(db, participant_id)
    if not p:
        raise NotFound("Participant not found")
    if p.event_id:
        ensure_event_access(db, p.event_id, user)
    elif user.role != UserRole.SUPER_ADMIN:
        # registro legado sem evento: só o super_admin edita
        raise AccessDenied("Access denied to this participant")
    return participant_crud.update(db, p, body)


@router.get("/event/{event_id}", response_model=ParticipantListOut)
def list_participants(
    event_id: str,
    no_id: bool = Query(False, alias="noId"),
    no_phone: bool = Query(False, alias="noPhone"),
    duplicates: bool = Query(False),
    county: Optional[str] = Query(None),
    constituency: Optional[str] = Query(None),
    ward: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=500),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ensure_event_access(db, event_id, user)
    filters = ParticipantFilters(
        no_id=no_id, no_phone=no_phone, duplicates=duplicates,
        county=county, constituency=constituency, ward=ward, search=search,
    )
    rows, total = participant_crud.list_for_event(db, event_id=event_id, filters=filters, page=page, limit=limit)
    return ParticipantListOut(
        participants=[ParticipantWithLogs.model_validate(p) for p in rows],
        pagination=Pagination.build(page=page, limit=limit, total=total),
        stats=ParticipantListStats(**participant_crud.list_stats(db, event_id=event_id)),
    )


@router.post("/checkin", response_model=CheckInResponse, status_code=status.HTTP_201_CREATED)
def check_in(
    body: CheckInIn,
    db: Session = Depends(get_db),
    now: dt.datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    if body.event_id:
        ensure_event_access(db, body.event_id, user)
    result = check_in_crud.check_in(db, event_id=body.event_id, id_number=body.id_number, actor_id=user.id, now=now)
    return CheckInResponse(
        check_in=CheckInRecord.model_validate(result.check_in),
        participant=ParticipantIdentity.model_validate(result.participant),
    )


@router.get("/event/{event_id}/date/{date}", response_model=CheckInsByDate)
def checked_in_on_date(
    event_id: str,
    date: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ensure_event_access(db, event_id, user)
    day = _parse_day(date)
    rows = analytics.check_ins_on_date(db, event_id, day)
    return CheckInsByDate(date=date, count=len(rows), participants=rows)
