# app/services/analytics.py
"""Read-side aggregations over the check-in ledger.

Participant-count aggregates count each participant once however many days
they were checked in. Raw check-in counts (``total_check_ins``, staff
counts) count every ledger row.
"""
from __future__ import annotations

import datetime as dt
from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy import and_, case, distinct, func, select
from sqlalchemy.orm import Session

from app.core.errors import ValidationError
from app.crud.check_in import check_in_crud
from app.models.check_in_log import CheckInLog
from app.models.event import Event
from app.models.participant import LOCATION_FIELDS, Participant
from app.models.user import User, UserRole
from app.schemas.analytics import (
    AttendanceType,
    Breakdowns,
    CategoryCounts,
    CheckedInCount,
    ConstituencyRow,
    CountyRow,
    Coverage,
    EventAnalytics,
    EventAnalyticsEvent,
    EventAnalyticsStats,
    EventStatistics,
    GlobalAnalytics,
    GlobalAnalyticsStats,
    HierarchyRow,
    StaffRow,
    StaffStats,
    VoterStatus,
    WardRow,
)
from app.schemas.check_in import LedgerEntry
from app.schemas.common import NamedCount
from app.services.demographics import NOT_STATED, age_distribution, gender_distribution

# dimensão -> dimensão pai usada no filtro parentName
PARENT_OF = {"constituency": "county", "ward": "constituency"}

UNKNOWN_COUNTY = "Unknown"
UNREGISTERED_COUNTY = "Unregistered"


def _column(field: str):
    if field not in LOCATION_FIELDS:
        raise ValidationError("Invalid level")
    return getattr(Participant, field)


def _checked_in_ids(event_id: str):
    return select(CheckInLog.participant_id).where(CheckInLog.event_id == event_id)


def _is_true(col):
    # NULL e False caem no mesmo balde
    return func.coalesce(col, False) == True  # noqa: E712


def _clean(value: Optional[str]) -> str:
    return (value or "").strip() or NOT_STATED


def event_totals(db: Session, event_id: str) -> Dict[str, int]:
    total_check_ins = db.scalar(
        select(func.count()).select_from(CheckInLog).where(CheckInLog.event_id == event_id)
    ) or 0
    total_participants = db.scalar(
        select(func.count()).select_from(Participant).where(Participant.event_id == event_id)
    ) or 0
    return {"total_check_ins": total_check_ins, "total_participants": total_participants}


def check_ins_on_date(db: Session, event_id: str, day: dt.date) -> List[LedgerEntry]:
    return [LedgerEntry.model_validate(row) for row in check_in_crud.on_date(db, event_id=event_id, day=day)]


def event_check_ins(db: Session, event_id: str) -> List[LedgerEntry]:
    return [LedgerEntry.model_validate(row) for row in check_in_crud.for_event(db, event_id=event_id)]


def hierarchy_breakdown(
    db: Session, event_id: str, level: str, parent_name: Optional[str] = None
) -> List[HierarchyRow]:
    """Distinct checked-in participants per value of ``level``; null or empty values are left out."""
    col = _column(level)
    total = func.count(distinct(Participant.id))
    stmt = (
        select(col, total)
        .join(CheckInLog, CheckInLog.participant_id == Participant.id)
        .where(CheckInLog.event_id == event_id, col.is_not(None), func.trim(col) != "")
    )
    parent = PARENT_OF.get(level)
    if parent_name and parent:
        stmt = stmt.where(getattr(Participant, parent) == parent_name)
    stmt = stmt.group_by(col).order_by(total.desc(), col.asc())
    return [HierarchyRow(name=name, total_checked_in=count) for name, count in db.execute(stmt).all()]


def dimension_breakdown(db: Session, event_id: str, field: str) -> List[NamedCount]:
    """Like ``hierarchy_breakdown`` but null and empty values fold into one NOT STATED bucket."""
    col = _column(field)
    stmt = (
        select(col, func.count(distinct(Participant.id)))
        .join(CheckInLog, CheckInLog.participant_id == Participant.id)
        .where(CheckInLog.event_id == event_id)
        .group_by(col)
    )
    buckets: Dict[str, int] = {}
    for value, count in db.execute(stmt).all():
        name = (value or "").strip() or NOT_STATED
        buckets[name] = buckets.get(name, 0) + count
    rows = sorted(buckets.items(), key=lambda kv: (-kv[1], kv[0]))
    return [NamedCount(name=name, count=count) for name, count in rows]


def category_counts(db: Session, event_id: str) -> CategoryCounts:
    invited = _is_true(Participant.is_invited)
    registered = _is_true(Participant.is_registered_voter)

    def _count(cond):
        return func.count(case((cond, 1)))

    row = db.execute(
        select(
            _count(invited),
            _count(~invited),
            _count(and_(~invited, ~registered)),
            _count(and_(invited, registered)),
            _count(and_(invited, ~registered)),
            _count(registered),
            _count(~registered),
        ).where(Participant.id.in_(_checked_in_ids(event_id)))
    ).one()
    return CategoryCounts(
        invited_check_ins=row[0],
        registered_walk_ins=row[1],
        adult_population_check_ins=row[2],
        invited_registered_check_ins=row[3],
        invited_not_registered_check_ins=row[4],
        total_registered_check_ins=row[5],
        total_not_registered_check_ins=row[6],
    )


def event_statistics(db: Session, event_id: str) -> EventStatistics:
    totals = event_totals(db, event_id)
    checked_in = db.scalar(
        select(func.count(distinct(CheckInLog.participant_id))).where(CheckInLog.event_id == event_id)
    ) or 0
    breakdowns = Breakdowns(**{f: dimension_breakdown(db, event_id, f) for f in LOCATION_FIELDS})
    return EventStatistics(
        **totals,
        **category_counts(db, event_id).model_dump(),
        checked_in_participants=checked_in,
        breakdowns=breakdowns,
    )


def _checked_in_participants(db: Session, event_id: str) -> List[Participant]:
    stmt = (
        select(Participant)
        .where(Participant.id.in_(_checked_in_ids(event_id)))
        .order_by(Participant.created_at.asc(), Participant.id.asc())
    )
    return list(db.execute(stmt).scalars().all())


def _voter_status(participants) -> VoterStatus:
    registered = sum(1 for p in participants if p.is_registered_voter)
    return VoterStatus(
        registered=CheckedInCount(checked_in=registered),
        non_registered=CheckedInCount(checked_in=len(participants) - registered),
    )


def _top_county(participants) -> Coverage:
    counts: Dict[str, int] = {}
    for p in participants:
        county = (p.county or "").strip() or UNKNOWN_COUNTY
        counts[county] = counts.get(county, 0) + 1
    if not counts:
        return Coverage(active=0, total=0, rate=0, label="None")
    label, active = min(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    total = len(participants)
    return Coverage(active=active, total=total, rate=round(active * 100 / total), label=label)


def _represented(participants):
    constituencies: "OrderedDict[str, ConstituencyRow]" = OrderedDict()
    wards: "OrderedDict[tuple, WardRow]" = OrderedDict()
    for p in participants:
        county, constituency, ward = _clean(p.county), _clean(p.constituency), _clean(p.ward)
        row = constituencies.setdefault(constituency, ConstituencyRow(name=constituency, county=county, count=0))
        row.count += 1
        key = (ward, constituency, county)
        wrow = wards.setdefault(key, WardRow(name=ward, constituency=constituency, county=county, count=0))
        wrow.count += 1
    by_count = lambda r: (-r.count, r.name)  # noqa: E731
    return sorted(constituencies.values(), key=by_count), sorted(wards.values(), key=by_count)


def event_analytics(db: Session, event: Event, today: dt.date) -> EventAnalytics:
    participants = _checked_in_participants(db, event.id)
    constituencies, wards = _represented(participants)
    invited = sum(1 for p in participants if p.is_invited)
    stats = EventAnalyticsStats(
        checked_in=len(participants),
        total_check_ins=event_totals(db, event.id)["total_check_ins"],
        age=age_distribution((p.date_of_birth for p in participants), today),
        gender=gender_distribution(p.sex for p in participants),
        voter_status=_voter_status(participants),
        attendance_type=AttendanceType(invited=invited, walk_in=len(participants) - invited),
        coverage=_top_county(participants),
        constituencies=constituencies,
        wards=wards,
        staff=staff_performance(db, event_id=event.id),
    )
    info = EventAnalyticsEvent(
        event_id=event.id,
        event_name=event.event_name,
        location=event.location,
        date=event.date.isoformat() if event.date else None,
    )
    return EventAnalytics(event=info, stats=stats)


def staff_performance(db: Session, event_id: Optional[str] = None) -> List[StaffRow]:
    """Ledger rows per non-admin user plus the sorted event locations where they checked anyone in.

    With ``event_id`` set only that event counts and users with no check-ins there are omitted.
    """
    join_on = CheckInLog.checked_in_by_id == User.id
    if event_id:
        join_on = and_(join_on, CheckInLog.event_id == event_id)
    count = func.count(CheckInLog.id)
    rows = db.execute(
        select(User.id, User.name, User.email, count)
        .outerjoin(CheckInLog, join_on)
        .where(User.role == UserRole.USER)
        .group_by(User.id, User.name, User.email)
    ).all()

    loc = select(CheckInLog.checked_in_by_id, Event.location).join(Event, Event.id == CheckInLog.event_id)
    loc = loc.where(CheckInLog.checked_in_by_id.is_not(None), Event.location.is_not(None), Event.location != "")
    if event_id:
        loc = loc.where(CheckInLog.event_id == event_id)
    visited: Dict[str, set] = {}
    for user_id, location in db.execute(loc.distinct()).all():
        visited.setdefault(user_id, set()).add(location)

    staff = [
        StaffRow(id=uid, name=name, email=email, check_ins=n, counties_visited=sorted(visited.get(uid, ())))
        for uid, name, email, n in rows
        if n or not event_id
    ]
    staff.sort(key=lambda s: (-s.check_ins, s.name, s.email))
    return staff


def staff_stats(db: Session, event_id: Optional[str] = None) -> StaffStats:
    staff = staff_performance(db, event_id=event_id)
    return StaffStats(staff=staff, total_users=len(staff), total_check_ins=sum(s.check_ins for s in staff))


def _county_rows(participants) -> tuple[List[CountyRow], int, int]:
    table: "OrderedDict[str, dict]" = OrderedDict()
    for p in participants:
        name = (p.county or "").strip() or UNREGISTERED_COUNTY
        entry = table.setdefault(name, {"total": 0, "registered": 0, "centers": set()})
        entry["total"] += 1
        if p.is_registered_voter:
            entry["registered"] += 1
        center = (p.polling_center or "").strip()
        if center:
            entry["centers"].add((center, (p.ward or "").strip(), (p.constituency or "").strip(), name))
    rows = [
        CountyRow(
            name=name,
            total_participants=e["total"],
            registered=e["registered"],
            non_registered=e["total"] - e["registered"],
            active_centers=len(e["centers"]),
        )
        for name, e in table.items()
    ]
    rows.sort(key=lambda r: (-r.total_participants, r.name))
    active_centers = sum(r.active_centers for r in rows if r.name != UNREGISTERED_COUNTY)
    active_counties = sum(1 for r in rows if r.name != UNREGISTERED_COUNTY)
    return rows, active_centers, active_counties


def global_analytics(db: Session, today: dt.date) -> GlobalAnalytics:
    """Across all events. ``checked_in`` counts every participant row; ``ledger_checked_in`` only those with a ledger row."""
    participants = list(
        db.execute(select(Participant).order_by(Participant.created_at.asc(), Participant.id.asc())).scalars().all()
    )
    counties, active_centers, active_counties = _county_rows(participants)
    ledger_checked_in = db.scalar(select(func.count(distinct(CheckInLog.participant_id)))) or 0
    total_check_ins = db.scalar(select(func.count()).select_from(CheckInLog)) or 0
    stats = GlobalAnalyticsStats(
        checked_in=len(participants),
        ledger_checked_in=ledger_checked_in,
        total_check_ins=total_check_ins,
        age=age_distribution((p.date_of_birth for p in participants), today),
        gender=gender_distribution(p.sex for p in participants),
        voter_status=_voter_status(participants),
        # sem cadastro de seções eleitorais não há denominador para a taxa
        coverage=Coverage(active=active_centers, total=0, rate=0, active_counties=active_counties),
        counties=counties,
        staff=staff_performance(db),
    )
    return GlobalAnalytics(stats=stats)
