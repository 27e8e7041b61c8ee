import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_now
from app.core.access import can_access, can_delete_event, ensure_event_access
from app.core.clock import checkin_date_for
from app.core.errors import AccessDenied, NotFound
from app.core.rbac import require_admin, require_super_admin
from app.crud.event import event_crud
from app.models.user import User
from app.schemas.analytics import EventAnalytics, EventStatistics, GlobalAnalytics, StaffAnalytics
from app.schemas.check_in import EventCheckIns
from app.schemas.common import Message, Pagination
from app.schemas.event import (
    AssignUsersIn,
    AssignUsersOut,
    EventCreate,
    EventCreated,
    EventDetail,
    EventList,
    EventOut,
)
from app.services import analytics
from app.services.reports import ReportService, get_report_service, report_filename

router = APIRouter()


def _pdf(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ---- super_admin: visão global ----

@router.get("/analytics/global", response_model=GlobalAnalytics)
def global_analytics(
    db: Session = Depends(get_db),
    now: dt.datetime = Depends(get_now),
    _: User = Depends(require_super_admin),
):
    return analytics.global_analytics(db, checkin_date_for(now))


@router.get("/analytics/staff", response_model=StaffAnalytics)
def staff_analytics(
    event_id: Optional[str] = Query(None, alias="eventId"),
    db: Session = Depends(get_db),
    _: User = Depends(require_super_admin),
):
    return StaffAnalytics(stats=analytics.staff_stats(db, event_id=event_id))


@router.get("/reports/global/download")
def download_global_report(
    db: Session = Depends(get_db),
    now: dt.datetime = Depends(get_now),
    reports: ReportService = Depends(get_report_service),
    _: User = Depends(require_super_admin),
):
    data = analytics.global_analytics(db, checkin_date_for(now))
    return _pdf(reports.global_report(data), "global-report.pdf")


@router.get("/reports/staff/download")
def download_staff_report(
    db: Session = Depends(get_db),
    reports: ReportService = Depends(get_report_service),
    _: User = Depends(require_super_admin),
):
    return _pdf(reports.staff_report(analytics.staff_stats(db)), "staff-report.pdf")


# ---- eventos ----

@router.post("", response_model=EventCreated, status_code=status.HTTP_201_CREATED)
def create_event(body: EventCreate, db: Session = Depends(get_db), user: User = Depends(require_admin)):
    e = event_crud.create(db, body, extra={"created_by_id": user.id})
    return EventCreated(event=EventOut.model_validate(e))


@router.get("", response_model=EventList)
def list_events(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    rows, total = event_crud.list_for(db, user, page=page, limit=limit)
    return EventList(
        events=[EventOut.model_validate(e) for e in rows],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/{event_id}", response_model=EventDetail)
def get_event(event_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    e = event_crud.get_detail(db, event_id)
    if not e:
        raise NotFound("Event not found")
    if not can_access(e, user):
        raise AccessDenied("Access denied to this event")
    return EventDetail.model_validate(e)


@router.delete("/{event_id}", response_model=Message)
def delete_event(event_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    e = event_crud.get(db, event_id)
    if not e:
        raise NotFound("Event not found")
    if not can_delete_event(e, user):
        raise AccessDenied("Only the event creator or a super admin can delete this event")
    # participantes e check-ins caem junto (ON DELETE CASCADE)
    event_crud.remove(db, event_id)
    return Message(message="Event deleted successfully")


@router.post("/{event_id}/assign", response_model=AssignUsersOut)
def assign_users(
    event_id: str,
    body: AssignUsersIn,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    e = ensure_event_access(db, event_id, user)
    return AssignUsersOut(assigned_count=event_crud.assign_users(db, e, body.user_ids))


@router.get("/{event_id}/statistics", response_model=EventStatistics)
def event_statistics(event_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    ensure_event_access(db, event_id, user)
    return analytics.event_statistics(db, event_id)


@router.get("/{event_id}/checkins", response_model=EventCheckIns)
def event_check_ins(event_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    ensure_event_access(db, event_id, user)
    rows = analytics.event_check_ins(db, event_id)
    return EventCheckIns(count=len(rows), check_ins=rows)


@router.get("/{event_id}/analytics", response_model=EventAnalytics)
def event_analytics(
    event_id: str,
    db: Session = Depends(get_db),
    now: dt.datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    e = ensure_event_access(db, event_id, user)
    return analytics.event_analytics(db, e, checkin_date_for(now))


@router.get("/{event_id}/report")
def event_report(
    event_id: str,
    db: Session = Depends(get_db),
    now: dt.datetime = Depends(get_now),
    reports: ReportService = Depends(get_report_service),
    user: User = Depends(get_current_user),
):
    e = ensure_event_access(db, event_id, user)
    data = analytics.event_analytics(db, e, checkin_date_for(now))
    return _pdf(reports.event_report(data), report_filename(e.event_name))
