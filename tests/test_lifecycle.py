from sqlalchemy import func, select

from app.crud.check_in import check_in_crud
from app.models.check_in_log import CheckInLog
from app.models.participant import Participant
from app.models.user import User, UserRole


def _count(db, model, *where):
    stmt = select(func.count()).select_from(model)
    if where:
        stmt = stmt.where(*where)
    return db.scalar(stmt)


def test_deleting_event_removes_participants_and_ledger(client, auth, admin, staff, make_event, make_participant,
                                                        clock, db):
    event = make_event(admin)
    other = make_event(admin, name="Other")
    make_participant(event, "1")
    make_participant(other, "1")
    check_in_crud.check_in(db, event_id=event.id, id_number="1", actor_id=staff.id, now=clock.now)
    check_in_crud.check_in(db, event_id=other.id, id_number="1", actor_id=staff.id, now=clock.now)

    r = client.delete(f"/api/events/{event.id}", headers=auth(admin))

    assert r.status_code == 200
    assert _count(db, Participant, Participant.event_id == event.id) == 0
    assert _count(db, CheckInLog, CheckInLog.event_id == event.id) == 0
    assert _count(db, CheckInLog) == 1


def test_deleting_actor_keeps_ledger_rows(client, auth, admin, staff, event, make_participant, clock, db):
    make_participant(event, "1")
    staff_id, staff_email = staff.id, staff.email
    check_in_crud.check_in(db, event_id=event.id, id_number="1", actor_id=staff_id, now=clock.now)

    r = client.delete(f"/api/auth/users/{staff_email}", headers=auth(admin))

    assert r.status_code == 200
    db.expire_all()
    log = db.execute(select(CheckInLog)).scalar_one()
    assert log.checked_in_by_id is None
    assert _count(db, User, User.id == staff_id) == 0


def test_user_who_owns_events_cannot_be_deleted(client, auth, make_user, event, admin):
    root = make_user(UserRole.SUPER_ADMIN)

    r = client.delete(f"/api/auth/users/{admin.email}", headers=auth(root))

    assert r.status_code == 400
    assert r.json()["message"] == "User has created events and cannot be deleted"


def test_admin_cannot_delete_foreign_users_or_itself(client, auth, admin, make_user):
    foreign = make_user(UserRole.USER, admin=make_user(UserRole.ADMIN))

    assert client.delete(f"/api/auth/users/{foreign.email}", headers=auth(admin)).status_code == 403
    assert client.delete(f"/api/auth/users/{admin.email}", headers=auth(admin)).status_code == 400
    assert client.delete("/api/auth/users/ghost@events.org", headers=auth(admin)).status_code == 404
