import pytest
from sqlalchemy import func, select

from app.core.errors import ValidationError
from app.crud.participant import participant_crud
from app.models.check_in_log import CheckInLog
from app.models.participant import Participant
from app.models.user import UserRole


def _add(client, auth, user, **body):
    return client.post("/api/participants/add", json=body, headers=auth(user))


def test_add_creates_then_updates_same_row(client, auth, staff, event, db):
    r = _add(client, auth, staff, eventId=event.id, idNumber=" 123 ", name="Jane", county="Nairobi")
    assert r.status_code == 201
    assert r.json()["created"] is True
    pid = r.json()["participant"]["id"]

    r = _add(client, auth, staff, eventId=event.id, idNumber="123", phoneNumber="0700", county=None)
    assert r.status_code == 200
    body = r.json()
    assert body["created"] is False
    assert body["participant"]["id"] == pid
    assert body["participant"]["phoneNumber"] == "0700"
    # campos omitidos ou nulos não apagam o que já existe
    assert body["participant"]["county"] == "Nairobi"
    assert body["participant"]["name"] == "Jane"
    assert db.scalar(select(func.count()).select_from(Participant)) == 1


def test_add_does_not_touch_ledger(client, auth, staff, event, db):
    _add(client, auth, staff, eventId=event.id, idNumber="1")
    _add(client, auth, staff, eventId=event.id, idNumber="1", name="Again")

    assert db.scalar(select(func.count()).select_from(CheckInLog)) == 0


def test_add_keeps_client_supplied_id(client, auth, staff, event):
    r = _add(client, auth, staff, eventId=event.id, idNumber="9", id="legacy-9")
    assert r.json()["participant"]["id"] == "legacy-9"


def test_search_returns_oldest_first_with_history(client, auth, staff, event, make_participant):
    make_participant(event, "42", name="First")

    r = client.post("/api/participants/search", json={"eventId": event.id, "idNumber": "42"}, headers=auth(staff))

    assert r.status_code == 200
    assert r.json()["participant"]["name"] == "First"
    assert r.json()["participant"]["checkInLogs"] == []
    assert len(r.json()["allMatches"]) == 1


def test_search_not_found_and_missing_fields(client, auth, staff, event):
    r = client.post("/api/participants/search", json={"eventId": event.id, "idNumber": "0"}, headers=auth(staff))
    assert r.status_code == 404
    assert r.json()["message"] == "Participant not found"

    r = client.post("/api/participants/search", json={"eventId": event.id}, headers=auth(staff))
    assert r.status_code == 400


def test_edit_participant(client, auth, staff, event, make_participant):
    p = make_participant(event, "1", name="Old")

    r = client.patch(f"/api/participants/{p.id}", json={"name": "New", "isInvited": True}, headers=auth(staff))

    assert r.status_code == 200
    assert r.json()["name"] == "New"
    assert r.json()["isInvited"] is True
    assert r.json()["idNumber"] == "1"
    assert client.patch("/api/participants/nope", json={"name": "x"}, headers=auth(staff)).status_code == 404


@pytest.fixture()
def roster(event, make_participant):
    make_participant(event, "1", name="Ann Kamau", county="Nairobi", phone_number="0711")
    make_participant(event, "2", name="Ben Otieno", county="Kisumu")
    make_participant(event, "2", name="Ben Otieno", county="Kisumu", phone_number="0722")
    make_participant(event, None, name="No Id", county="Nairobi", phone_number="")
    make_participant(event, "", name="Blank Id", county="Nairobi", phone_number="0733")
    return event


def test_list_stats(client, auth, staff, roster):
    body = client.get(f"/api/participants/event/{roster.id}", headers=auth(staff)).json()

    assert body["stats"] == {"totalParticipants": 5, "missingIds": 2, "missingPhones": 2, "duplicates": 2}
    assert body["pagination"]["total"] == 5
    assert len(body["participants"]) == 5


@pytest.mark.parametrize("query,expected", [
    ("noId=true", {"No Id", "Blank Id"}),
    ("noPhone=true", {"Ben Otieno", "No Id"}),
    ("duplicates=true", {"Ben Otieno"}),
    ("county=Kisumu", {"Ben Otieno"}),
    ("search=kamau", {"Ann Kamau"}),
    ("search=2", {"Ben Otieno"}),
])
def test_list_filters(client, auth, staff, roster, query, expected):
    body = client.get(f"/api/participants/event/{roster.id}?{query}", headers=auth(staff)).json()
    assert {p["name"] for p in body["participants"]} == expected


def test_list_pagination(client, auth, staff, roster):
    body = client.get(f"/api/participants/event/{roster.id}?page=2&limit=2", headers=auth(staff)).json()

    assert len(body["participants"]) == 2
    assert body["pagination"] == {
        "page": 2, "limit": 2, "total": 5, "totalPages": 3, "hasNextPage": True, "hasPreviousPage": True,
    }


@pytest.mark.parametrize("day", ["05-11-2024", "2024-13-01", "2024-02-30", "20241105", "today"])
def test_by_date_rejects_malformed_dates(client, auth, staff, event, day):
    r = client.get(f"/api/participants/event/{event.id}/date/{day}", headers=auth(staff))

    assert r.status_code == 400
    assert r.json()["message"] == "Invalid date format. Use YYYY-MM-DD"


def test_by_date_empty_day(client, auth, staff, event):
    body = client.get(f"/api/participants/event/{event.id}/date/2024-01-01", headers=auth(staff)).json()
    assert body == {"message": "Participants retrieved successfully", "date": "2024-01-01", "count": 0,
                    "participants": []}


def test_unscoped_participant_is_editable_only_by_super_admin(client, auth, admin, make_user, db):
    legacy = Participant(id_number="L-1", name="Legacy")
    db.add(legacy); db.commit()
    orphan = make_user(UserRole.USER)

    for user in (orphan, admin):
        r = client.patch(f"/api/participants/{legacy.id}", json={"name": "Changed"}, headers=auth(user))
        assert r.status_code == 403

    root = make_user(UserRole.SUPER_ADMIN)
    r = client.patch(f"/api/participants/{legacy.id}", json={"name": "Changed"}, headers=auth(root))
    assert r.status_code == 200
    assert r.json()["name"] == "Changed"


@pytest.mark.parametrize("id_number", ["", "   ", "\t"])
def test_add_rejects_blank_id_number(client, auth, staff, event, db, id_number):
    r = _add(client, auth, staff, eventId=event.id, idNumber=id_number, name="Nobody")

    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"
    assert db.scalar(select(func.count()).select_from(Participant)) == 0


def test_upsert_rejects_blank_id_number_from_dict(db, event):
    with pytest.raises(ValidationError):
        participant_crud.upsert(db, {"event_id": event.id, "id_number": "  "})
