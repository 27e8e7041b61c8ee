import json

import httpx
import pytest

from app.core.errors import UpstreamError
from app.services.voter_lookup import VoterLookupClient, get_voter_lookup, parse_lookup_response

REGISTERED = {
    "message": {
        "registered_voters": {
            "id_or_passport_number": "12345678",
            "first_name": "Jane",
            "middle_name": None,
            "surname": "Wanjiru",
            "date_of_birth": "1990-04-02T00:00:00",
            "sex": "F",
            "county": "Nairobi",
            "constituency": "Westlands",
            "ward": "Parklands",
            "polling_center": "Parklands Primary",
        }
    }
}

ADULT = {
    "message": {
        "adult_population": {
            "id_number": "87654321",
            "full_name": "John Kamau",
            "date_of_birth": "2001-01-01",
            "sex": "M",
        }
    }
}


def _client(handler):
    return VoterLookupClient(url="https://registry.test/lookup", token="abc", transport=httpx.MockTransport(handler))


def test_registered_voter_is_mapped():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=REGISTERED)

    found = _client(handler).lookup("12345678", county="Nairobi")

    assert seen == {"auth": "token abc", "body": {"id_number": "12345678", "filters": {"county": "Nairobi"}}}
    assert found["name"] == "Jane Wanjiru"
    assert found["polling_center"] == "Parklands Primary"
    assert found["is_registered_voter"] is True


def test_adult_population_has_no_location():
    found = parse_lookup_response(ADULT)

    assert found["name"] == "John Kamau"
    assert found["county"] == ""
    assert found["is_registered_voter"] is False


def test_no_match_returns_none():
    assert _client(lambda r: httpx.Response(200, json={"message": {}})).lookup("1") is None


def test_upstream_failure_raises():
    with pytest.raises(UpstreamError):
        _client(lambda r: httpx.Response(500, text="boom")).lookup("1")


def test_unconfigured_service_raises():
    with pytest.raises(UpstreamError):
        VoterLookupClient(url="").lookup("1")


@pytest.fixture()
def registry(client):
    def _use(handler):
        client.app.dependency_overrides[get_voter_lookup] = lambda: _client(handler)
    return _use


def test_lookup_endpoint_registers_participant(client, auth, staff, event, registry):
    registry(lambda r: httpx.Response(200, json=REGISTERED))

    r = client.post("/api/participants/lookup", json={"eventId": event.id, "idNumber": "12345678", "isInvited": True},
                    headers=auth(staff))

    assert r.status_code == 201
    p = r.json()["participant"]
    assert p["eventId"] == event.id
    assert p["dateOfBirth"] == "1990-04-02"
    assert p["isInvited"] is True
    assert p["isRegisteredVoter"] is True

    again = client.post("/api/participants/lookup", json={"eventId": event.id, "idNumber": "12345678"},
                        headers=auth(staff))
    assert again.status_code == 200
    assert again.json()["participant"]["id"] == p["id"]


def test_lookup_endpoint_not_found_and_upstream_error(client, auth, staff, event, registry):
    registry(lambda r: httpx.Response(200, json={"message": {}}))
    r = client.post("/api/participants/lookup", json={"eventId": event.id, "idNumber": "1"}, headers=auth(staff))
    assert r.status_code == 404
    assert r.json()["message"] == "Voter not found"

    registry(lambda r: httpx.Response(503))
    r = client.post("/api/participants/lookup", json={"eventId": event.id, "idNumber": "1"}, headers=auth(staff))
    assert r.status_code == 502
    assert r.json()["code"] == "UPSTREAM_ERROR"


def test_lookup_without_invite_flag_keeps_stored_invite(client, auth, staff, event, make_participant, registry, db):
    make_participant(event, "12345678", is_invited=True)
    registry(lambda r: httpx.Response(200, json=REGISTERED))

    r = client.post("/api/participants/lookup", json={"eventId": event.id, "idNumber": "12345678"},
                    headers=auth(staff))

    assert r.status_code == 200
    assert r.json()["participant"]["isInvited"] is True
    assert r.json()["participant"]["isRegisteredVoter"] is True
