from app.crud.check_in import check_in_crud
from app.models.user import UserRole
from app.services import analytics
from app.services.reports import ReportService, report_filename


def test_report_filename():
    assert report_filename("Town Hall 2024") == "town_hall_2024-report.pdf"
    assert report_filename("", "staff") == "event-staff.pdf"


def test_event_report_html_lists_breakdowns(db, event, make_participant, staff, clock):
    make_participant(event, "1", county="Nairobi", constituency="Westlands", ward="Parklands", sex="F")
    check_in_crud.check_in(db, event_id=event.id, id_number="1", actor_id=staff.id, now=clock.now)
    data = analytics.event_analytics(db, event, clock.now.date())

    html = ReportService(title="Attendance").render_html("event.html", {"event": data.event, "stats": data.stats})

    assert "<h1>Attendance</h1>" in html
    assert event.event_name in html
    assert "Westlands" in html
    assert staff.email in html


def test_event_report_endpoint_returns_pdf(client, auth, staff, event, make_participant, db, clock):
    make_participant(event, "1", county="Nairobi")
    check_in_crud.check_in(db, event_id=event.id, id_number="1", actor_id=staff.id, now=clock.now)

    r = client.get(f"/api/events/{event.id}/report", headers=auth(staff))

    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert 'filename="town_hall-report.pdf"' in r.headers["content-disposition"]
    assert r.content.startswith(b"%PDF")


def test_super_admin_report_downloads(client, auth, make_user, event):
    root = make_user(UserRole.SUPER_ADMIN)

    for path in ("/api/events/reports/global/download", "/api/events/reports/staff/download"):
        r = client.get(path, headers=auth(root))
        assert r.status_code == 200, path
        assert r.content.startswith(b"%PDF")

    plain = make_user(UserRole.USER)
    assert client.get("/api/events/reports/staff/download", headers=auth(plain)).status_code == 403
