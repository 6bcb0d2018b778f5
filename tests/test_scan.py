from sqlalchemy.exc import OperationalError
from sqlmodel import create_engine, select

from app.core import audit
from app.core.audit import record_activity
from app.db.schema import AuditLog
from app.services.qr_code import QRCodeService


def test_scan_resolves_code_with_recent_history(client, technician_headers, make_qr, add_inspection, add_maintenance):
    qr = make_qr()
    ratings = {5: 1, 4: 2, 3: 3, 2: 4, 1: 5}
    for days_ago, rating in ratings.items():
        add_inspection(qr, rating=rating, days_ago=days_ago)
    add_maintenance(qr, days_ago=10)

    response = client.post(
        "/api/qr-codes/scan", json={"qr_code": qr.qr_code}, headers=technician_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "QR code scanned successfully"
    data = body["data"]
    assert data["qr_code"] == qr.qr_code
    assert data["fitting"]["name"] == "Elastic Rail Clip Mk-III"

    # At most three, newest first
    assert [i["condition_rating"] for i in data["recent_inspections"]] == [5, 4, 3]
    assert len(data["recent_maintenance"]) == 1


def test_scan_returns_three_newest_maintenance_records(client, technician_headers, make_qr, add_maintenance):
    qr = make_qr()
    for days_ago in (3, 5, 1, 4, 2):
        add_maintenance(qr, days_ago=days_ago, work_description=f"Work {days_ago}")

    response = client.post(
        "/api/qr-codes/scan", json={"qr_code": qr.qr_code}, headers=technician_headers)

    records = response.json()["data"]["recent_maintenance"]
    assert [m["work_description"] for m in records] == ["Work 1", "Work 2", "Work 3"]


def test_scan_trims_surrounding_whitespace(client, technician_headers, make_qr):
    qr = make_qr()

    response = client.post(
        "/api/qr-codes/scan", json={"qr_code": f"  {qr.qr_code}\n"}, headers=technician_headers)

    assert response.status_code == 200
    assert response.json()["data"]["id"] == str(qr.id)


def test_blank_code_is_rejected(client, technician_headers):
    for code in ("", "   "):
        response = client.post(
            "/api/qr-codes/scan", json={"qr_code": code}, headers=technician_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "QR code is required"


def test_unknown_code_is_not_found(client, technician_headers, session):
    response = client.post(
        "/api/qr-codes/scan", json={"qr_code": "IR0000000000000000"}, headers=technician_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "QR code not found"
    assert session.exec(select(AuditLog)).all() == []


def test_store_failure_is_not_reported_as_not_found(client, technician_headers, make_qr, monkeypatch):
    qr = make_qr()

    def broken_lookup(self, code):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(QRCodeService, "find_by_code", broken_lookup)

    response = client.post(
        "/api/qr-codes/scan", json={"qr_code": qr.qr_code}, headers=technician_headers)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "database is locked"}


def test_scan_is_recorded_in_activity_log(client, technician, technician_headers, make_qr, session):
    qr = make_qr()

    client.post(
        "/api/qr-codes/scan",
        json={"qr_code": qr.qr_code, "scan_method": "manual_entry",
              "device_info": {"model": "Field tablet"}},
        headers=technician_headers,
    )

    entries = session.exec(select(AuditLog)).all()
    assert len(entries) == 1
    entry = entries[0]
    assert entry.action == "QR_SCAN"
    assert entry.qr_code_id == qr.id
    assert entry.user_id == technician.id
    assert entry.details["scan_method"] == "manual_entry"
    assert entry.details["device_info"] == {"model": "Field tablet"}
    assert "scanned_at" in entry.details


def test_scan_method_defaults_to_api(client, technician_headers, make_qr, session):
    qr = make_qr()

    client.post("/api/qr-codes/scan", json={"qr_code": qr.qr_code}, headers=technician_headers)

    entry = session.exec(select(AuditLog)).one()
    assert entry.details["scan_method"] == "api"


def test_activity_log_failure_does_not_fail_the_scan(client, technician_headers, make_qr, session, monkeypatch):
    qr = make_qr()
    monkeypatch.setattr(
        audit, "engine", create_engine("sqlite:////nonexistent-dir/audit.db"))

    response = client.post(
        "/api/qr-codes/scan", json={"qr_code": qr.qr_code}, headers=technician_headers)

    assert response.status_code == 200
    assert session.exec(select(AuditLog)).all() == []


def test_record_activity_reports_failure_instead_of_raising(monkeypatch):
    monkeypatch.setattr(
        audit, "engine", create_engine("sqlite:////nonexistent-dir/audit.db"))

    assert record_activity("QR_SCAN", {"scan_method": "api"}) is False


def test_scan_requires_authentication(client, make_qr):
    qr = make_qr()

    response = client.post("/api/qr-codes/scan", json={"qr_code": qr.qr_code})

    assert response.status_code == 401
