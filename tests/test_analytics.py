from datetime import date, timedelta

import pytest

from app.core.audit import record_activity
from app.db.schema import QRStatus, InspectionStatus, MaintenanceType
from app.services.analytics import percentage, health_score, inspection_coverage


@pytest.mark.parametrize("part, total, expected", [
    (0, 0, 0),
    (5, 0, 0),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),
    (3, 4, 75),
    (7, 4, 100),
])
def test_percentage_rounds_half_up_and_clamps(part, total, expected):
    assert percentage(part, total) == expected


def test_health_score_and_coverage():
    assert health_score(active=3, total=4) == 75
    assert inspection_coverage(total_inspections=12, total_qr_codes=4) == 100
    assert inspection_coverage(total_inspections=0, total_qr_codes=0) == 0


def test_empty_registry_reports_zeros(client, admin_headers):
    response = client.get("/api/analytics", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    summary = data["summary"]
    assert summary["total_qr_codes"] == 0
    assert summary["health_score"] == 0
    assert summary["inspection_rate"] == 0
    assert data["distributions"]["zones"] == []
    assert data["distributions"]["condition_ratings"] == [
        {"rating": r, "count": 0} for r in range(1, 6)]
    assert data["recent_activity"] == []


def test_populated_registry(client, admin_headers, make_qr, add_inspection, add_maintenance):
    north_a = make_qr(zone="Northern")
    north_b = make_qr(zone="Northern")
    make_qr(zone="Western")
    make_qr(zone="Western", status=QRStatus.MAINTENANCE)
    add_inspection(north_a, rating=5)
    add_inspection(north_b, rating=2, status=InspectionStatus.PENDING)
    add_maintenance(north_a, maintenance_type=MaintenanceType.EMERGENCY)
    add_maintenance(north_b)

    response = client.get("/api/analytics", headers=admin_headers)

    data = response.json()["data"]
    summary = data["summary"]
    assert summary["total_qr_codes"] == 4
    assert summary["active_qr_codes"] == 3
    assert summary["maintenance_qr_codes"] == 1
    assert summary["inactive_qr_codes"] == 0
    assert summary["health_score"] == 75
    assert summary["total_inspections"] == 2
    assert summary["pending_inspections"] == 1
    assert summary["inspection_rate"] == 50
    assert summary["total_maintenance"] == 2
    assert summary["emergency_maintenance"] == 1

    zones = {z["zone"]: z["count"] for z in data["distributions"]["zones"]}
    assert zones == {"Northern": 2, "Western": 2}
    ratings = {r["rating"]: r["count"] for r in data["distributions"]["condition_ratings"]}
    assert ratings == {1: 0, 2: 1, 3: 0, 4: 0, 5: 1}


def test_zone_filter_scopes_every_aggregate(client, admin_headers, make_qr, add_inspection):
    north = make_qr(zone="Northern")
    west = make_qr(zone="Western")
    add_inspection(north, rating=4)
    add_inspection(west, rating=1)

    response = client.get(
        "/api/analytics", params={"zone": "Western"}, headers=admin_headers)

    data = response.json()["data"]
    assert data["summary"]["total_qr_codes"] == 1
    assert data["summary"]["total_inspections"] == 1
    assert data["distributions"]["zones"] == [{"zone": "Western", "count": 1}]
    ratings = {r["rating"]: r["count"] for r in data["distributions"]["condition_ratings"]}
    assert ratings[1] == 1 and ratings[4] == 0


def test_date_range_filters_history(client, admin_headers, make_qr, add_inspection):
    qr = make_qr()
    add_inspection(qr, rating=3, days_ago=30)
    add_inspection(qr, rating=4, days_ago=1)

    since = (date.today() - timedelta(days=7)).isoformat()
    response = client.get(
        "/api/analytics", params={"date_from": since}, headers=admin_headers)

    assert response.json()["data"]["summary"]["total_inspections"] == 1


def test_recent_activity_lists_log_entries(client, admin, admin_headers, make_qr):
    qr = make_qr()
    record_activity("QR_SCAN", {"scan_method": "camera"}, qr_code_id=qr.id, user_id=admin.id)

    response = client.get("/api/analytics", headers=admin_headers)

    activity = response.json()["data"]["recent_activity"]
    assert len(activity) == 1
    assert activity[0]["action"] == "QR_SCAN"
    assert activity[0]["qr_code"] == qr.qr_code
    assert activity[0]["fitting_name"] == "Elastic Rail Clip Mk-III"
    assert activity[0]["user_name"] == "Anita Admin"


def test_analytics_needs_supervisor_or_admin(client, technician_headers, supervisor_headers):
    assert client.get("/api/analytics", headers=technician_headers).status_code == 403
    assert client.get("/api/analytics", headers=supervisor_headers).status_code == 200


def test_dashboard(client, viewer_headers, make_qr, add_inspection):
    qr = make_qr()
    make_qr(status=QRStatus.INACTIVE)
    add_inspection(qr, status=InspectionStatus.PENDING)

    response = client.get("/api/dashboard", headers=viewer_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_qr_codes"] == 2
    assert data["active_qr_codes"] == 1
    assert data["pending_inspections"] == 1
    assert len(data["recent_qr_codes"]) == 2
