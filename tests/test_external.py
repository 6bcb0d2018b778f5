from sqlmodel import select, func

from app.db.schema import AuditLog, QRCode, QRStatus, TrackFitting


IRCEPT_HEADERS = {"x-api-key": "ircept-test-key"}
IREPS_HEADERS = {"x-api-key": "ireps-test-key"}

CATALOG_ENTRY = {
    "part_number": "TF-001",
    "name": "GFN Liner",
    "manufacturer": "Avadh Rail Infra",
    "specifications": {"glass_fibre_pct": 30},
}


def test_missing_or_wrong_key_is_rejected(client):
    body = {"action": "get_track_status", "data": {}}

    assert client.post("/api/external/ircept", json=body).status_code == 401
    response = client.post(
        "/api/external/ircept", json=body, headers={"x-api-key": "nope"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid API key"}


def test_keys_are_not_interchangeable(client):
    body = {"action": "get_qr_status", "data": {"qr_code": "IR1"}}

    response = client.post("/api/external/ireps", json=body, headers=IRCEPT_HEADERS)

    assert response.status_code == 401


def test_key_is_checked_before_the_body_is_read(client):
    response = client.post("/api/external/ircept", content=b"{not json")

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid API key"}

    response = client.post(
        "/api/external/ireps", content=b"{not json", headers=IREPS_HEADERS)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON body"


def test_missing_action_or_data_is_a_client_error(client):
    response = client.post(
        "/api/external/ircept", json={"data": {}}, headers=IRCEPT_HEADERS)
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required field: action"

    response = client.post(
        "/api/external/ireps", json={"action": "sync_track_fittings"}, headers=IREPS_HEADERS)
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required field: data"


def test_unknown_action(client):
    response = client.post(
        "/api/external/ircept", json={"action": "reboot", "data": {}}, headers=IRCEPT_HEADERS)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid action"


def test_track_status_orders_by_km_and_includes_uninspected(client, make_qr, add_inspection):
    far = make_qr(km_post="130.250")
    near = make_qr(km_post="125.500")
    make_qr(km_post="140.000")
    make_qr(km_post="126.000", section="Other Section")
    add_inspection(far, rating=2, days_ago=10, defects_found=["pad worn"])
    add_inspection(far, rating=4, days_ago=1, defects_found=[])

    response = client.post(
        "/api/external/ircept",
        json={"action": "get_track_status",
              "data": {"zone": "Northern", "division": "Delhi", "section": "Delhi-Ambala",
                       "km_from": 120, "km_to": 135}},
        headers=IRCEPT_HEADERS,
    )

    assert response.status_code == 200
    items = response.json()["data"]
    assert [i["qr_code"] for i in items] == [near.qr_code, far.qr_code]

    assert items[0]["condition"] == {"rating": None, "last_inspection": None, "defects": []}
    assert items[1]["condition"]["rating"] == 4
    assert items[1]["fitting"]["part_number"] == "ERC-MK3-001"
    assert items[1]["location"]["km_post"] == "130.250"


def test_schedule_update_changes_status_and_logs_system_entry(client, make_qr, session):
    qr = make_qr()

    response = client.post(
        "/api/external/ircept",
        json={"action": "update_maintenance_schedule",
              "data": {"qr_code": qr.qr_code, "status": "maintenance",
                       "scheduled_for": "2026-11-02", "work_order": "WO-881"}},
        headers=IRCEPT_HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "maintenance"

    session.expire_all()
    assert session.get(QRCode, qr.id).status == QRStatus.MAINTENANCE

    entry = session.exec(select(AuditLog)).one()
    assert entry.action == "TMS_UPDATE"
    assert entry.user_id is None
    assert entry.qr_code_id == qr.id
    assert entry.details["source"] == "IRCEPT_TMS"
    assert entry.details["previous_status"] == "active"
    assert entry.details["schedule_data"]["work_order"] == "WO-881"


def test_schedule_update_trims_the_code(client, make_qr):
    qr = make_qr()

    response = client.post(
        "/api/external/ircept",
        json={"action": "update_maintenance_schedule",
              "data": {"qr_code": f"  {qr.qr_code} ", "status": "inactive"}},
        headers=IRCEPT_HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "inactive"


def test_schedule_update_for_unknown_code(client):
    response = client.post(
        "/api/external/ircept",
        json={"action": "update_maintenance_schedule",
              "data": {"qr_code": "IR404", "status": "inactive"}},
        headers=IRCEPT_HEADERS,
    )

    assert response.status_code == 404


def test_schedule_update_rejects_unknown_status(client, make_qr):
    qr = make_qr()

    response = client.post(
        "/api/external/ircept",
        json={"action": "update_maintenance_schedule",
              "data": {"qr_code": qr.qr_code, "status": "scrapped"}},
        headers=IRCEPT_HEADERS,
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid value for status")


def test_fitting_sync_is_an_upsert(client, session):
    body = {"action": "sync_track_fittings", "data": CATALOG_ENTRY}

    first = client.post("/api/external/ireps", json=body, headers=IREPS_HEADERS)
    second = client.post("/api/external/ireps", json=body, headers=IREPS_HEADERS)

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["data"]["id"] == second.json()["data"]["id"]
    assert session.exec(
        select(func.count(TrackFitting.id)).where(TrackFitting.part_number == "TF-001")
    ).one() == 1


def test_fitting_sync_updates_existing_fields(client, session):
    client.post("/api/external/ireps",
                json={"action": "sync_track_fittings", "data": CATALOG_ENTRY},
                headers=IREPS_HEADERS)

    changed = dict(CATALOG_ENTRY, manufacturer="Jindal Rail Infra")
    response = client.post("/api/external/ireps",
                           json={"action": "sync_track_fittings", "data": changed},
                           headers=IREPS_HEADERS)

    assert response.json()["data"]["manufacturer"] == "Jindal Rail Infra"


def test_fitting_sync_requires_part_number(client):
    data = {k: v for k, v in CATALOG_ENTRY.items() if k != "part_number"}

    response = client.post(
        "/api/external/ireps",
        json={"action": "sync_track_fittings", "data": data},
        headers=IREPS_HEADERS,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required field: part_number"


def test_qr_status_lookup(client, make_qr):
    qr = make_qr(track_number="DN")

    response = client.post(
        "/api/external/ireps",
        json={"action": "get_qr_status", "data": {"qr_code": qr.qr_code}},
        headers=IREPS_HEADERS,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "active"
    assert data["location"]["track_number"] == "DN"
    assert data["track_fitting"]["manufacturer"] == "Pandrol India"
    assert "last_updated" in data


def test_qr_status_lookup_for_unknown_code(client):
    response = client.post(
        "/api/external/ireps",
        json={"action": "get_qr_status", "data": {"qr_code": "IR404"}},
        headers=IREPS_HEADERS,
    )

    assert response.status_code == 404
