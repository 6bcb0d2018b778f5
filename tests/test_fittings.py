def test_list_and_search(client, viewer_headers, fitting):
    response = client.get("/api/fittings", params={"search": "clip"}, headers=viewer_headers)

    assert response.status_code == 200
    assert [f["part_number"] for f in response.json()["data"]] == ["ERC-MK3-001"]

    response = client.get("/api/fittings", params={"category": "Liner"}, headers=viewer_headers)
    assert response.json()["count"] == 0


def test_manual_entry_creates_then_updates(client, supervisor_headers):
    body = {"part_number": "RP-GRSP-004", "name": "Grooved Rubber Sole Plate"}

    created = client.post("/api/fittings", json=body, headers=supervisor_headers)
    updated = client.post(
        "/api/fittings", json=dict(body, material="EVA"), headers=supervisor_headers)

    assert created.status_code == 201
    assert updated.status_code == 200
    assert updated.json()["data"]["id"] == created.json()["data"]["id"]
    assert updated.json()["data"]["material"] == "EVA"


def test_manual_entry_is_restricted(client, technician_headers):
    response = client.post(
        "/api/fittings", json={"part_number": "X-1", "name": "Bolt"}, headers=technician_headers)

    assert response.status_code == 403


def test_get_fitting(client, viewer_headers, fitting):
    response = client.get(f"/api/fittings/{fitting.id}", headers=viewer_headers)

    assert response.status_code == 200
    assert response.json()["data"]["specifications"] == {"toe_load_kn": 11}
