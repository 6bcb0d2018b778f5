import uuid

import pytest

from app.db.schema import InspectionStatus


def inspection_payload(qr, **overrides):
    payload = {
        "qr_code_id": str(qr.id),
        "inspection_type": "routine",
        "condition_rating": 4,
        "observations": "Clip seated, minor rust on toe",
        "defects_found": ["surface rust"],
        "recommendations": "Re-inspect next quarter",
    }
    payload.update(overrides)
    return payload


def test_technician_records_an_inspection(client, technician, technician_headers, make_qr):
    qr = make_qr()

    response = client.post(
        "/api/inspections", json=inspection_payload(qr), headers=technician_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["condition_rating"] == 4
    assert data["status"] == "completed"
    assert data["inspector_id"] == str(technician.id)
    assert data["inspector"]["name"] == "Tarun Technician"
    assert data["qr_code"]["qr_code"] == qr.qr_code


def test_viewer_may_record_an_inspection(client, viewer_headers, make_qr):
    qr = make_qr()

    response = client.post(
        "/api/inspections", json=inspection_payload(qr), headers=viewer_headers)

    assert response.status_code == 201


@pytest.mark.parametrize("rating", [0, 6])
def test_out_of_range_rating_is_rejected(client, technician_headers, make_qr, rating):
    qr = make_qr()

    response = client.post(
        "/api/inspections",
        json=inspection_payload(qr, condition_rating=rating),
        headers=technician_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid value for condition_rating")


def test_comma_separated_defects_are_split(client, technician_headers, make_qr):
    qr = make_qr()

    response = client.post(
        "/api/inspections",
        json=inspection_payload(qr, defects_found="gauge wide, , clip missing "),
        headers=technician_headers,
    )

    assert response.status_code == 201
    assert response.json()["data"]["defects_found"] == ["gauge wide", "clip missing"]


def test_unknown_record_is_not_found(client, technician_headers, make_qr):
    qr = make_qr()
    payload = inspection_payload(qr, qr_code_id=str(uuid.uuid4()))

    response = client.post("/api/inspections", json=payload, headers=technician_headers)

    assert response.status_code == 404


def test_list_filters_by_record_and_status(client, technician_headers, make_qr, add_inspection):
    first, second = make_qr(), make_qr()
    add_inspection(first, rating=5)
    add_inspection(first, rating=2, status=InspectionStatus.PENDING)
    add_inspection(second, rating=3)

    response = client.get(
        "/api/inspections", params={"qr_code_id": str(first.id)}, headers=technician_headers)

    assert response.status_code == 200
    assert response.json()["count"] == 2

    response = client.get(
        "/api/inspections", params={"status": "pending"}, headers=technician_headers)
    assert [i["condition_rating"] for i in response.json()["data"]] == [2]


def test_list_is_newest_first(client, technician_headers, make_qr, add_inspection):
    qr = make_qr()
    add_inspection(qr, rating=1, days_ago=9)
    add_inspection(qr, rating=5, days_ago=1)

    response = client.get("/api/inspections", headers=technician_headers)

    assert [i["condition_rating"] for i in response.json()["data"]] == [5, 1]
