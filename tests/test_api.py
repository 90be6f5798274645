from __future__ import annotations

import csv
import io


def _create_catering(client, **overrides):
    body = {
        "name": "School Lunch",
        "start_date": "2025-09-01",
        "end_date": "2025-12-19",
        "meals": ["Lunch"],
        "active_weekdays": ["Mon", "Tue", "Wed", "Thu", "Fri"],
        "cutoff_time": "08:00",
    }
    body.update(overrides)
    return client.post("/api/caterings", json=body)


def test_catering_crud(client):
    res = _create_catering(client)
    assert res.status_code == 201
    created = res.get_json()
    assert created["active_weekdays"] == ["Mon", "Tue", "Wed", "Thu", "Fri"]
    assert created["cutoff_time"] == "08:00"

    res = client.put(f"/api/caterings/{created['catering_id']}", json={"meals": ["Breakfast", "Lunch"]})
    assert res.status_code == 200
    assert res.get_json()["meals"] == ["Breakfast", "Lunch"]

    listed = client.get("/api/caterings").get_json()
    assert [c["name"] for c in listed] == ["School Lunch"]


def test_validation_errors_are_reported_with_kind(client):
    res = _create_catering(client, active_weekdays=[])

    assert res.status_code == 422
    assert res.get_json() == {
        "kind": "NoWeekdaysSelected",
        "message": "Catering needs to specify at least one day of week",
    }


def test_not_found_and_conflict_statuses(client):
    assert client.get("/api/caterings/999").get_json()["kind"] == "NotFound"
    assert client.get("/api/caterings/999").status_code == 404

    catering = _create_catering(client).get_json()
    client.post("/api/students", json={"group_id": catering["root_group_id"], "first_name": "Ana", "last_name": "Novak"})

    res = client.post(f"/api/caterings/{catering['catering_id']}/archive")
    assert res.status_code == 409
    assert res.get_json()["kind"] == "HasEnrolledStudents"


def test_group_and_student_endpoints(client):
    catering = _create_catering(client).get_json()
    group = client.post("/api/groups", json={"parent_id": catering["root_group_id"], "name": "Class A"}).get_json()
    student = client.post(
        "/api/students", json={"group_id": group["group_id"], "first_name": "Ana", "last_name": "Novak"}
    ).get_json()

    detail = client.get(f"/api/groups/{group['group_id']}").get_json()
    assert [g["group_id"] for g in detail["breadcrumb"]] == [catering["root_group_id"], group["group_id"]]
    assert [s["student_id"] for s in detail["students"]] == [student["student_id"]]

    res = client.post(f"/api/groups/{catering['root_group_id']}/move", json={"parent_id": group["group_id"]})
    assert res.status_code == 422
    assert res.get_json()["kind"] == "InvalidGroupMove"

    assert client.delete(f"/api/students/{student['student_id']}").status_code == 200
    assert client.get(f"/api/groups/{group['group_id']}").get_json()["students"] == []


def test_cancellation_flow_and_month_view(client):
    catering = _create_catering(client).get_json()
    student = client.post(
        "/api/students", json={"group_id": catering["root_group_id"], "first_name": "Ana", "last_name": "Novak"}
    ).get_json()
    key = {"student_id": student["student_id"], "catering_id": catering["catering_id"]}

    assert client.put("/api/cancellations", json={**key, "day": "2025-10-01", "cancelled": True}).status_code == 200

    res = client.put("/api/cancellations", json={**key, "day": "2025-09-29", "cancelled": True})
    assert res.status_code == 409
    assert res.get_json()["kind"] == "PastCutoff"

    view = client.get(f"/api/attendance/{catering['catering_id']}/2025/10").get_json()
    days = {d["day"]: d for d in view["days"]}
    assert days["2025-10-01"]["meals"] == {"Lunch": 0}
    assert days["2025-10-02"]["meals"] == {"Lunch": 1}
    assert days["2025-10-04"]["active"] is False

    history = client.get("/api/cancellations/history", query_string={**key, "day": "2025-10-01"}).get_json()
    assert [e["cancelled"] for e in history] == [True]

    res = client.post("/api/cancellations/range", json={**key, "start": "2025-10-06", "end": "2025-10-07"})
    assert res.get_json() == {"changed": ["2025-10-06", "2025-10-07"]}


def test_monthly_summary_csv(client):
    catering = _create_catering(client).get_json()
    client.post("/api/students", json={"group_id": catering["root_group_id"], "first_name": "Ana", "last_name": "Novak"})

    res = client.get(f"/api/attendance/{catering['catering_id']}/2025/10/summary.csv")

    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    rows = list(csv.DictReader(io.StringIO(res.data.decode("utf-8-sig"))))
    assert rows == [
        {
            "student_id": "1",
            "first_name": "Ana",
            "last_name": "Novak",
            "group": "School Lunch",
            "attended_days": "23",
        }
    ]


def test_unknown_route_returns_json_404(client):
    res = client.get("/api/nope")
    assert res.status_code == 404
    assert res.get_json()["kind"] == "HttpError"


def test_string_instead_of_list_is_rejected(client):
    res = _create_catering(client, meals="Obiad")
    assert res.status_code == 422
    assert res.get_json()["kind"] == "MissingMeals"

    res = _create_catering(client, active_weekdays="Mon")
    assert res.status_code == 422
    assert res.get_json()["kind"] == "NoWeekdaysSelected"

    assert client.get("/api/caterings").get_json() == []


def test_delete_group_removes_subtree(client):
    catering = _create_catering(client).get_json()
    group = client.post("/api/groups", json={"parent_id": catering["root_group_id"], "name": "Class A"}).get_json()
    client.post("/api/groups", json={"parent_id": group["group_id"], "name": "Table 1"})
    client.post("/api/students", json={"group_id": group["group_id"], "first_name": "Ana", "last_name": "Novak"})

    res = client.delete(f"/api/groups/{group['group_id']}")
    assert res.status_code == 200
    assert res.get_json() == {"success": True, "removed_groups": 2, "removed_students": 1}
    assert client.get(f"/api/groups/{group['group_id']}").status_code == 404
    assert client.get(f"/api/groups/{catering['root_group_id']}").get_json()["children"] == []

    res = client.delete(f"/api/groups/{catering['root_group_id']}")
    assert res.status_code == 422
    assert res.get_json()["kind"] == "InvalidGroupMove"
