"""
Integration tests for the HTTP API.

2024-01-01 is a Monday.
"""
from datetime import date


def _create(client, **body) -> dict:
    body.setdefault("name", "Read")
    body.setdefault("created_date", "2024-01-01")
    r = client.post("/activities", json=body)
    assert r.status_code == 201, r.text
    return r.json()


def _log(client, activity_id: int, day: str, **body) -> dict:
    r = client.put(f"/activities/{activity_id}/logs/{day}", json=body)
    assert r.status_code == 200, r.text
    return r.json()


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestActivities:
    def test_create_and_read(self, client):
        created = _create(client, schedule={"type": "weekly", "weekdays": [1, 3]})
        assert created["kind"] == "checkbox"
        assert created["schedule"]["type"] == "weekly"
        assert sorted(created["schedule"]["weekdays"]) == [1, 3]

        r = client.get(f"/activities/{created['id']}")
        assert r.status_code == 200
        assert r.json()["created_date"] == "2024-01-01"

    def test_list(self, client):
        _create(client, name="A")
        _create(client, name="B")
        r = client.get("/activities")
        assert [a["name"] for a in r.json()] == ["A", "B"]

    def test_future_only_patch_records_history(self, client):
        a = _create(client)
        r = client.patch(f"/activities/{a['id']}", json={
            "schedule": {"type": "interval", "every_n_days": 2, "anchor_date": "2024-02-01"},
            "future_only": True,
            "effective_date": "2024-02-01",
        })
        assert r.status_code == 200
        assert r.json()["schedule"]["type"] == "interval"

        snaps = client.get(f"/activities/{a['id']}/snapshots").json()
        assert len(snaps) == 1
        assert snaps[0]["effective_until"] == "2024-01-31"
        assert snaps[0]["schedule"]["type"] == "daily"

        past = client.get(f"/activities/{a['id']}/config?day=2024-01-15").json()
        assert past["schedule"]["type"] == "daily"
        assert past["snapshot_id"] == snaps[0]["id"]

    def test_patch_kind_to_container_is_refused(self, client):
        a = _create(client)
        r = client.patch(f"/activities/{a['id']}", json={"kind": "container"})
        assert r.status_code == 409
        assert r.json()["code"] == "STRUCTURAL_CHANGE_REQUIRED"

    def test_convert_and_dissolve(self, client):
        a = _create(client, kind="value", target_value=10, unit="pages")
        child = _create(client, name="Stretch")

        r = client.post(f"/activities/{a['id']}/convert-to-container",
                        json={"day": "2024-02-01", "child_ids": [child["id"]]})
        assert r.status_code == 200
        assert r.json()["kind"] == "container"
        assert r.json()["target_value"] is None
        assert client.get(f"/activities/{child['id']}").json()["parent_id"] == a["id"]

        r = client.post(f"/activities/{a['id']}/convert-to-container", json={})
        assert r.status_code == 409
        assert r.json()["code"] == "ALREADY_CONTAINER"

        r = client.post(f"/activities/{a['id']}/dissolve",
                        json={"day": "2024-03-01", "new_kind": "checkbox"})
        assert r.status_code == 200
        assert r.json()["kind"] == "checkbox"
        assert client.get(f"/activities/{child['id']}").json()["parent_id"] is None

        snaps = client.get(f"/activities/{a['id']}/snapshots").json()
        assert [(s["effective_from"], s["effective_until"]) for s in snaps] == [
            ("2024-01-01", "2024-01-31"),
            ("2024-02-01", "2024-02-29"),
        ]

    def test_invalid_parent(self, client):
        a = _create(client)
        b = _create(client, name="Other")
        r = client.put(f"/activities/{a['id']}/parent", json={"parent_id": b["id"]})
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_PARENT"

    def test_stop_resume(self, client):
        a = _create(client)
        r = client.post(f"/activities/{a['id']}/stop", json={"day": "2024-01-10"})
        assert r.json()["stopped_at"] == "2024-01-10"
        r = client.post(f"/activities/{a['id']}/resume")
        assert r.json()["stopped_at"] is None

    def test_delete(self, client):
        a = _create(client)
        assert client.delete(f"/activities/{a['id']}").status_code == 204
        assert client.get(f"/activities/{a['id']}").status_code == 404


class TestLogs:
    def test_put_list_delete(self, client):
        a = _create(client, kind="value", target_value=20, unit="pages")
        logged = _log(client, a["id"], "2024-01-02", value=25)
        assert logged["status"] == "completed"
        assert logged["value"] == 25

        _log(client, a["id"], "2024-01-03", status="skipped", skip_reason="travel")
        logs = client.get(f"/activities/{a['id']}/logs?start=2024-01-01&end=2024-01-31").json()
        assert [(x["day"], x["status"]) for x in logs] == [
            ("2024-01-02", "completed"),
            ("2024-01-03", "skipped"),
        ]

        assert client.delete(f"/activities/{a['id']}/logs/2024-01-03").status_code == 204
        r = client.delete(f"/activities/{a['id']}/logs/2024-01-03")
        assert r.status_code == 404
        assert r.json()["code"] == "LOG_NOT_FOUND"

    def test_log_outside_lifetime(self, client):
        a = _create(client)
        r = client.put(f"/activities/{a['id']}/logs/2023-12-31", json={})
        assert r.status_code == 422
        assert r.json()["code"] == "LOG_OUTSIDE_LIFETIME"

    def test_log_on_container(self, client):
        c = _create(client, name="Routine", kind="container")
        r = client.put(f"/activities/{c['id']}/logs/2024-01-02", json={})
        assert r.status_code == 422
        assert r.json()["code"] == "CONTAINER_LOG"


class TestVacationDays:
    def test_add_list_remove(self, client):
        r = client.post("/vacation-days", json={"day": "2024-07-01"})
        assert r.status_code == 201
        assert [v["day"] for v in client.get("/vacation-days").json()] == ["2024-07-01"]
        assert client.delete("/vacation-days/2024-07-01").status_code == 204
        assert client.get("/vacation-days").json() == []


class TestMetrics:
    def test_activity_rate_and_streaks(self, client):
        a = _create(client)
        for d in range(1, 8):
            _log(client, a["id"], f"2024-01-{d:02d}")
        r = client.get(
            f"/metrics/activities/{a['id']}?window_days=10&reference_date=2024-01-10"
        )
        assert r.status_code == 200
        body = r.json()
        assert body["completion_rate"] == 0.7
        assert body["due_days"] == 10
        assert body["current_streak"] == 0
        assert body["longest_streak"] == 7
        assert len(body["days"]) == 10
        assert body["days"][0]["day"] == "2024-01-01"

    def test_vacation_excludes_days(self, client):
        a = _create(client)
        _log(client, a["id"], "2024-01-01")
        client.post("/vacation-days", json={"day": "2024-01-02"})
        body = client.get(
            f"/metrics/activities/{a['id']}?window_days=2&reference_date=2024-01-02"
        ).json()
        assert body["completion_rate"] == 1.0
        assert body["days"][1]["exempt_reason"] == "vacation"

    def test_sticky_has_no_rate(self, client):
        a = _create(client, schedule={"type": "sticky"})
        body = client.get(
            f"/metrics/activities/{a['id']}?reference_date=2024-01-10"
        ).json()
        assert body["rate_applicable"] is False
        assert body["completion_rate"] is None
        assert body["days"] == []

    def test_goal_score(self, client):
        run = _create(client, name="Run")
        stretch = _create(client, name="Stretch")
        weight = _create(client, name="Weight", kind="metric", unit="kg")
        for d in range(1, 5):
            _log(client, run["id"], f"2024-01-{d:02d}")
        _log(client, weight["id"], "2024-01-01", value=80)
        _log(client, weight["id"], "2024-01-04", value=75)

        goal = client.post("/goals", json={"title": "Fit"}).json()
        for activity_id in (run["id"], stretch["id"]):
            r = client.post(f"/goals/{goal['id']}/links", json={"activity_id": activity_id})
            assert r.status_code == 201
        r = client.post(f"/goals/{goal['id']}/links", json={
            "activity_id": weight["id"],
            "role": "metric",
            "metric_baseline": 80,
            "metric_target": 70,
            "metric_direction": "decrease",
        })
        assert r.status_code == 201

        body = client.get(
            f"/metrics/goals/{goal['id']}?window_days=4&reference_date=2024-01-04"
        ).json()
        assert body["consistency_score"] == 0.5
        assert body["is_paused"] is False
        assert [h["completion_rate"] for h in body["habits"]] == [1.0, 0.0]
        (metric,) = body["metrics"]
        assert metric["progress"] == 0.5
        assert metric["trend"]["is_improving"] is True

    def test_day_agenda(self, client):
        routine = _create(client, name="Routine", kind="container")
        _create(client, name="Stretch", parent_id=routine["id"],
                schedule={"type": "weekly", "weekdays": [1]})
        _create(client, name="Journal", schedule={"type": "weekly", "weekdays": [2]})

        body = client.get("/metrics/day?day=2024-01-01").json()
        assert body["is_vacation"] is False
        assert [item["name"] for item in body["items"]] == ["Routine"]
        assert len(body["items"][0]["children"]) == 1

        tuesday = client.get("/metrics/day?day=2024-01-02").json()
        assert [item["name"] for item in tuesday["items"]] == ["Journal"]


class TestGoals:
    def test_crud(self, client):
        r = client.post("/goals", json={"title": "Learn", "deadline": "2024-12-31"})
        assert r.status_code == 201
        goal = r.json()
        assert goal["links"] == []

        r = client.patch(f"/goals/{goal['id']}", json={"is_manually_paused": True})
        assert r.json()["is_manually_paused"] is True

        a = _create(client)
        link = client.post(f"/goals/{goal['id']}/links", json={"activity_id": a["id"]}).json()
        r = client.patch(f"/goals/{goal['id']}/links/{link['id']}", json={"weight": 2.5})
        assert r.json()["weight"] == 2.5
        assert len(client.get(f"/goals/{goal['id']}").json()["links"]) == 1

        assert client.delete(f"/goals/{goal['id']}/links/{link['id']}").status_code == 204
        assert client.delete(f"/goals/{goal['id']}").status_code == 204
        r = client.get(f"/goals/{goal['id']}")
        assert r.status_code == 404
        assert r.json()["code"] == "GOAL_NOT_FOUND"

    def test_duplicate_link(self, client):
        a = _create(client)
        goal = client.post("/goals", json={"title": "Learn"}).json()
        client.post(f"/goals/{goal['id']}/links", json={"activity_id": a["id"]})
        r = client.post(f"/goals/{goal['id']}/links", json={"activity_id": a["id"]})
        assert r.status_code == 409
        assert r.json()["code"] == "DUPLICATE_GOAL_LINK"

    def test_paused_by_deadline(self, client):
        goal = client.post("/goals", json={"title": "Old", "deadline": "2024-01-01"}).json()
        body = client.get(f"/metrics/goals/{goal['id']}?reference_date=2024-02-01").json()
        assert body["is_paused"] is True
        assert body["consistency_score"] == 0.0
