"""API tests for logging and listing set groups."""

import datetime


def _log(client, headers, **overrides):
    body = {
        "exercise_name": "Back Squat",
        "date": "2026-10-15",
        "weight": 100.0,
        "reps": 5,
        "sets": 3,
        "rpe": 8.0,
    }
    body.update(overrides)
    return client.post("/api/v1/performance", json=body, headers=headers)


class TestLogPerformance:
    def test_log(self, client, auth_headers, user):
        response = _log(client, auth_headers, exercise_name="  Back Squat ")
        assert response.status_code == 201
        body = response.json()
        assert body["exercise_name"] == "Back Squat"
        assert body["user_id"] == user.id
        assert body["completed"] is True

    def test_rpe_out_of_range(self, client, auth_headers):
        assert _log(client, auth_headers, rpe=11).status_code == 422

    def test_zero_reps_rejected(self, client, auth_headers):
        assert _log(client, auth_headers, reps=0).status_code == 422

    def test_requires_user(self, client):
        assert _log(client, {}).status_code == 401


class TestListPerformance:
    def test_filter_by_exercise_case_insensitive(self, client, auth_headers):
        _log(client, auth_headers, date="2026-10-12")
        _log(client, auth_headers, date="2026-10-15", weight=102.5)
        _log(client, auth_headers, exercise_name="Bench Press")

        response = client.get("/api/v1/performance", params={"exercise": "back squat"}, headers=auth_headers)
        weights = [s["weight"] for s in response.json()]
        assert weights == [100.0, 102.5]

    def test_date_range(self, client, auth_headers):
        _log(client, auth_headers, date="2026-10-01")
        _log(client, auth_headers, date="2026-10-10")
        response = client.get(
            "/api/v1/performance", params={"start": "2026-10-05", "end": "2026-10-31"}, headers=auth_headers,
        )
        assert [s["date"] for s in response.json()] == ["2026-10-10"]

    def test_exercises_summary(self, client, auth_headers):
        _log(client, auth_headers, date="2026-10-01")
        _log(client, auth_headers, date="2026-10-08")
        _log(client, auth_headers, exercise_name="Bench Press", date="2026-10-02")

        summary = client.get("/api/v1/performance/exercises", headers=auth_headers).json()
        assert summary[0] == {
            "exercise_name": "Back Squat",
            "samples": 2,
            "first_date": "2026-10-01",
            "last_date": "2026-10-08",
        }
        assert summary[1]["exercise_name"] == "Bench Press"

    def test_exercises_summary_ignores_case(self, client, auth_headers):
        _log(client, auth_headers, date="2026-10-01")
        _log(client, auth_headers, exercise_name="back squat", date="2026-10-04")

        summary = client.get("/api/v1/performance/exercises", headers=auth_headers).json()
        assert len(summary) == 1
        assert summary[0]["samples"] == 2
        assert summary[0]["last_date"] == "2026-10-04"


class TestDeletePerformance:
    def test_delete(self, client, auth_headers):
        sample_id = _log(client, auth_headers).json()["id"]
        assert client.delete(f"/api/v1/performance/{sample_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/api/v1/performance/{sample_id}", headers=auth_headers).status_code == 404

    def test_other_users_sample_not_found(self, client, auth_headers):
        sample_id = _log(client, auth_headers).json()["id"]
        other = client.post("/api/v1/users", json={"email": "other@repcoach.io"}).json()
        response = client.delete(f"/api/v1/performance/{sample_id}", headers={"X-User-Id": str(other["id"])})
        assert response.status_code == 404
