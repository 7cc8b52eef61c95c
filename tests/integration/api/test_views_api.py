"""Tests for dashboard view endpoints."""

import pytest


class TestViewsAPI:
    """Tests for /api/views endpoints."""

    @pytest.mark.asyncio
    async def test_command_center(self, client, stable):
        """GET /api/views/command-center returns alert tiles and counts."""
        response = await client.get("/api/views/command-center")

        assert response.status_code == 200
        data = response.json()
        statuses = {item["name"]: item["alert_status"] for item in data["items"]}
        assert statuses["Lame Duck"] == "red"
        assert statuses["Old Timer"] == "grey"
        assert statuses["Wanderer"] == "yellow"
        assert data["counts"] == {"green": 2, "yellow": 1, "red": 1, "grey": 1}
        assert data["last_update"] is not None

    @pytest.mark.asyncio
    async def test_location_map(self, client, stable):
        """GET /api/views/location-map filters on location status."""
        response = await client.get("/api/views/location-map", params={"status": "walking"})

        assert response.status_code == 200
        data = response.json()
        assert [item["name"] for item in data["items"]] == ["Wanderer"]
        assert data["items"][0]["location_status"] == "walking"

    @pytest.mark.asyncio
    async def test_problems(self, client, stable):
        """GET /api/views/problems lists problems by severity."""
        response = await client.get("/api/views/problems", params={"severity": "critical"})

        assert response.status_code == 200
        data = response.json()
        assert [(p["horse"]["name"], p["problem"]) for p in data["items"]] == [
            ("Lame Duck", "Horse Injured"),
            ("Wanderer", "No Location Assignment"),
        ]
        assert data["critical_count"] == 2
        assert data["warning_count"] == 1

    @pytest.mark.asyncio
    async def test_problems_bad_severity(self, client, stable):
        """Unknown severities are rejected."""
        response = await client.get("/api/views/problems", params={"severity": "minor"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_dashboard(self, client, stable):
        """GET /api/views/dashboard returns headline counts."""
        response = await client.get("/api/views/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["total_horses"] == 5
        assert data["injured_horses"] == 1

    @pytest.mark.asyncio
    async def test_data_grid(self, client, stable):
        """GET /api/views/data-grid sorts rows."""
        response = await client.get("/api/views/data-grid", params={"sort": "name", "direction": "desc"})

        assert response.status_code == 200
        assert [row["name"] for row in response.json()][:2] == ["Wanderer", "Thunder Bolt"]

    @pytest.mark.asyncio
    async def test_data_grid_bad_sort(self, client, stable):
        """Unknown sort fields are rejected."""
        response = await client.get("/api/views/data-grid", params={"sort": "weight"})

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_race_history(self, client, stable):
        """GET /api/views/race-history filters by season and search."""
        current = await client.get("/api/views/race-history", params={"season": 2024})
        by_jockey = await client.get("/api/views/race-history", params={"search": "prat"})
        other = await client.get("/api/views/race-history", params={"season": 2023})

        assert [r["name"] for r in current.json()] == ["Pacific Classic"]
        assert current.json()[0]["participants_count"] == 2
        assert len(by_jockey.json()) == 1
        assert other.json() == []

    @pytest.mark.asyncio
    async def test_reports(self, client, stable):
        """GET /api/views/reports returns grouped counts."""
        response = await client.get("/api/views/reports")

        assert response.status_code == 200
        data = response.json()
        assert data["total_horses"] == 5
        assert len(data["monthly_activities"]) == 6
        assert {"label": "Retired", "count": 1} in data["horses_by_status"]

    @pytest.mark.asyncio
    async def test_report_text(self, client, stable):
        """GET /api/views/reports/text downloads a text report."""
        response = await client.get("/api/views/reports/text", params={"report_type": "summary"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert 'filename="summary_report.txt"' in response.headers["content-disposition"]
        assert "SUMMARY STATISTICS:" in response.text

    @pytest.mark.asyncio
    async def test_report_text_rejects_odd_names(self, client, stable):
        """Report type is restricted to simple identifiers."""
        response = await client.get("/api/views/reports/text", params={"report_type": "../x"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_filter_options(self, client, stable):
        """GET /api/views/filters/options lists filter choices."""
        response = await client.get("/api/views/filters/options")

        assert response.status_code == 200
        data = response.json()
        assert [o["label"] for o in data["owners"]] == ["John Smith Racing", "Golden Gate Stables"]
        assert data["horses"][0]["label"] == "Thunder Bolt (DM20240001)"
        assert [s["value"] for s in data["statuses"]] == ["active", "inactive", "injured", "retired"]

    @pytest.mark.asyncio
    async def test_filter_state(self, client, db_session):
        """GET /api/views/filters/state normalizes the filter parameters."""
        response = await client.get("/api/views/filters/state", params={"owner": " 3 ", "search": "bolt"})

        assert response.status_code == 200
        assert response.json() == {
            "owner": "3",
            "horse": "all",
            "status": "all",
            "location": "all",
            "race": "all",
            "search_term": "bolt",
        }


class TestCommandCenterLive:
    """Tests for /api/command-center endpoints."""

    @pytest.mark.asyncio
    async def test_empty_before_first_refresh(self, client, stable):
        """The live board is empty until the monitor has refreshed."""
        response = await client.get("/api/command-center/live")

        assert response.status_code == 200
        assert response.json() == {"items": [], "counts": {}, "last_update": None}

    @pytest.mark.asyncio
    async def test_refresh_then_filter(self, client, stable):
        """A refresh publishes a board that live requests filter."""
        refreshed = await client.post("/api/command-center/refresh")
        live = await client.get("/api/command-center/live", params={"status": "injured"})

        assert refreshed.status_code == 200
        assert len(refreshed.json()["items"]) == 5
        assert [item["name"] for item in live.json()["items"]] == ["Lame Duck"]
        assert live.json()["last_update"] == refreshed.json()["last_update"]

    @pytest.mark.asyncio
    async def test_owner_user_live_board(self, client, owner_user):
        """Owner users see only their own horses on the live board."""
        await client.post("/api/command-center/refresh")

        response = await client.get(
            "/api/command-center/live", headers={"X-User-ID": str(owner_user.id)}
        )

        assert [item["name"] for item in response.json()["items"]] == ["Thunder Bolt", "Wanderer"]


class TestAppEndpoints:
    """Tests for root and health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        """GET /health reports healthy."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        """Unknown routes use the shared error shape."""
        response = await client.get("/api/unknown")

        assert response.status_code == 404
        assert response.json()["code"] == "http_error"
