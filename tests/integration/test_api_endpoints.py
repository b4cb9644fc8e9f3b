"""End-to-end tests for the HTTP API against a real SQLite database.

Run with: uv run pytest tests/integration/test_api_endpoints.py -v
"""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from mjleague.db.session import Database
from mjleague.main import create_app
from mjleague.settings import Settings


def _game(*pairs, timestamp=None) -> dict:
    body = {"players": [{"member_name": name, "score": score} for name, score in pairs]}
    if timestamp is not None:
        body["timestamp"] = timestamp
    return body


GAME_ONE = _game(("A", 400), ("B", 300), ("C", 200), ("D", 100), timestamp="2024/5/1 20:00:00")


@pytest.fixture
async def production_client(settings: Settings, database: Database):
    """Client for an app running with production settings."""
    app = create_app(settings.model_copy(update={"production": True, "disable_import": True}))
    app.state.database = database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestHealth:
    """Tests for the service endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_root(self, client: AsyncClient):
        response = await client.get("/")
        assert response.status_code == 200
        assert "version" in response.json()


class TestGamesApi:
    """Tests for /api/games."""

    @pytest.mark.asyncio
    async def test_submit_and_get(self, client: AsyncClient):
        response = await client.post("/api/games", json=GAME_ONE)
        assert response.status_code == 201
        body = response.json()
        assert body["timestamp"] == "2024/5/1 20:00:00"
        assert [r["member_name"] for r in body["results"]] == ["A", "B", "C", "D"]
        assert [r["rank"] for r in body["results"]] == [1, 2, 3, 4]

        response = await client.get(f"/api/games/{body['id']}")
        assert response.status_code == 200
        assert response.json() == body

    @pytest.mark.asyncio
    async def test_submit_invalid_sum(self, client: AsyncClient):
        response = await client.post(
            "/api/games", json=_game(("A", 400), ("B", 300), ("C", 200), ("D", 99))
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Scores must sum to 1000 (got 999)"

    @pytest.mark.asyncio
    async def test_submit_wrong_player_count(self, client: AsyncClient):
        response = await client.post("/api/games", json=_game(("A", 500), ("B", 500)))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_submit_overlong_name(self, client: AsyncClient):
        response = await client.post(
            "/api/games", json=_game(("A" * 65, 400), ("B", 300), ("C", 200), ("D", 100))
        )
        assert response.status_code == 422
        assert (await client.get("/api/members")).json() == []

    @pytest.mark.asyncio
    async def test_list_newest_first(self, client: AsyncClient):
        first = (await client.post("/api/games", json=GAME_ONE)).json()
        second = (await client.post("/api/games", json=GAME_ONE)).json()

        response = await client.get("/api/games")
        assert [g["id"] for g in response.json()] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_update(self, client: AsyncClient):
        game = (await client.post("/api/games", json=GAME_ONE)).json()

        response = await client.put(
            f"/api/games/{game['id']}",
            json=_game(("A", 100), ("B", 300), ("C", 200), ("D", 400)),
        )
        assert response.status_code == 200
        assert response.json()["results"][0]["member_name"] == "D"

        member = (await client.get("/api/members/A")).json()
        assert member["fourth"] == 1
        assert member["first"] == 0

    @pytest.mark.asyncio
    async def test_delete(self, client: AsyncClient):
        game = (await client.post("/api/games", json=GAME_ONE)).json()

        response = await client.delete(f"/api/games/{game['id']}")
        assert response.status_code == 204

        assert (await client.get(f"/api/games/{game['id']}")).status_code == 404
        assert (await client.get("/api/members/A")).json()["games"] == 0

    @pytest.mark.asyncio
    async def test_missing_game(self, client: AsyncClient):
        assert (await client.get("/api/games/999")).status_code == 404
        assert (await client.put("/api/games/999", json=GAME_ONE)).status_code == 404
        assert (await client.delete("/api/games/999")).status_code == 404


class TestMembersApi:
    """Tests for /api/members."""

    @pytest.mark.asyncio
    async def test_add_and_conflict(self, client: AsyncClient):
        response = await client.post("/api/members", json={"name": "Alice"})
        assert response.status_code == 201
        assert response.json()["name"] == "Alice"
        assert response.json()["fourth_avoid_rate"] == 1.0

        response = await client.post("/api/members", json={"name": "Alice"})
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_add_empty_name(self, client: AsyncClient):
        response = await client.post("/api/members", json={"name": "  "})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_ordered_by_points(self, client: AsyncClient):
        await client.post("/api/games", json=GAME_ONE)
        response = await client.get("/api/members")
        assert [m["name"] for m in response.json()] == ["A", "B", "C", "D"]
        assert response.json()[0]["points"] == 60.0

    @pytest.mark.asyncio
    async def test_rename(self, client: AsyncClient):
        game = (await client.post("/api/games", json=GAME_ONE)).json()

        response = await client.patch("/api/members/A", json={"new_name": "Alice"})
        assert response.status_code == 200
        assert response.json()["name"] == "Alice"

        assert (await client.get("/api/members/A")).status_code == 404
        game = (await client.get(f"/api/games/{game['id']}")).json()
        assert game["results"][0]["member_name"] == "Alice"

    @pytest.mark.asyncio
    async def test_rename_conflict_and_missing(self, client: AsyncClient):
        await client.post("/api/games", json=GAME_ONE)
        response = await client.patch("/api/members/A", json={"new_name": "B"})
        assert response.status_code == 409
        response = await client.patch("/api/members/Z", json={"new_name": "Y"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_merge(self, client: AsyncClient):
        await client.post("/api/games", json=GAME_ONE)
        await client.post(
            "/api/games", json=_game(("A2", 400), ("B", 300), ("C", 200), ("D", 100))
        )

        response = await client.post("/api/members/A/merge", json={"source": "A2"})
        assert response.status_code == 200
        assert response.json()["games"] == 2
        assert response.json()["points"] == 120.0
        assert (await client.get("/api/members/A2")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, client: AsyncClient):
        await client.post("/api/games", json=GAME_ONE)

        response = await client.delete("/api/members/A")
        assert response.status_code == 204

        assert (await client.get("/api/games")).json() == []
        assert (await client.get("/api/members/B")).json()["games"] == 0

    @pytest.mark.asyncio
    async def test_destructive_ops_disabled_in_production(self, production_client: AsyncClient):
        await production_client.post("/api/games", json=GAME_ONE)

        response = await production_client.post("/api/members/A/merge", json={"source": "B"})
        assert response.status_code == 403
        response = await production_client.delete("/api/members/A")
        assert response.status_code == 403
        response = await production_client.delete("/api/data")
        assert response.status_code == 403

        # Renaming stays available
        response = await production_client.patch("/api/members/A", json={"new_name": "Alice"})
        assert response.status_code == 200


class TestStandingsApi:
    """Tests for /api/standings."""

    @pytest.mark.asyncio
    async def test_standings(self, client: AsyncClient):
        await client.post("/api/games", json=GAME_ONE)
        await client.post("/api/members", json={"name": "E"})

        response = await client.get("/api/standings")
        assert response.status_code == 200
        assert response.headers["cache-control"] == "public, max-age=10"

        body = response.json()
        assert body["hanchans"] == 1.0
        assert body["member_count"] == 5
        assert [e["position"] for e in body["entries"]] == [1, 2, 3, 4, 5]
        assert body["entries"][0]["member"]["name"] == "A"
        assert body["entries"][0]["member"]["first_rate"] == 1.0


class TestDataApi:
    """Tests for /api/data."""

    @pytest.mark.asyncio
    async def test_import_enabled(self, client: AsyncClient, production_client: AsyncClient):
        assert (await client.get("/api/data/import-enabled")).json() == {"enabled": True}
        assert (await production_client.get("/api/data/import-enabled")).json() == {
            "enabled": False
        }

    @pytest.mark.asyncio
    async def test_import_raw_body(self, client: AsyncClient):
        blob = {
            "inputRecords": [
                {"members": ["A", "B", "C", "D"], "scores": [400, 300, 200, 100]},
                {"members": ["A", "B"], "scores": [500, 500]},
            ]
        }
        response = await client.post(
            "/api/data/import",
            content=json.dumps(blob),
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["imported"] == 1
        assert body["member_count"] == 4
        assert body["skipped_records"][0]["index"] == 1
        assert body["skipped_records"][0]["raw"] == blob["inputRecords"][1]

        assert len((await client.get("/api/members")).json()) == 4

    @pytest.mark.asyncio
    async def test_import_skips_huge_score(self, client: AsyncClient):
        huge = "1" + "0" * 400
        content = (
            '{"inputRecords": ['
            '{"members": ["A", "B", "C", "D"], "scores": [' + huge + ', 0, 0, 0]}, '
            '{"members": ["A", "B", "C", "D"], "scores": [400, 300, 200, 100]}]}'
        )
        response = await client.post("/api/data/import", content=content)
        assert response.status_code == 200
        assert response.json()["imported"] == 1
        assert response.json()["skipped_records"][0]["index"] == 0

    @pytest.mark.asyncio
    async def test_member_paths_trim_names(self, client: AsyncClient):
        await client.post("/api/games", json=GAME_ONE)

        response = await client.patch("/api/members/%20A", json={"new_name": "Alice"})
        assert response.status_code == 200
        response = await client.delete("/api/members/Alice%20")
        assert response.status_code == 204

    @pytest.mark.asyncio
    async def test_import_invalid(self, client: AsyncClient):
        response = await client.post("/api/data/import", content="{oops")
        assert response.status_code == 400
        assert response.json()["detail"] == "Data is not valid JSON"

    @pytest.mark.asyncio
    async def test_import_disabled(self, production_client: AsyncClient):
        response = await production_client.post(
            "/api/data/import", content=json.dumps({"inputRecords": []})
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_export(self, client: AsyncClient):
        await client.post("/api/games", json=GAME_ONE)

        response = await client.get("/api/data/export")
        assert response.status_code == 200
        assert "league-export.json" in response.headers["content-disposition"]
        assert response.json() == {
            "inputRecords": [
                {
                    "members": ["A", "B", "C", "D"],
                    "scores": [400, 300, 200, 100],
                    "timestamp": "2024/5/1 20:00:00",
                }
            ]
        }

    @pytest.mark.asyncio
    async def test_clear(self, client: AsyncClient):
        await client.post("/api/games", json=GAME_ONE)

        response = await client.delete("/api/data")
        assert response.status_code == 200
        assert (await client.get("/api/members")).json() == []
        assert (await client.get("/api/games")).json() == []
