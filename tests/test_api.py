from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from pitchside.api import create_app


SQUAD_442 = [
    ("Gus Keeper", "goalkeeper"),
    ("Dan Back", "defender"),
    ("Dee Wall", "defender"),
    ("Dom Stopper", "defender"),
    ("Dev Fullback", "defender"),
    ("Mia Engine", "midfielder"),
    ("Max Pivot", "midfielder"),
    ("Mo Wide", "midfielder"),
    ("Mel Ten", "midfielder"),
    ("Finn Striker", "forward"),
    ("Fay Poacher", "forward"),
]


@pytest.fixture
async def client(tmp_path: Path):
    app = create_app(db_path=tmp_path / "pitchside.sqlite")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


async def _register_squad(client: AsyncClient, *, checked_in: bool = True) -> list[dict]:
    players = []
    for number, (name, position) in enumerate(SQUAD_442, start=1):
        resp = await client.post(
            "/players",
            json={"name": name, "position": position, "jersey_number": number, "is_checked_in": checked_in},
        )
        assert resp.status_code == 201, resp.text
        players.append(resp.json())
    return players


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.anyio
async def test_player_crud(client: AsyncClient):
    resp = await client.post("/players", json={"name": "Sam", "position": "forward", "jersey_number": 9})
    assert resp.status_code == 201
    player = resp.json()
    assert player["position_history"] == ["forward"]
    assert player["is_checked_in"] is False

    resp = await client.post("/players", json={"name": "Other", "position": "forward", "jersey_number": 9})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Jersey number is already taken"

    resp = await client.post("/players", json={"name": "Bad", "position": "forward", "jersey_number": 100})
    assert resp.status_code == 422

    player_id = player["player_id"]
    resp = await client.patch(f"/players/{player_id}", json={"position": "midfielder", "phone": "555-0101"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["position"] == "midfielder"
    assert body["phone"] == "555-0101"
    assert body["position_history"] == ["forward", "midfielder"]

    resp = await client.get(f"/players/{player_id}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Sam"

    resp = await client.get("/players")
    assert [item["player_id"] for item in resp.json()] == [player_id]

    resp = await client.delete(f"/players/{player_id}")
    assert resp.status_code == 204
    resp = await client.get(f"/players/{player_id}")
    assert resp.status_code == 404
    resp = await client.patch(f"/players/{player_id}", json={"name": "Ghost"})
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_patch_jersey_conflict(client: AsyncClient):
    players = await _register_squad(client)
    resp = await client.patch(f"/players/{players[0]['player_id']}", json={"jersey_number": 2})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_toggle_checkin_and_stats(client: AsyncClient):
    players = await _register_squad(client, checked_in=False)

    resp = await client.post(f"/players/{players[0]['player_id']}/toggle-checkin")
    assert resp.status_code == 200
    assert resp.json()["is_checked_in"] is True
    resp = await client.post("/players/9999/toggle-checkin")
    assert resp.status_code == 404

    resp = await client.get("/stats")
    assert resp.status_code == 200
    stats = resp.json()
    assert stats["total_players"] == 11
    assert stats["checked_in_players"] == 1
    assert stats["attendance_rate"] == 9
    assert stats["position_counts"] == {"goalkeeper": 1, "defender": 4, "midfielder": 4, "forward": 2}


@pytest.mark.anyio
async def test_stats_on_empty_roster(client: AsyncClient):
    resp = await client.get("/stats")
    assert resp.json() == {
        "total_players": 0,
        "checked_in_players": 0,
        "attendance_rate": 0,
        "position_counts": {},
    }


@pytest.mark.anyio
async def test_formation_catalog(client: AsyncClient):
    resp = await client.get("/formations")
    assert resp.status_code == 200
    names = [item["name"] for item in resp.json()]
    assert names == ["4-4-2", "4-3-3", "3-5-2", "4-2-3-1"]
    assert all(item["total"] == 11 for item in resp.json())


@pytest.mark.anyio
async def test_generate_formation(client: AsyncClient):
    players = await _register_squad(client)

    resp = await client.post("/formations/generate", json={"formation_name": "4-4-2"})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["message"] == "Successfully generated 4-4-2 formation with 11 players"
    registered = {player["player_id"]: player["position"] for player in players}
    assert len(payload["players"]) == 11
    for assigned in payload["players"]:
        assert assigned["assigned_position"] == registered[assigned["player_id"]]


@pytest.mark.anyio
async def test_generate_custom_formation(client: AsyncClient):
    await _register_squad(client)
    body = {
        "formation": {
            "name": "3-4-3",
            "positions": {"goalkeeper": 1, "defender": 3, "midfielder": 4, "forward": 3},
        }
    }
    resp = await client.post("/formations/generate", json=body)
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["formation"]["total"] == 11
    forwards = [player for player in payload["players"] if player["assigned_position"] == "forward"]
    assert len(forwards) == 3


@pytest.mark.anyio
async def test_generate_formation_errors(client: AsyncClient):
    resp = await client.post("/formations/generate", json={"formation_name": "4-4-2"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "no_players_available"

    await _register_squad(client)
    await client.post("/players/1/toggle-checkin")
    resp = await client.post("/formations/generate", json={"formation_name": "4-3-3"})
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["error"] == "insufficient_players"
    assert detail["required"] == 11
    assert detail["available"] == 10

    resp = await client.post("/formations/generate", json={"formation_name": "9-0-1"})
    assert resp.status_code == 404

    resp = await client.post("/formations/generate", json={})
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_smart_position(client: AsyncClient):
    resp = await client.post(
        "/players",
        json={"name": "Goal Machine", "position": "defender", "jersey_number": 9, "goals": 5, "matches_played": 1},
    )
    player_id = resp.json()["player_id"]

    resp = await client.get(f"/players/{player_id}/smart-position")
    assert resp.status_code == 200
    body = resp.json()
    assert body["suggested_position"] == "forward"
    assert body["performance_score"] == pytest.approx(15.0)

    resp = await client.get("/players/9999/smart-position")
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_smart_position_survives_corrupt_history(client: AsyncClient):
    players = await _register_squad(client)
    keeper = players[0]
    store = client.app.state.player_store
    with store._connect() as conn:
        conn.execute("UPDATE players SET position_history = ? WHERE id = ?", ("{not json", keeper["player_id"]))
        conn.commit()

    resp = await client.get(f"/players/{keeper['player_id']}/smart-position")
    assert resp.status_code == 200
    assert resp.json()["suggested_position"] == "goalkeeper"

    resp = await client.get(f"/players/{keeper['player_id']}")
    assert resp.json()["position_history"] == []


@pytest.mark.anyio
async def test_natural_stats_and_weekly_summary(client: AsyncClient):
    resp = await client.post("/players", json={"name": "Sam Smith", "position": "forward", "jersey_number": 9})
    player_id = resp.json()["player_id"]

    resp = await client.post("/stats/natural", json={"text": "Sam scored 2 goals and got a yellow card"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Updated stats for Sam Smith"
    assert body["parsed_stats"] == {"goals": 2, "yellow_cards": 1}
    assert body["player"]["goals"] == 2

    resp = await client.get(f"/players/{player_id}/weekly-summary")
    assert resp.status_code == 200
    summary = resp.json()
    assert summary["this_week"]["goals"] == 2
    assert summary["improvement"]["goals"] == 2
    assert summary["summary"] == "This week you scored 2 goals and had 0 assists in 0 matches"

    resp = await client.post("/admin/update-weekly-stats")
    assert resp.status_code == 200
    assert resp.json()["players"] == 1

    summary = (await client.get(f"/players/{player_id}/weekly-summary")).json()
    assert summary["last_week"]["goals"] == 2
    assert summary["this_week"]["goals"] == 0
    assert summary["improvement"]["goals"] == -2


@pytest.mark.anyio
async def test_natural_stats_errors(client: AsyncClient):
    resp = await client.post("/stats/natural", json={"text": "nothing to see"})
    assert resp.status_code == 400

    resp = await client.post("/stats/natural", json={"text": "Zed scored"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Player Zed not found"


@pytest.mark.anyio
async def test_weekly_summary_with_corrupt_blob(client: AsyncClient):
    resp = await client.post("/players", json={"name": "Blob", "position": "defender", "jersey_number": 2})
    player_id = resp.json()["player_id"]
    store = client.app.state.player_store
    with store._connect() as conn:
        conn.execute("UPDATE players SET weekly_stats = ? WHERE id = ?", ("[1, 2", player_id))
        conn.commit()

    resp = await client.get(f"/players/{player_id}/weekly-summary")
    assert resp.status_code == 200
    assert resp.json()["summary"] == "No weekly data available yet"


@pytest.mark.anyio
async def test_name_suggestions(client: AsyncClient):
    await _register_squad(client)

    assert (await client.get("/suggestions")).json() == []
    assert (await client.get("/suggestions", params={"q": "m"})).json() == []
    assert (await client.get("/suggestions", params={"q": "ma"})).json() == ["Max Pivot"]
    names = (await client.get("/suggestions", params={"q": "EE"})).json()
    assert sorted(names) == ["Dee Wall", "Gus Keeper"]


@pytest.mark.anyio
async def test_reminders(client: AsyncClient):
    match_time = (datetime.now(timezone.utc) + timedelta(hours=1)).isoformat()
    resp = await client.post("/reminders", json={"match_time": match_time})
    assert resp.status_code == 201
    reminder = resp.json()
    assert reminder["is_active"] is True
    assert reminder["player_id"] is None

    resp = await client.post("/reminders", json={"match_time": "not a date"})
    assert resp.status_code == 422

    resp = await client.get("/reminders")
    assert [item["reminder_id"] for item in resp.json()] == [reminder["reminder_id"]]

    resp = await client.post(f"/reminders/{reminder['reminder_id']}/deactivate")
    assert resp.status_code == 200
    assert (await client.get("/reminders")).json() == []

    resp = await client.post("/reminders/9999/deactivate")
    assert resp.status_code == 404
