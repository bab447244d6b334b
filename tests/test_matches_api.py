import pytest

from app.models.match import Match
from app.models.player import Player
from app.services import match_service


@pytest.fixture()
def started(client, make_team):
    team_a = make_team("Max", "Lara", name="Smash")
    team_b = make_team("Paul", "Anna", name="Drop")
    resp = client.post(
        "/api/matches/start",
        json={
            "team_a_id": team_a["id"],
            "team_b_id": team_b["id"],
            "serve_team_is_a": True,
            "start_side": "RIGHT",
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json(), team_a, team_b


def point(client, match_id, team):
    resp = client.post(f"/api/matches/{match_id}/point", params={"team": team})
    assert resp.status_code == 200, resp.text
    return resp.json()


def current(match_json):
    return max(match_json["sets"], key=lambda s: s["number"])


def test_create_team_assigns_start_positions(make_team):
    team = make_team("Max", "Lara")

    assert [p["name"] for p in team["players"]] == ["Max", "Lara"]
    assert [p["position"] for p in team["players"]] == ["RIGHT", "LEFT"]
    assert [p["slot"] for p in team["players"]] == [0, 1]
    assert not any(p["busy"] for p in team["players"])


def test_create_team_requires_two_players(client):
    resp = client.post("/api/teams", json={"players": ["Solo"]})
    assert resp.status_code == 422


def test_start_match(started):
    match, team_a, team_b = started

    assert match["status"] == "ONGOING"
    assert [t["id"] for t in match["teams"]] == [team_a["id"], team_b["id"]]
    assert match["serving_team_id"] == team_a["id"]
    assert match["serve_side"] == "RIGHT"
    assert match["winning_team_id"] is None
    assert match["break_recommended"] is False
    assert [(s["number"], s["points_a"], s["points_b"]) for s in match["sets"]] == [(1, 0, 0)]
    assert all(p["busy"] for t in match["teams"] for p in t["players"])


def test_start_match_unknown_team(client, make_team):
    team_a = make_team("Max", "Lara")
    resp = client.post(
        "/api/matches/start",
        json={"team_a_id": team_a["id"], "team_b_id": "nope"},
    )

    assert resp.status_code == 404
    body = resp.json()
    assert body["code"] == "team_not_found"
    assert resp.headers["content-type"].startswith("application/problem+json")


def test_busy_player_cannot_start_second_match(client, started, session_factory):
    _, team_a, _ = started
    max_id = team_a["players"][0]["id"]

    # a second team containing Max, reusing his player row
    resp = client.post("/api/teams", json={"players": ["Tom", "Eva"]})
    team_c = resp.json()
    team_d = client.post("/api/teams", json={"players": ["Kim", "Joe"]}).json()
    with session_factory() as session:
        max_player = session.get(Player, max_id)
        tom = session.get(Player, team_c["players"][0]["id"])
        session.delete(tom)
        max_player.team_id = team_c["id"]
        max_player.slot = 0
        session.commit()

    resp = client.post(
        "/api/matches/start",
        json={"team_a_id": team_c["id"], "team_b_id": team_d["id"]},
    )

    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "player_unavailable"
    assert body["player_ids"] == [max_id]
    assert "Max" in body["detail"]

    # nothing booked for the rejected match
    team_d_now = client.get(f"/api/teams/{team_d['id']}").json()
    assert not any(p["busy"] for p in team_d_now["players"])


def test_rematch_of_busy_teams_rejected(client, started):
    _, team_a, team_b = started
    resp = client.post(
        "/api/matches/start",
        json={"team_a_id": team_b["id"], "team_b_id": team_a["id"]},
    )
    assert resp.status_code == 409
    assert len(resp.json()["player_ids"]) == 4


def test_award_points_and_break(client, started):
    match, team_a, team_b = started
    for _ in range(10):
        match = point(client, match["id"], "A")
    assert match["break_recommended"] is False
    resp = client.get(f"/api/matches/{match['id']}/break-recommended")
    assert resp.json() == {"match_id": match["id"], "break_recommended": False}

    match = point(client, match["id"], "A")

    assert (current(match)["points_a"], current(match)["points_b"]) == (11, 0)
    assert match["serving_team_id"] == team_a["id"]
    assert match["serve_side"] == "LEFT"
    assert [p["position"] for p in match["teams"][0]["players"]] == ["LEFT", "RIGHT"]
    assert [p["position"] for p in match["teams"][1]["players"]] == ["RIGHT", "LEFT"]
    resp = client.get(f"/api/matches/{match['id']}/break-recommended")
    assert resp.json()["break_recommended"] is True


def test_receiver_point_changes_serve(client, started):
    match, _, team_b = started
    match = point(client, match["id"], "B")

    assert (current(match)["points_a"], current(match)["points_b"]) == (0, 1)
    assert match["serving_team_id"] == team_b["id"]
    assert match["serve_side"] == "LEFT"


def test_invalid_team_code(client, started):
    match, _, _ = started
    resp = client.post(f"/api/matches/{match['id']}/point", params={"team": "C"})
    assert resp.status_code == 422


def test_full_match_finishes(client, started):
    match, team_a, _ = started
    for _ in range(10):
        point(client, match["id"], "A")
        point(client, match["id"], "B")
    for _ in range(11):
        match = point(client, match["id"], "A")

    assert [(s["number"], s["points_a"], s["points_b"]) for s in match["sets"]] == [
        (1, 21, 10),
        (2, 0, 0),
    ]

    for _ in range(21):
        match = point(client, match["id"], "A")

    assert match["status"] == "FINISHED"
    assert match["winning_team_id"] == team_a["id"]
    assert len(match["sets"]) == 2
    assert not any(p["busy"] for t in match["teams"] for p in t["players"])

    resp = client.post(f"/api/matches/{match['id']}/point", params={"team": "B"})
    assert resp.status_code == 409
    assert resp.json()["code"] == "invalid_state"


def test_undo_point(client, started):
    match, _, _ = started
    before = point(client, match["id"], "A")
    point(client, match["id"], "A")

    resp = client.post(f"/api/matches/{match['id']}/undo", params={"team": "A"})
    assert resp.status_code == 200
    undone = resp.json()

    for key in ("serving_team_id", "serve_side", "sets", "teams"):
        assert undone[key] == before[key]


def test_undo_at_zero_is_noop(client, started):
    match, _, _ = started
    resp = client.post(f"/api/matches/{match['id']}/undo", params={"team": "B"})
    assert resp.status_code == 200
    assert resp.json() == match


def test_abort_match(client, started):
    match, _, team_b = started
    point(client, match["id"], "A")

    resp = client.post(
        f"/api/matches/{match['id']}/abort", params={"forfeiting_team": "A"}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "FORFEITED"
    assert body["winning_team_id"] == team_b["id"]
    assert not any(p["busy"] for t in body["teams"] for p in t["players"])

    resp = client.post(
        f"/api/matches/{match['id']}/abort", params={"forfeiting_team": "B"}
    )
    assert resp.status_code == 409


def test_serve_side_override(client, started):
    match, _, _ = started
    point(client, match["id"], "B")

    resp = client.put(
        f"/api/matches/{match['id']}/serve-side", params={"side": "RIGHT"}
    )

    assert resp.status_code == 200
    assert resp.json()["serve_side"] == "RIGHT"
    assert client.get(f"/api/matches/{match['id']}").json()["serve_side"] == "RIGHT"


def test_unknown_match(client):
    for resp in (
        client.get("/api/matches/missing"),
        client.post("/api/matches/missing/point", params={"team": "A"}),
        client.post("/api/matches/missing/undo", params={"team": "A"}),
        client.post("/api/matches/missing/abort", params={"forfeiting_team": "A"}),
        client.get("/api/matches/missing/break-recommended"),
        client.delete("/api/matches/missing"),
    ):
        assert resp.status_code == 404
        assert resp.json()["code"] == "match_not_found"


def test_failed_operation_rolls_back(client, started, session_factory):
    match, _, _ = started
    with session_factory() as session:
        stored = session.get(Match, match["id"])
        stored.team_b_id = None
        session.commit()

    resp = client.post(f"/api/matches/{match['id']}/point", params={"team": "A"})

    assert resp.status_code == 500
    assert resp.json()["code"] == "invariant_violation"
    assert current(client.get(f"/api/matches/{match['id']}").json())["points_a"] == 0


def test_list_matches_by_status(client, started):
    match, _, _ = started
    assert [m["id"] for m in client.get("/api/matches").json()] == [match["id"]]
    assert client.get("/api/matches", params={"status": "FINISHED"}).json() == []
    ongoing = client.get("/api/matches", params={"status": "ONGOING"}).json()
    assert [m["id"] for m in ongoing] == [match["id"]]


def test_sets_endpoints(client, started):
    match, _, _ = started
    sets = client.get("/api/sets").json()
    assert len(sets) == 1
    assert sets[0]["match_id"] == match["id"]

    resp = client.get(f"/api/sets/{sets[0]['id']}")
    assert resp.status_code == 200
    assert resp.json()["number"] == 1
    assert client.get("/api/sets/missing").status_code == 404


def test_delete_match_releases_players(client, started):
    match, team_a, team_b = started

    assert client.delete(f"/api/matches/{match['id']}").status_code == 204

    assert client.get(f"/api/matches/{match['id']}").status_code == 404
    assert client.get("/api/sets").json() == []
    for team in (team_a, team_b):
        players = client.get(f"/api/teams/{team['id']}").json()["players"]
        assert not any(p["busy"] for p in players)


def test_team_with_matches_cannot_be_deleted(client, started):
    _, team_a, _ = started
    resp = client.delete(f"/api/teams/{team_a['id']}")
    assert resp.status_code == 409


def test_scoresheet_pdf(client, started):
    match, _, _ = started
    point(client, match["id"], "A")

    resp = client.get(f"/api/matches/{match['id']}/scoresheet.pdf")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")


def test_pages_render(client, started):
    match, _, _ = started
    assert client.get("/").status_code == 200
    page = client.get(f"/match/{match['id']}")
    assert page.status_code == 200
    assert "Smash" in page.text
    assert client.get("/history").status_code == 200


def test_exists(started, db):
    match, _, _ = started
    assert match_service.exists(db, match["id"]) is True
    assert match_service.exists(db, "missing") is False


def test_failed_delete_rolls_back(client, started, db, session_factory, monkeypatch):
    match, team_a, _ = started

    def broken_commit():
        raise RuntimeError("database went away")

    monkeypatch.setattr(db, "commit", broken_commit)
    with pytest.raises(RuntimeError):
        match_service.delete(db, match["id"])

    assert not db.dirty
    assert not db.deleted
    with session_factory() as session:
        assert session.get(Match, match["id"]) is not None
        assert session.get(Player, team_a["players"][0]["id"]).busy is True
