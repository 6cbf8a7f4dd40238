"""
HTTP API tests through FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from reversi.board import BLACK, WHITE, Board
from reversi.opponents import OPPONENTS, ClassicOpponent
from reversi.search import SearchEngine
from reversi.server import app, session


@pytest.fixture
def client():
    client = TestClient(app)
    client.post("/new")
    yield client
    session.reset()


class TestAPI:
    def test_new_game_state(self, client):
        data = client.post("/new").json()
        assert data["grid"] == Board().to_lists()
        assert data["to_move"] == BLACK
        assert (data["black"], data["white"]) == (2, 2)
        assert sum(map(sum, data["legal"])) == 4
        assert data["terminal"] is False
        assert data["winner"] is None
        assert data["last_move"] is None

    def test_get_state(self, client):
        response = client.get("/state")
        assert response.status_code == 200
        assert response.json()["to_move"] == BLACK

    def test_move(self, client):
        response = client.post("/move", json={"r": 2, "c": 3})
        assert response.status_code == 200
        data = response.json()
        assert data["to_move"] == WHITE
        assert data["last_move"] == {"r": 2, "c": 3}
        assert data["log"] == ["1: black -> d3"]

    def test_illegal_move(self, client):
        response = client.post("/move", json={"r": 0, "c": 0})
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "Invalid move"
        assert {"r": 2, "c": 3} in detail["legal"]
        assert client.get("/state").json()["grid"] == Board().to_lists()

    def test_out_of_range_move(self, client):
        response = client.post("/move", json={"r": 8, "c": 0})
        assert response.status_code == 400

    def test_preview(self, client):
        data = client.post("/preview", json={"r": 2, "c": 3}).json()
        assert data["valid"] is True
        assert data["state"]["grid"][3][3] == BLACK
        assert data["state"]["to_move"] == WHITE
        # preview does not commit
        assert client.get("/state").json()["grid"] == Board().to_lists()

    def test_preview_illegal(self, client):
        data = client.post("/preview", json={"r": 0, "c": 0}).json()
        assert data == {"valid": False, "state": None}

    def test_ai_move(self, client):
        response = client.post("/ai_move")
        assert response.status_code == 200
        data = response.json()
        assert data["opponent"] == "classic"
        assert data["move"] == {"r": 2, "c": 3}
        assert data["state"]["to_move"] == WHITE

    def test_ai_move_unknown_opponent(self, client):
        response = client.post("/ai_move", params={"opponent": "nope"})
        assert response.status_code == 404

    def test_pass_with_moves_rejected(self, client):
        assert client.post("/pass").status_code == 400

    def test_undo(self, client):
        client.post("/move", json={"r": 2, "c": 3})
        data = client.post("/undo", json={"plies": 1}).json()
        assert data["grid"] == Board().to_lists()
        assert data["to_move"] == BLACK

    def test_undo_too_many(self, client):
        assert client.post("/undo", json={"plies": 1}).status_code == 400

    def test_opponents(self, client):
        assert "classic" in client.get("/opponents").json()["opponents"]

    def test_info(self, client):
        data = client.get("/info").json()
        assert data["depth"] == 4
        assert data["weights"] == {"positional": 1.0, "mobility": 5.0}


@pytest.fixture
def shallow(monkeypatch):
    monkeypatch.setitem(OPPONENTS, "shallow", lambda: ClassicOpponent(SearchEngine(depth=1)))
    return "shallow"


class Meddler:
    """Opponent that starts a new game while it is thinking"""
    name = "meddler"

    def is_ready(self):
        return True

    def find_best_move(self, board, color):
        session.reset()
        return board.valid_moves(color)[0]


# ════════════════════════════════════════════════════════════════════════════
#  PLAYER MODES
# ════════════════════════════════════════════════════════════════════════════

class TestPlayerModes:
    def test_default_is_human_vs_human(self, client):
        data = client.get("/state").json()
        assert data["mode"] == "human-vs-human"
        assert data["black_player"] is None and data["white_player"] is None

    def test_human_vs_ai(self, client, shallow):
        data = client.post("/new", params={"white": shallow}).json()
        assert data["mode"] == "human-vs-ai"
        assert data["white_player"] == shallow
        assert data["to_move"] == BLACK

        data = client.post("/move", json={"r": 2, "c": 3}).json()
        # White answers straight away
        assert data["to_move"] == BLACK
        assert len(data["log"]) == 2
        assert data["log"][0] == "1: black -> d3"
        assert data["log"][1].startswith("2: white -> ")

    def test_ai_vs_human(self, client, shallow):
        data = client.post("/new", params={"black": shallow}).json()
        assert data["mode"] == "ai-vs-human"
        assert data["to_move"] == WHITE
        assert data["log"] == ["1: black -> d3"]
        assert data["last_move"] == {"r": 2, "c": 3}

    def test_ai_vs_ai_plays_out(self, client, shallow):
        data = client.post("/new", params={"black": shallow, "white": shallow}).json()
        assert data["mode"] == "ai-vs-ai"
        assert data["terminal"] is True
        assert data["black"] + data["white"] > 4
        response = client.post("/move", json={"r": 2, "c": 3})
        assert response.status_code == 400
        assert response.json()["detail"] == "Game is over"

    def test_move_on_ai_turn_rejected(self, client, shallow):
        client.post("/new", params={"white": shallow})
        client.post("/move", json={"r": 2, "c": 3})
        # Back to White's turn; undo does not let the AI replay
        data = client.post("/undo", json={"plies": 1}).json()
        assert data["to_move"] == WHITE
        before = data["grid"]

        response = client.post("/move", json={"r": 2, "c": 2})
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "Not a human turn"
        assert detail["controller"] == shallow
        assert client.post("/pass").status_code == 400
        assert client.get("/state").json()["grid"] == before

    def test_ai_move_resumes_ai_side(self, client, shallow):
        client.post("/new", params={"white": shallow})
        client.post("/move", json={"r": 2, "c": 3})
        client.post("/undo", json={"plies": 1})
        data = client.post("/ai_move").json()
        assert data["opponent"] == shallow
        assert data["state"]["to_move"] == BLACK

    def test_unknown_player(self, client):
        response = client.post("/new", params={"black": "nope"})
        assert response.status_code == 404
        assert client.get("/state").json()["mode"] == "human-vs-human"


class TestConcurrency:
    def test_game_changed_while_thinking(self, client, monkeypatch):
        monkeypatch.setitem(OPPONENTS, "meddler", Meddler)
        client.post("/move", json={"r": 2, "c": 3})
        response = client.post("/ai_move", params={"opponent": "meddler"})
        assert response.status_code == 409
        # The reply was discarded, not applied to the new game
        assert client.get("/state").json()["grid"] == Board().to_lists()
