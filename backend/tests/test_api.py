"""
HTTP tests against a real app with its SQLite file in a temp directory.
"""
import pytest
from fastapi.testclient import TestClient

from studydeck import create_app
from studydeck.config import settings


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "studydeck_data_dir", tmp_path)
    return tmp_path


@pytest.fixture
def client(data_dir):
    with TestClient(create_app()) as c:
        yield c


def _add(client, n, **extra):
    ids = []
    for i in range(n):
        res = client.post(
            "/flashcards",
            json={"question": f"Q{i}?", "answer": f"A{i}", **extra},
        )
        assert res.status_code == 201
        ids.append(res.json()["id"])
    return ids


class TestFlashcardsApi:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_create_and_get(self, client):
        (card_id,) = _add(client, 1, difficulty="hard", note_id="n1")
        card = client.get(f"/flashcards/{card_id}").json()
        assert card["difficulty"] == "hard"
        assert card["note_id"] == "n1"
        assert card["review_count"] == 0
        assert client.get("/flashcards/due").json()["total"] == 1

    def test_invalid_difficulty_rejected(self, client):
        res = client.post("/flashcards", json={"question": "Q", "answer": "A", "difficulty": "brutal"})
        assert res.status_code == 422

    def test_edit_and_delete(self, client):
        (card_id,) = _add(client, 1)
        res = client.patch(f"/flashcards/{card_id}", json={"answer": "new"})
        assert res.json()["answer"] == "new"
        assert client.delete(f"/flashcards/{card_id}").status_code == 204
        assert client.get(f"/flashcards/{card_id}").status_code == 404
        assert client.delete(f"/flashcards/{card_id}").status_code == 404

    def test_search_and_filters(self, client):
        _add(client, 3)
        _add(client, 1, difficulty="easy", note_id="n9")
        assert client.get("/flashcards", params={"search": "a1"}).json()["total"] == 1
        assert client.get("/flashcards", params={"difficulty": "easy"}).json()["total"] == 1
        assert client.get("/flashcards", params={"note_id": "n9"}).json()["total"] == 1
        assert client.get("/flashcards").json()["total"] == 4

    def test_note_cascade(self, client):
        _add(client, 2, note_id="n1")
        _add(client, 1, note_id="n2")
        res = client.delete("/flashcards/by-note/n1")
        assert res.json() == {"note_id": "n1", "deleted": 2}
        assert client.get("/flashcards").json()["total"] == 1

    def test_stats(self, client):
        _add(client, 2, note_id="n1")
        _add(client, 1, difficulty="easy")
        stats = client.get("/flashcards/stats").json()
        assert stats["total_cards"] == 3
        assert stats["due_now"] == 3
        assert stats["linked_to_notes"] == 2
        assert stats["mastered"] == 0
        assert stats["per_difficulty"] == {"easy": 1, "medium": 2, "hard": 0}

    def test_cards_survive_restart(self, data_dir):
        with TestClient(create_app()) as c:
            ids = _add(c, 3)
            c.delete(f"/flashcards/{ids[1]}")
        with TestClient(create_app()) as c:
            items = c.get("/flashcards").json()["items"]
            assert [i["id"] for i in items] == [ids[0], ids[2]]


class TestStudyApi:
    def test_no_cards(self, client):
        res = client.post("/study/sessions")
        assert res.status_code == 201
        assert res.json()["status"] == "no_cards_available"

    def test_full_session(self, client):
        ids = _add(client, 3)
        state = client.post("/study/sessions").json()
        sid = state["session_id"]
        assert state["status"] == "awaiting_answer"

        res = client.post(f"/study/sessions/{sid}/grade", json={"correct": True})
        assert res.status_code == 409

        for correct in (True, False, True):
            assert client.post(f"/study/sessions/{sid}/reveal").json()["answer_revealed"]
            state = client.post(f"/study/sessions/{sid}/grade", json={"correct": correct}).json()

        assert state["status"] == "complete"
        assert state["record"]["score"] == 67
        assert state["record"]["flashcard_ids"] == ids
        assert [client.get(f"/flashcards/{i}").json()["review_count"] for i in ids] == [1, 1, 1]

        recent = client.get("/sessions/recent").json()
        assert recent["total"] == 1
        assert recent["items"][0]["mode"] == "study"
        assert client.get("/sessions/average").json() == {"average_score": 67, "sample_size": 1}

    def test_explicit_cards(self, client):
        ids = _add(client, 3)
        state = client.post("/study/sessions", json={"flashcard_ids": [ids[2]]}).json()
        assert state["total_cards"] == 1
        assert state["current_card"]["id"] == ids[2]
        assert state["current_card"]["answer"] is None
        sid = state["session_id"]
        assert client.get(f"/study/sessions/{sid}").json()["current_card"]["answer"] is None
        revealed = client.post(f"/study/sessions/{sid}/reveal").json()
        assert revealed["current_card"]["answer"] == "A2"
        res = client.post("/study/sessions", json={"flashcard_ids": ["missing"]})
        assert res.status_code == 404

    def test_abandon(self, client):
        ids = _add(client, 3)
        sid = client.post("/study/sessions").json()["session_id"]
        client.post(f"/study/sessions/{sid}/reveal")
        client.post(f"/study/sessions/{sid}/grade", json={"correct": True})
        state = client.delete(f"/study/sessions/{sid}").json()
        assert state["status"] == "abandoned"
        assert client.get(f"/study/sessions/{sid}").status_code == 404
        assert client.get(f"/flashcards/{ids[0]}").json()["review_count"] == 1
        assert client.get("/sessions/recent").json()["total"] == 0

    def test_session_survives_restart(self, data_dir):
        with TestClient(create_app()) as c:
            _add(c, 1)
            sid = c.post("/study/sessions").json()["session_id"]
            c.post(f"/study/sessions/{sid}/reveal")
            c.post(f"/study/sessions/{sid}/grade", json={"correct": True})
        with TestClient(create_app()) as c:
            items = c.get("/sessions/recent").json()["items"]
            assert len(items) == 1
            assert items[0]["score"] == 100
            assert c.get("/flashcards/due").json()["total"] == 0


class TestQuizApi:
    def test_no_questions(self, client):
        _add(client, 2)
        res = client.post("/quiz/sessions", json={"difficulty_filter": "easy"})
        assert res.json()["status"] == "no_questions_available"

    def test_full_quiz(self, client):
        ids = _add(client, 4)
        answers = {i: client.get(f"/flashcards/{i}").json()["answer"] for i in ids}

        state = client.post("/quiz/sessions", json={"question_count": 10, "time_limit_seconds": 600}).json()
        sid = state["session_id"]
        assert state["total_questions"] == 4
        assert state["remaining_seconds"] <= 600

        assert client.post(f"/quiz/sessions/{sid}/next").status_code == 409
        assert client.post(f"/quiz/sessions/{sid}/previous").status_code == 409
        bad = client.post(f"/quiz/sessions/{sid}/select", json={"option": "nope"})
        assert bad.status_code == 400

        for _ in range(4):
            question = state["current_question"]
            options = question["options"]
            assert len(options) == len(set(options)) <= 4
            client.post(
                f"/quiz/sessions/{sid}/select",
                json={"option": answers[question["flashcard_id"]]},
            )
            state = client.post(f"/quiz/sessions/{sid}/next").json()

        assert state["status"] == "complete"
        assert state["record"]["score"] == 100
        assert state["record"]["mode"] == "quiz"
        assert all(r["is_correct"] for r in state["review"])
        assert client.post(f"/quiz/sessions/{sid}/finish").json()["status"] == "complete"
        assert client.get("/sessions/recent").json()["total"] == 1
        assert [client.get(f"/flashcards/{i}").json()["review_count"] for i in ids] == [0] * 4

    def test_finish_early_and_tick(self, client):
        _add(client, 3)
        sid = client.post("/quiz/sessions", json={}).json()["session_id"]
        tick = client.post(f"/quiz/sessions/{sid}/tick").json()
        assert tick["status"] == "in_progress"
        state = client.post(f"/quiz/sessions/{sid}/finish").json()
        assert state["record"]["score"] == 0
        assert client.post(f"/quiz/sessions/{sid}/finish").status_code == 200
        assert client.get("/sessions/recent").json()["total"] == 1

    def test_abandon(self, client):
        _add(client, 3)
        sid = client.post("/quiz/sessions", json={}).json()["session_id"]
        assert client.delete(f"/quiz/sessions/{sid}").json()["status"] == "abandoned"
        assert client.get(f"/quiz/sessions/{sid}").status_code == 404
        assert client.get("/sessions/recent").json()["total"] == 0

    def test_unknown_session(self, client):
        assert client.post("/quiz/sessions/nope/finish").status_code == 404
