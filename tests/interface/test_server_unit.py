from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from leitner.application.config import AppConfig
from leitner.application.service import StudyService
from leitner.consts import VERSION
from leitner.domain.errors import HistoryIntegrityError
from leitner.infrastructure.memory_store import InMemoryStudyStore
from leitner.server import create_app


@pytest.fixture
def service():
    return StudyService(InMemoryStudyStore())


@pytest.fixture
def client(service):
    return TestClient(create_app(service=service, config=AppConfig()))


def _add(client, front="What is H2O?", back="Water", **extra):
    return client.post("/api/cards", json={"front": front, "back": back, **extra})


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_get_version(client):
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": VERSION}


def test_default_app_has_demo_deck():
    client = TestClient(create_app(config=AppConfig()))
    response = client.get("/api/cards")
    assert response.status_code == 200
    assert len(response.json()) == 4


# --- Cards ---


def test_add_card(client, service):
    response = _add(client, hint="City of Light", tags=["geography", "europe"])

    assert response.status_code == 201
    card = response.json()["card"]
    assert card["id"].startswith("card_")
    assert card["front"] == "What is H2O?"
    assert card["hint"] == "City of Light"
    assert card["tags"] == ["geography", "europe"]
    assert card["bucket"] == 0
    assert service.store.find_card_bucket(service.store.find_card("What is H2O?", "Water")) == 0


def test_add_card_optional_fields(client):
    card = _add(client).json()["card"]
    assert card["hint"] is None
    assert card["tags"] == []


def test_add_card_tag_string(client):
    card = _add(client, tags="science, chemistry ,science").json()["card"]
    assert card["tags"] == ["science", "chemistry"]


@pytest.mark.parametrize("body", [{"back": "Something"}, {"front": "Something"}, {}])
def test_add_card_missing_fields(client, body):
    response = client.post("/api/cards", json=body)
    assert response.status_code == 400


def test_add_card_bad_tags(client):
    assert _add(client, tags=42).status_code == 400


def test_add_card_duplicate(client):
    _add(client)
    assert _add(client).status_code == 409


def test_list_cards_and_tags(client):
    _add(client, front="B", back="b", tags=["x", "y"])
    _add(client, front="A", back="a", tags=["y", "z"])

    cards = client.get("/api/cards").json()
    assert [c["front"] for c in cards] == ["A", "B"]
    assert all(c["bucket"] == 0 for c in cards)

    assert client.get("/api/tags").json() == ["y", "z", "x"]


# --- Practice / update ---


def test_practice_and_update_flow(client):
    _add(client, front="Q", back="A")

    practice = client.get("/api/practice").json()
    assert practice["day"] == 0
    assert [c["front"] for c in practice["cards"]] == ["Q"]

    response = client.post(
        "/api/update", json={"cardFront": "Q", "cardBack": "A", "difficulty": 2}
    )
    assert response.status_code == 200
    assert response.json() == {
        "message": "Card updated successfully",
        "previousBucket": 0,
        "newBucket": 1,
    }

    assert client.post("/api/day/next").json() == {"currentDay": 1}
    assert client.get("/api/practice").json() == {"cards": [], "day": 1}

    client.post("/api/day/next")
    assert len(client.get("/api/practice").json()["cards"]) == 1


def test_update_invalid_difficulty(client):
    _add(client, front="Q", back="A")
    response = client.post(
        "/api/update", json={"cardFront": "Q", "cardBack": "A", "difficulty": 9}
    )
    assert response.status_code == 400


def test_update_unknown_card(client):
    response = client.post(
        "/api/update", json={"cardFront": "nope", "cardBack": "nope", "difficulty": 1}
    )
    assert response.status_code == 404


def test_update_difficulty_by_name(client):
    _add(client, front="Q", back="A")
    response = client.post(
        "/api/update", json={"cardFront": "Q", "cardBack": "A", "difficulty": "wrong"}
    )
    assert response.status_code == 200
    assert response.json()["newBucket"] == 0


@pytest.mark.parametrize("difficulty", [True, False, 1.0, "²", None])
def test_update_rejects_non_integer_difficulty(client, difficulty):
    _add(client, front="Q", back="A")
    response = client.post(
        "/api/update", json={"cardFront": "Q", "cardBack": "A", "difficulty": difficulty}
    )
    assert response.status_code == 400
    assert client.get("/api/progress").json()["successRate"] == 0


# --- Hint ---


def test_hint(client):
    _add(client, front="Q", back="A", hint="")
    response = client.get("/api/hint", params={"cardFront": "Q", "cardBack": "A"})
    assert response.status_code == 200
    assert response.json() == {"hint": ""}


def test_hint_missing_params(client):
    response = client.get("/api/hint", params={"cardFront": "Q"})
    assert response.status_code == 400
    assert "Missing cardFront or cardBack" in response.json()["detail"]


def test_hint_not_defined(client):
    _add(client, front="Q", back="A")
    response = client.get("/api/hint", params={"cardFront": "Q", "cardBack": "A"})
    assert response.status_code == 404


def test_hint_unknown_card(client):
    response = client.get("/api/hint", params={"cardFront": "Q", "cardBack": "A"})
    assert response.status_code == 404


# --- Progress ---


def test_progress(client):
    _add(client, front="Q", back="A")
    _add(client, front="R", back="B")
    client.post("/api/update", json={"cardFront": "Q", "cardBack": "A", "difficulty": 2})
    client.post("/api/update", json={"cardFront": "R", "cardBack": "B", "difficulty": 0})

    response = client.get("/api/progress")

    assert response.status_code == 200
    assert response.json() == {
        "totalCards": 2,
        "cardsInBuckets": {"0": 1, "1": 1},
        "successRate": 1.0,
    }


def test_progress_empty_history(client):
    assert client.get("/api/progress").json()["successRate"] == 0


def test_progress_failure_is_500():
    service = MagicMock()
    service.progress.side_effect = HistoryIntegrityError("stale record")
    client = TestClient(create_app(service=service, config=AppConfig()))

    response = client.get("/api/progress")

    assert response.status_code == 500
    assert response.json()["detail"] == "Error computing progress"


# --- Lifespan ---


def test_lifespan_closes_store(service):
    app = create_app(service=service, config=AppConfig())
    card = service.add_card("Q", "A")
    with TestClient(app) as client:
        assert client.get("/api/cards").status_code == 200
    assert card not in service.store.get_buckets().get(0, set())


def test_bucket_overview(client):
    _add(client, front="Q", back="A")
    client.post("/api/update", json={"cardFront": "Q", "cardBack": "A", "difficulty": 2})

    assert client.get("/api/buckets").json() == {
        "day": 0,
        "minBucket": 1,
        "maxBucket": 1,
        "counts": {"0": 0, "1": 1},
    }
