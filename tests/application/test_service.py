"""Tests for the study service orchestration."""

import pytest

from leitner.application.config import AppConfig
from leitner.application.factory import get_study_service
from leitner.application.service import StudyService, demo_cards
from leitner.domain.errors import (
    CardNotFoundError,
    DuplicateCardError,
    HistoryIntegrityError,
    InvalidCardError,
    InvalidDifficultyError,
    MissingHintError,
)
from leitner.domain.models import AnswerDifficulty
from leitner.infrastructure.memory_store import InMemoryStudyStore


@pytest.fixture
def service():
    return StudyService(InMemoryStudyStore())


@pytest.fixture
def seeded():
    return get_study_service(AppConfig())


def test_factory_seeds_demo_deck(seeded):
    cards, day = seeded.due_cards()
    assert day == 0
    assert len(cards) == 4
    assert seeded.list_tags() == ["math", "science", "geography", "literature"]


def test_factory_without_seed():
    service = get_study_service(AppConfig(seed_demo_cards=False, start_day=5))
    assert service.due_cards() == ([], 5)


def test_demo_cards_are_fresh_instances():
    assert set(demo_cards()).isdisjoint(demo_cards())


def test_add_and_list_cards(service):
    card = service.add_card("Q1", "A1", hint="h", tags=" x, y ,x")
    assert card.tags == ("x", "y")
    assert service.list_cards() == [(card, 0)]


def test_add_card_validation(service):
    with pytest.raises(InvalidCardError):
        service.add_card("", "A")
    with pytest.raises(InvalidCardError):
        service.add_card("Q", "   ")
    with pytest.raises(InvalidCardError):
        service.add_card("Q", "A", tags=42)


def test_add_duplicate_card(service):
    service.add_card("Q", "A")
    with pytest.raises(DuplicateCardError):
        service.add_card("Q", "A")


def test_submit_answer_moves_card_and_records_history(service):
    card = service.add_card("Q", "A")

    record = service.submit_answer("Q", "A", AnswerDifficulty.EASY)

    assert record.card is card
    assert record.previous_bucket == 0
    assert record.new_bucket == 1
    assert record.is_correct is True
    assert service.list_cards() == [(card, 1)]
    assert service.store.get_history() == [record]


def test_submit_answer_wrong_is_incorrect(service):
    service.add_card("Q", "A")
    service.submit_answer("Q", "A", "easy")
    record = service.submit_answer("Q", "A", 0)
    assert record.previous_bucket == 1
    assert record.new_bucket == 0
    assert record.is_correct is False


def test_submit_answer_errors(service):
    service.add_card("Q", "A")
    with pytest.raises(InvalidDifficultyError):
        service.submit_answer("Q", "A", 7)
    with pytest.raises(CardNotFoundError):
        service.submit_answer("nope", "nope", 2)
    assert service.store.get_history() == []


def test_due_cards_follow_schedule(service):
    service.add_card("Q", "A")
    service.add_card("R", "B")
    service.submit_answer("Q", "A", 2)  # bucket 1

    service.advance_day()  # day 1: bucket 1 not due
    cards, day = service.due_cards()
    assert day == 1
    assert [c.front for c in cards] == ["R"]

    service.advance_day()  # day 2: bucket 1 due
    cards, _ = service.due_cards()
    assert [c.front for c in cards] == ["Q", "R"]


def test_hint(service):
    service.add_card("Q", "A", hint="")
    service.add_card("R", "B")
    assert service.hint("Q", "A") == ""
    with pytest.raises(MissingHintError):
        service.hint("R", "B")
    with pytest.raises(CardNotFoundError):
        service.hint("S", "C")


def test_progress(service):
    service.add_card("Q", "A")
    service.add_card("R", "B")
    service.submit_answer("Q", "A", 2)
    service.submit_answer("R", "B", 1)

    stats = service.progress()

    assert stats.total_cards == 2
    assert stats.cards_in_buckets == {0: 1, 1: 1}
    # Easy correct (1) / (Easy 1 + Hard 2)
    assert stats.success_rate == 0.33


def test_progress_detects_stale_history(service):
    service.add_card("Q", "A")
    service.submit_answer("Q", "A", 2)
    service.store.set_buckets({0: set()})
    with pytest.raises(HistoryIntegrityError):
        service.progress()


def test_bucket_overview(service):
    assert service.bucket_overview()["min_bucket"] is None
    service.add_card("Q", "A")
    service.add_card("R", "B")
    service.submit_answer("Q", "A", 2)
    overview = service.bucket_overview()
    assert overview == {"day": 0, "min_bucket": 0, "max_bucket": 1, "counts": {0: 1, 1: 1}}
