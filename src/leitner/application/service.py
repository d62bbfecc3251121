"""
Study Service — Application layer orchestrator.

Coordinates the state store and the pure scheduler functions: reads a
snapshot, asks the scheduler for a result, writes the result back.
"""

import logging
from typing import Any

from leitner.application import scheduler
from leitner.application.config import AppConfig
from leitner.application.tags import process_tags
from leitner.domain.constants import DEMO_CARDS
from leitner.domain.errors import CardNotFoundError, DuplicateCardError, InvalidCardError
from leitner.domain.models import (
    AnswerDifficulty,
    Flashcard,
    PracticeRecord,
    ProgressStats,
)
from leitner.domain.ports import StudyStateStore

logger = logging.getLogger(__name__)


def demo_cards() -> list[Flashcard]:
    """Build fresh instances of the demo deck."""
    return [
        Flashcard(front=front, back=back, hint=hint, tags=tuple(tags))
        for front, back, hint, tags in DEMO_CARDS
    ]


class StudyService:
    """
    Application service for a single learner's study session.

    Follows Dependency Inversion: depends on the StudyStateStore abstraction,
    not a concrete adapter.
    """

    def __init__(self, store: StudyStateStore, config: AppConfig | None = None):
        """
        Args:
            store: The state holder (port) for buckets, history and day.
            config: Optional configuration; defaults are used if not provided.
        """
        self._store = store
        self._config = config or AppConfig()

    @property
    def store(self) -> StudyStateStore:
        return self._store

    def due_cards(self) -> tuple[list[Flashcard], int]:
        """Return the cards due today, ordered by content, and the current day."""
        with self._store.transaction():
            day = self._store.get_current_day()
            bucket_sets = scheduler.to_bucket_sets(self._store.get_buckets())

        due = scheduler.practice(bucket_sets, day)
        cards = sorted(due, key=lambda c: (c.front, c.back, c.card_id))
        logger.info(f"Day {day}: Practice {len(cards)} cards")
        return cards, day

    def submit_answer(self, front: str, back: str, difficulty: Any) -> PracticeRecord:
        """
        Record a trial for the card identified by its content.

        Raises:
            InvalidDifficultyError: if the difficulty is not Wrong/Hard/Easy.
            CardNotFoundError: if no card has this front and back.
        """
        difficulty = AnswerDifficulty.parse(difficulty)

        with self._store.transaction():
            card = self._require_card(front, back)
            buckets = self._store.get_buckets()
            previous = scheduler.find_bucket(buckets, card)

            updated = scheduler.update(
                buckets, card, difficulty, strict=self._config.strict_updates
            )
            self._store.set_buckets(updated)

            record = PracticeRecord(
                card=card,
                difficulty=difficulty,
                is_correct=difficulty == AnswerDifficulty.EASY,
                previous_bucket=previous if previous is not None else -1,
                new_bucket=scheduler.find_bucket(updated, card),
            )
            self._store.add_history_record(record)

        logger.info(
            f'Updated card "{card.front}": Difficulty {difficulty.name.title()}, '
            f"New Bucket {record.new_bucket}"
        )
        return record

    def hint(self, front: str, back: str) -> str:
        """
        Return the hint of the card identified by its content.

        Raises:
            CardNotFoundError: if no card has this front and back.
            MissingHintError: if the card defines no hint.
        """
        card = self._require_card(front, back)
        hint = scheduler.get_hint(card)
        logger.info(f'Hint requested for "{card.front}": {hint}')
        return hint

    def progress(self) -> ProgressStats:
        with self._store.transaction():
            buckets = self._store.get_buckets()
            history = self._store.get_history()
        return scheduler.compute_progress(buckets, history)

    def advance_day(self) -> int:
        day = self._store.increment_day()
        logger.info(f"Advanced to Day {day}")
        return day

    def add_card(
        self,
        front: str,
        back: str,
        hint: str | None = None,
        tags: Any = None,
    ) -> Flashcard:
        """
        Add a new card to bucket 0.

        Raises:
            InvalidCardError: if front/back are empty or tags are malformed.
            DuplicateCardError: if a card with this front and back exists.
        """
        if not front or not front.strip() or not back or not back.strip():
            raise InvalidCardError("Front and back are required")
        try:
            normalized_tags = process_tags(tags)
        except TypeError as e:
            raise InvalidCardError(str(e)) from e

        card = Flashcard(front=front, back=back, hint=hint, tags=tuple(normalized_tags))
        with self._store.transaction():
            if self._store.find_card(front, back) is not None:
                raise DuplicateCardError(f'Card "{front}" / "{back}" already exists')
            self._store.add_card(card, bucket=0)

        logger.info(f'Added new card: "{front}"')
        return card

    def list_cards(self) -> list[tuple[Flashcard, int]]:
        """Return every card with its current bucket, lowest bucket first."""
        buckets = self._store.get_buckets()
        return [
            (card, bucket)
            for bucket in sorted(buckets)
            for card in sorted(buckets[bucket], key=lambda c: (c.front, c.back, c.card_id))
        ]

    def list_tags(self) -> list[str]:
        """Return the unique tags across all cards, in `list_cards` order."""
        tags: dict[str, None] = {}
        for card, _ in self.list_cards():
            tags.update(dict.fromkeys(card.tags))
        return list(tags)

    def bucket_overview(self) -> dict[str, Any]:
        """Summarize which buckets hold cards and how many."""
        with self._store.transaction():
            buckets = self._store.get_buckets()
            day = self._store.get_current_day()

        bucket_sets = scheduler.to_bucket_sets(buckets)
        bucket_range = scheduler.get_bucket_range(bucket_sets)
        return {
            "day": day,
            "min_bucket": bucket_range.min_bucket if bucket_range else None,
            "max_bucket": bucket_range.max_bucket if bucket_range else None,
            "counts": {i: len(cards) for i, cards in enumerate(bucket_sets)},
        }

    def _require_card(self, front: str, back: str) -> Flashcard:
        card = self._store.find_card(front, back)
        if card is None:
            raise CardNotFoundError(f'Card "{front}" / "{back}" not found')
        return card
