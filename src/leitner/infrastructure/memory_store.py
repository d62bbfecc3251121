"""
In-memory study state.

Each instance owns its own buckets, history and day counter, so separate
instances (per test, per user) never share state. State resets when the
process exits.
"""

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from leitner.domain.errors import InvalidBucketError
from leitner.domain.models import BucketMap, Flashcard, PracticeRecord
from leitner.domain.ports import StudyStateStore

logger = logging.getLogger(__name__)


class InMemoryStudyStore(StudyStateStore):
    """
    Process-local StudyStateStore guarded by a re-entrant lock.

    Seed cards, if any, start in bucket 0.
    """

    def __init__(self, seed_cards: Iterable[Flashcard] = (), start_day: int = 0):
        if start_day < 0:
            raise ValueError(f"start_day must be non-negative, got {start_day}")

        self._lock = threading.RLock()
        self._buckets: BucketMap = {0: set(seed_cards)}
        self._history: list[PracticeRecord] = []
        self._day = start_day

        logger.info(f"In-memory state initialized with {len(self._buckets[0])} cards.")

    @contextmanager
    def transaction(self) -> Iterator["InMemoryStudyStore"]:
        with self._lock:
            yield self

    def get_buckets(self) -> BucketMap:
        with self._lock:
            return dict(self._buckets)

    def set_buckets(self, buckets: BucketMap) -> None:
        with self._lock:
            self._buckets = dict(buckets)

    def get_history(self) -> list[PracticeRecord]:
        with self._lock:
            return list(self._history)

    def add_history_record(self, record: PracticeRecord) -> None:
        with self._lock:
            self._history.append(record)

    def get_current_day(self) -> int:
        with self._lock:
            return self._day

    def increment_day(self) -> int:
        with self._lock:
            self._day += 1
            return self._day

    def find_card(self, front: str, back: str) -> Flashcard | None:
        with self._lock:
            for cards in self._buckets.values():
                for card in cards:
                    if card.content_key == (front, back):
                        return card
        return None

    def find_card_bucket(self, card: Flashcard) -> int | None:
        with self._lock:
            for bucket, cards in self._buckets.items():
                if card in cards:
                    return bucket
        return None

    def add_card(self, card: Flashcard, bucket: int = 0) -> None:
        if bucket < 0:
            raise InvalidBucketError(f"Bucket numbers must be >= 0, got {bucket}")
        with self._lock:
            # Copy the target set so snapshots handed out earlier stay unchanged
            cards = set(self._buckets.get(bucket, set()))
            cards.add(card)
            self._buckets = {**self._buckets, bucket: cards}

    def close(self) -> None:
        with self._lock:
            self._buckets = {}
            self._history = []
            self._day = 0
        logger.info("In-memory state cleared.")
