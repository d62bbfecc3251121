"""
Ports (interfaces) for study state.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from .models import BucketMap, Flashcard, PracticeRecord


class StudyStateStore(ABC):
    """
    Port for the authoritative bucket mapping, practice history and day counter.

    Implementations:
        - InMemoryStudyStore: Process-local state guarded by a lock.
    """

    @abstractmethod
    def get_buckets(self) -> BucketMap:
        """Return the current bucket mapping."""

    @abstractmethod
    def set_buckets(self, buckets: BucketMap) -> None:
        """Replace the current bucket mapping."""

    @abstractmethod
    def get_history(self) -> list[PracticeRecord]:
        """Return the practice history, oldest first."""

    @abstractmethod
    def add_history_record(self, record: PracticeRecord) -> None:
        """Append a record to the practice history."""

    @abstractmethod
    def get_current_day(self) -> int:
        """Return the current simulated day."""

    @abstractmethod
    def increment_day(self) -> int:
        """Advance the day by one and return the new value."""

    @abstractmethod
    def find_card(self, front: str, back: str) -> Flashcard | None:
        """Look a card up by its content, or return None."""

    @abstractmethod
    def find_card_bucket(self, card: Flashcard) -> int | None:
        """Return the bucket holding the card, or None."""

    @abstractmethod
    def add_card(self, card: Flashcard, bucket: int = 0) -> None:
        """Place a new card into a bucket."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """
        Serialize a read-modify-write sequence.

        Everything executed inside the returned context sees and writes a
        consistent state with respect to other callers of the same store.
        """

    def close(self) -> None:
        """Release resources held by the store."""
