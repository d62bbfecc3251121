"""
Domain models for the Leitner scheduler.

These are pure data structures with no I/O. Card identity is the surrogate
``card_id``; content fields never take part in equality or hashing.
"""

import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from ulid import ULID

from .errors import InvalidDifficultyError


def generate_card_id() -> str:
    """Generate a stable card ID using ULID."""
    return f"card_{ULID()}"


class AnswerDifficulty(IntEnum):
    """Self-assessed outcome of a single practice trial."""

    WRONG = 0
    HARD = 1
    EASY = 2

    @classmethod
    def parse(cls, value: Any) -> "AnswerDifficulty":
        """
        Coerce an external value (int or name) into a difficulty.

        Raises:
            InvalidDifficultyError: if the value does not name a difficulty.
        """
        if isinstance(value, cls):
            return value
        # bool is an int subclass; True/False are not difficulties
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            name = value.strip().upper()
            if name in cls.__members__:
                return cls[name]
            # ASCII digits only; isdigit() also accepts superscripts int() rejects
            if name.isascii() and name.isdecimal():
                return cls.parse(int(name))
        raise InvalidDifficultyError(f"Invalid difficulty level: {value!r}")


@dataclass(frozen=True)
class Flashcard:
    """
    A single flashcard.

    Attributes:
        front: Prompt text.
        back: Answer text.
        hint: Optional hint. None means "no hint"; an empty string is a valid hint.
        tags: Tag strings, insertion order preserved, duplicates collapsed.
        card_id: Surrogate key used for equality and hashing.
    """

    front: str = field(compare=False)
    back: str = field(compare=False)
    hint: str | None = field(default=None, compare=False)
    tags: tuple[str, ...] = field(default=(), compare=False)
    card_id: str = field(default_factory=generate_card_id)

    def __post_init__(self):
        object.__setattr__(self, "tags", tuple(dict.fromkeys(self.tags)))

    @property
    def content_key(self) -> tuple[str, str]:
        """The (front, back) pair used for lookups by content."""
        return (self.front, self.back)

    def to_dict(self) -> dict:
        return {
            "id": self.card_id,
            "front": self.front,
            "back": self.back,
            "hint": self.hint,
            "tags": list(self.tags),
        }


# Sparse bucket-number -> cards mapping, and its dense list view.
BucketMap = dict[int, set[Flashcard]]
BucketSets = list[set[Flashcard]]


@dataclass(frozen=True)
class PracticeRecord:
    """
    One immutable entry of the practice history.

    Attributes:
        card: The card that was practiced.
        difficulty: Reported difficulty.
        is_correct: Whether the answer was judged correct.
        previous_bucket: Bucket before the trial.
        new_bucket: Bucket after the trial.
        timestamp: Epoch milliseconds of the trial.
    """

    card: Flashcard
    difficulty: AnswerDifficulty
    is_correct: bool
    previous_bucket: int
    new_bucket: int
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))


@dataclass(frozen=True)
class ProgressStats:
    """Summary of learning progress."""

    total_cards: int
    cards_in_buckets: dict[int, int]
    success_rate: float


@dataclass(frozen=True)
class BucketRange:
    """Lowest and highest populated bucket numbers."""

    min_bucket: int
    max_bucket: int
