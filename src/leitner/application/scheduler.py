"""
Modified-Leitner scheduler.

Pure functions over bucket state passed in by the caller:
1. Convert a sparse bucket mapping into a dense list of sets
2. Select the cards due on a given day
3. Move a card between buckets after a trial
4. Aggregate progress statistics from buckets and history

Nothing here owns state or performs I/O. Every function returns new values
and leaves its inputs untouched.
"""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from leitner.domain.constants import (
    EASY_WEIGHT,
    HARD_WEIGHT,
    MAX_BUCKET,
    MIN_BUCKET,
    SUCCESS_RATE_PLACES,
)
from leitner.domain.errors import (
    CardNotFoundError,
    HistoryIntegrityError,
    InvalidBucketError,
    MissingHintError,
)
from leitner.domain.models import (
    AnswerDifficulty,
    BucketMap,
    BucketRange,
    BucketSets,
    Flashcard,
    PracticeRecord,
    ProgressStats,
)

logger = logging.getLogger(__name__)


def to_bucket_sets(buckets: BucketMap) -> BucketSets:
    """
    Transform a bucket mapping into a list where index i holds bucket i.

    Holes in the mapping become empty sets. An empty mapping yields an empty
    list. Sets present in the mapping are shared, not copied.

    Raises:
        InvalidBucketError: if a bucket number is negative.
    """
    if not buckets:
        return []

    _check_bucket_numbers(buckets)
    highest = max(buckets)
    return [buckets[i] if i in buckets else set() for i in range(highest + 1)]


def get_bucket_range(bucket_sets: BucketSets) -> BucketRange | None:
    """
    Find the lowest and highest buckets that contain cards.

    Returns None when every bucket is empty.
    """
    populated = [i for i, cards in enumerate(bucket_sets) if cards]
    if not populated:
        return None
    return BucketRange(min_bucket=populated[0], max_bucket=populated[-1])


def review_interval(bucket: int) -> int:
    """Days between reviews of a bucket (bucket 0 is reviewed daily)."""
    if bucket < MIN_BUCKET:
        raise InvalidBucketError(f"Bucket numbers must be >= {MIN_BUCKET}, got {bucket}")
    return 1 if bucket == 0 else 2**bucket


def is_bucket_due(bucket: int, day: int) -> bool:
    """Whether a bucket is reviewed on the given day."""
    return day % review_interval(bucket) == 0


def practice(bucket_sets: BucketSets, day: int) -> set[Flashcard]:
    """
    Select the cards to practice on `day`.

    Bucket 0 is due every day. Bucket b >= 1 is due when day % 2**b == 0,
    so on day 0 every populated bucket is due.

    Args:
        bucket_sets: Dense list-of-sets bucket representation.
        day: Current day number, starting from 0.

    Returns:
        A new set with the union of all due buckets.
    """
    if day < 0:
        raise ValueError(f"Day must be non-negative, got {day}")

    due: set[Flashcard] = set()
    for bucket, cards in enumerate(bucket_sets):
        if cards and is_bucket_due(bucket, day):
            due.update(cards)
    return due


def next_bucket(current: int, difficulty: AnswerDifficulty) -> int:
    """
    Compute the bucket a card moves to after a trial.

    Wrong resets to bucket 0, Hard keeps the bucket, Easy promotes by one
    up to MAX_BUCKET.
    """
    if difficulty == AnswerDifficulty.WRONG:
        return MIN_BUCKET
    if difficulty == AnswerDifficulty.HARD:
        return current
    return min(current + 1, MAX_BUCKET)


def find_bucket(buckets: BucketMap, card: Flashcard) -> int | None:
    """Return the bucket number holding `card`, or None."""
    for bucket, cards in buckets.items():
        if card in cards:
            return bucket
    return None


def update(
    buckets: BucketMap,
    card: Flashcard,
    difficulty: AnswerDifficulty,
    *,
    strict: bool = False,
) -> BucketMap:
    """
    Move a card to its next bucket after a practice trial.

    The outer mapping and every inner set are copied; the input is never
    modified. All buckets of the input survive in the output, even if empty.

    Args:
        buckets: Current bucket mapping.
        card: The practiced card.
        difficulty: How the trial went.
        strict: Raise instead of assuming bucket 0 when the card is absent.

    Returns:
        A new, independent bucket mapping.

    Raises:
        CardNotFoundError: if `strict` and the card is in no bucket.
    """
    difficulty = AnswerDifficulty.parse(difficulty)
    current = find_bucket(buckets, card)
    if current is None:
        if strict:
            raise CardNotFoundError(f"Card {card.card_id} is not in any bucket")
        logger.warning(f"Card {card.card_id} not found in any bucket; assuming bucket 0")
        current = MIN_BUCKET

    new_buckets: BucketMap = {bucket: set(cards) for bucket, cards in buckets.items()}
    new_buckets.setdefault(current, set()).discard(card)

    target = next_bucket(current, difficulty)
    new_buckets.setdefault(target, set()).add(card)

    logger.debug(f"Card {card.card_id} moved from bucket {current} to {target}")
    return new_buckets


def get_hint(card: Flashcard) -> str:
    """
    Return the card's hint, which may be an empty string.

    Raises:
        MissingHintError: if the card has no hint at all.
    """
    if card.hint is None:
        raise MissingHintError(f"Card {card.card_id} has no hint")
    return card.hint


def compute_progress(buckets: BucketMap, history: Iterable[PracticeRecord]) -> ProgressStats:
    """
    Compute learning progress from the bucket state and practice history.

    The success rate weights Easy trials 1 and Hard trials 2; Wrong trials
    are left out entirely. With no weighted trials the rate is 0.

    Raises:
        HistoryIntegrityError: if a record's card is not in any bucket.
    """
    all_cards: set[Flashcard] = set()
    cards_in_buckets: dict[int, int] = {}
    for bucket, cards in buckets.items():
        cards_in_buckets[bucket] = len(cards)
        all_cards.update(cards)
    total_cards = sum(cards_in_buckets.values())

    history = list(history)
    for record in history:
        if record.card not in all_cards:
            raise HistoryIntegrityError(
                f"Practice record for card {record.card.card_id} "
                f"({record.card.front!r}) not found in any bucket"
            )

    weighted_correct = 0
    weighted_total = 0
    for record in history:
        weight = _difficulty_weight(record.difficulty)
        if weight is None:
            continue
        weighted_total += weight
        if record.is_correct:
            weighted_correct += weight

    return ProgressStats(
        total_cards=total_cards,
        cards_in_buckets=cards_in_buckets,
        success_rate=_round_rate(weighted_correct, weighted_total),
    )


def _difficulty_weight(difficulty: AnswerDifficulty) -> int | None:
    if difficulty == AnswerDifficulty.EASY:
        return EASY_WEIGHT
    if difficulty == AnswerDifficulty.HARD:
        return HARD_WEIGHT
    return None


def _round_rate(numerator: int, denominator: int) -> float:
    """Half-up rounding of numerator/denominator; 0.0 when denominator is 0."""
    if denominator == 0:
        return 0.0
    quantum = Decimal(1).scaleb(-SUCCESS_RATE_PLACES)
    rate = (Decimal(numerator) / Decimal(denominator)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rate)


def _check_bucket_numbers(buckets: BucketMap) -> None:
    for bucket in buckets:
        if bucket < MIN_BUCKET:
            raise InvalidBucketError(
                f"Bucket numbers must be >= {MIN_BUCKET}, got {bucket}"
            )
