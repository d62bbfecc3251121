# Domain Package
from .errors import (
    CardNotFoundError,
    DuplicateCardError,
    HistoryIntegrityError,
    InvalidBucketError,
    InvalidCardError,
    InvalidDifficultyError,
    LeitnerError,
    MissingHintError,
)
from .models import (
    AnswerDifficulty,
    BucketMap,
    BucketRange,
    BucketSets,
    Flashcard,
    PracticeRecord,
    ProgressStats,
)
from .ports import StudyStateStore

__all__ = [
    "AnswerDifficulty",
    "BucketMap",
    "BucketRange",
    "BucketSets",
    "Flashcard",
    "PracticeRecord",
    "ProgressStats",
    "StudyStateStore",
    "LeitnerError",
    "InvalidBucketError",
    "CardNotFoundError",
    "MissingHintError",
    "HistoryIntegrityError",
    "InvalidDifficultyError",
    "InvalidCardError",
    "DuplicateCardError",
]
