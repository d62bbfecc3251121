"""
Error taxonomy for the scheduler and the study service.

All errors derive from LeitnerError so callers can catch the family at once.
"""


class LeitnerError(Exception):
    """Base class for every scheduler and study-service failure."""


class InvalidBucketError(LeitnerError, ValueError):
    """A bucket number is negative or otherwise unusable."""


class CardNotFoundError(LeitnerError, LookupError):
    """A card could not be located in the current bucket state."""


class MissingHintError(LeitnerError, LookupError):
    """A hint was requested for a card that has none defined."""


class HistoryIntegrityError(LeitnerError):
    """A practice record refers to a card absent from every bucket."""


class InvalidDifficultyError(LeitnerError, ValueError):
    """An externally supplied difficulty is not one of Wrong/Hard/Easy."""


class InvalidCardError(LeitnerError, ValueError):
    """Card data failed validation (e.g. empty front or back)."""


class DuplicateCardError(LeitnerError):
    """A card with the same front and back already exists."""
