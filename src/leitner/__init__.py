"""Leitner: a Modified-Leitner spaced-repetition scheduler and study server."""

from leitner.consts import VERSION

__version__ = VERSION
