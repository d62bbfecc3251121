# Application Package
from .scheduler import (
    compute_progress,
    get_bucket_range,
    get_hint,
    practice,
    to_bucket_sets,
    update,
)
from .service import StudyService
from .tags import process_tags

__all__ = [
    "to_bucket_sets",
    "get_bucket_range",
    "practice",
    "update",
    "get_hint",
    "compute_progress",
    "process_tags",
    "StudyService",
]
