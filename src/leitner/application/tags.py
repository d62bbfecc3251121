"""Tag normalization for user-supplied card tags."""

from collections.abc import Iterable


def process_tags(value: str | Iterable[str] | None) -> list[str]:
    """
    Normalize a comma-separated string or a list of tags.

    Each tag is trimmed, empty entries are dropped and duplicates are removed
    keeping the first occurrence. Matching is case-sensitive.

    Examples:
        >>> process_tags(" tag1 , tag2  ,, tag1 ")
        ['tag1', 'tag2']
    """
    if not value:
        return []

    if isinstance(value, str):
        raw = value.split(",")
    elif isinstance(value, Iterable):
        raw = list(value)
        if not all(isinstance(tag, str) for tag in raw):
            raise TypeError("Tags must all be strings")
    else:
        raise TypeError("Tags must be a string or a list of strings")

    cleaned = (tag.strip() for tag in raw)
    return list(dict.fromkeys(tag for tag in cleaned if tag))
