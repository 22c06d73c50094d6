"""Tag matcher — overlap between requested tags and a country's tag sets."""

from collections.abc import Iterable


def unique_tags(tags: Iterable[str] | None) -> list[str]:
    """Drop duplicates and empty values, keeping first-seen order."""
    seen: set[str] = set()
    result = []
    for tag in tags or []:
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def matched_tags(requested: Iterable[str] | None, available: Iterable[str] | None) -> list[str]:
    """Requested tags present in the available set, in request order."""
    pool = set(available or [])
    return [tag for tag in unique_tags(requested) if tag in pool]


def overlap_ratio(requested: Iterable[str] | None, available: Iterable[str] | None) -> float:
    """Fraction of requested tags found in the available set (0 for an empty request)."""
    wanted = unique_tags(requested)
    if not wanted:
        return 0.0
    return len(matched_tags(wanted, available)) / len(wanted)


def shared_tags(a: Iterable[str] | None, b: Iterable[str] | None) -> list[str]:
    """Tags of ``a`` that also appear in ``b``."""
    return matched_tags(a, b)


def has_overlap(a: Iterable[str] | None, b: Iterable[str] | None) -> bool:
    pool = set(b or [])
    return any(tag in pool for tag in a or [])
