"""
Canon/Filler tag handling.

An episode carries at most one of the four status labels. Labels are always
removed before a new one is appended, so re-labeling never stacks them.
"""

from typing import Iterable, List, Optional

from .constants import FILLER_TAGS
from .models import FillerStatus


def has_status_tag(tags: Optional[Iterable[str]]) -> bool:
    """True if any status label is already present (exact match, as the host stores them)."""
    return any(t in FILLER_TAGS for t in (tags or ()))


def current_status(tags: Optional[Iterable[str]]) -> Optional[FillerStatus]:
    for t in tags or ():
        if t in FILLER_TAGS:
            return FillerStatus(t)
    return None


def strip_status_tags(tags: Optional[Iterable[str]]) -> List[str]:
    return [t for t in (tags or ()) if t not in FILLER_TAGS]


def reconcile_tags(tags: Optional[Iterable[str]], status: Optional[FillerStatus]) -> List[str]:
    """
    Returns a new tag list with every status label removed, `status` appended
    (when given) and duplicates dropped. Non-status tags keep their order.
    """
    updated = strip_status_tags(tags)
    if status is not None:
        updated.append(status.value)

    # Dedup preserving order
    seen = set()
    unique_tags = []
    for t in updated:
        if t not in seen:
            seen.add(t)
            unique_tags.append(t)
    return unique_tags
