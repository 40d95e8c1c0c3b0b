"""Page-number pagination math for offset-based listings."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


def parse_page(value: Any) -> int:
    """Coerce a ``?page=`` value to a page number of at least 1."""
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return max(page, 1)


@dataclass(frozen=True)
class PageWindow:
    """A page of an ordered listing.

    ``has_next_hint`` and ``has_previous_hint`` carry the backend's
    ``pageInfo`` flags; when absent the flags are computed from the total.
    """

    page: int
    per_page: int
    total_count: int
    has_next_hint: bool | None = None
    has_previous_hint: bool | None = None

    def __post_init__(self) -> None:
        if self.per_page < 1:
            raise ValueError("per_page must be positive")
        object.__setattr__(self, "page", parse_page(self.page))
        object.__setattr__(self, "total_count", max(int(self.total_count), 0))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.per_page)

    @property
    def has_next(self) -> bool:
        if self.has_next_hint is not None:
            return self.has_next_hint
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        if self.has_previous_hint is not None:
            return self.has_previous_hint
        return self.page > 1

    @property
    def showing_from(self) -> int:
        if self.total_count == 0:
            return 0
        return self.offset + 1

    @property
    def showing_to(self) -> int:
        if self.total_count == 0:
            return 0
        return min(self.page * self.per_page, self.total_count)

    def as_dict(self) -> dict[str, Any]:
        """Return the window as a JSON-friendly mapping."""
        return {
            "page": self.page,
            "per_page": self.per_page,
            "total_count": self.total_count,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_previous": self.has_previous,
            "showing_from": self.showing_from,
            "showing_to": self.showing_to,
        }
