"""Translate Stremio ``skip`` offsets into provider pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence


def parse_skip(value: object) -> int:
    """Coerce a Stremio ``skip`` extra into a non-negative integer."""

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    try:
        parsed = int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(parsed, 0)


@dataclass(slots=True, frozen=True)
class PageWindow:
    """Position of a consumer page inside the provider's pagination."""

    skip: int
    page_size: int

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be positive")
        if self.skip < 0:
            raise ValueError("skip must not be negative")

    @property
    def page(self) -> int:
        """1-based provider page containing the first requested item."""

        return self.skip // self.page_size + 1

    @property
    def offset(self) -> int:
        return self.skip % self.page_size

    def slice(self, items: Sequence[Any]) -> list[Any]:
        return list(items[self.offset : self.offset + self.page_size])
