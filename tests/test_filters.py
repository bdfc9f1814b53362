"""Blocked-keyword filtering of normalized metas."""

from __future__ import annotations

from app.filters import filter_blocked, is_blocked
from app.models import MetaItem


def _meta(name: str, description: str = "") -> MetaItem:
    return MetaItem(id="tt0000001", type="series", name=name, description=description)


def test_blocked_name_is_excluded():
    assert is_blocked(_meta("Ullu Originals"), "ullu")


def test_blocked_description_is_case_insensitive():
    assert is_blocked(_meta("Night Shift", "Streaming now on ULLU"), "ullu")


def test_filter_keeps_order_of_clean_items():
    metas = [
        _meta("First"),
        _meta("Ullu Originals"),
        _meta("Second", "A drama about family"),
        _meta("Third", "exclusive on ullu app"),
    ]

    assert [meta.name for meta in filter_blocked(metas, "ullu")] == ["First", "Second"]


def test_empty_keyword_blocks_nothing():
    assert not is_blocked(_meta("Ullu Originals"), "")
