"""Post-normalization content filtering."""

from __future__ import annotations

from typing import Iterable

from .models import MetaItem


def is_blocked(meta: MetaItem, keyword: str) -> bool:
    """Return ``True`` when the title or overview mentions the blocked keyword."""

    if not keyword:
        return False
    haystack = f"{meta.name or ''} {meta.description or ''}".lower()
    return keyword.lower() in haystack


def filter_blocked(metas: Iterable[MetaItem], keyword: str) -> list[MetaItem]:
    return [meta for meta in metas if not is_blocked(meta, keyword)]
