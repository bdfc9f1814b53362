"""Utility helpers for the Mega Catalog service."""

from __future__ import annotations

import re
import unicodedata


def slugify(value: str) -> str:
    """Return a URL-friendly slug."""

    value = unicodedata.normalize("NFKD", value)
    value = value.encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^a-zA-Z0-9]+", "-", value)
    value = value.strip("-")
    value = re.sub(r"-+", "-", value)
    return value.lower() or "untitled"


def fallback_meta_id(provider: str, native_id: object, *, title: str) -> str:
    """Return a provider-qualified identifier such as ``tmdb:603``.

    Records without any native id fall back to a slug of their title so the
    identifier is never empty.
    """

    if native_id is not None and str(native_id).strip():
        return f"{provider}:{str(native_id).strip()}"
    return f"{provider}:{slugify(title or '')}"


def build_image_url(path: object, base_url: str, size: str) -> str | None:
    """Interpolate a TMDB relative image path into an absolute URL."""

    if not isinstance(path, str) or not path:
        return None
    if path.startswith("http"):
        return path
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base_url}/{size}{path}"
