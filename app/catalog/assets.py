# app/catalog/assets.py
from collections.abc import Iterable
from typing import Any

ACCEPTED_URL_PREFIXES: tuple[str, ...] = ("http://", "https://")


def _as_asset_url(entry: Any, prefixes: tuple[str, ...]) -> str | None:
    if isinstance(entry, str):
        return entry if entry.startswith(prefixes) else None

    # Client-side preview objects: {"preview": "https://...", "file": ...}
    if isinstance(entry, dict):
        preview = entry.get("preview")
    else:
        preview = getattr(entry, "preview", None)

    if isinstance(preview, str) and preview.startswith(prefixes):
        return preview
    return None


def sanitize_asset_list(
    entries: Iterable[Any] | None,
    prefixes: tuple[str, ...] = ACCEPTED_URL_PREFIXES,
) -> list[str]:
    """
    Keep only usable image references (absolute URLs).

    - URL strings are kept verbatim.
    - Objects exposing a URL in `preview` contribute that URL.
    - Anything else (blob previews, empty dicts, None, ...) is dropped.

    Order of surviving entries is preserved; duplicates are NOT removed
    here (see dedupe_assets).
    """
    if not entries:
        return []
    urls: list[str] = []
    for entry in entries:
        url = _as_asset_url(entry, prefixes)
        if url is not None:
            urls.append(url)
    return urls


def first_asset(entry: Any, prefixes: tuple[str, ...] = ACCEPTED_URL_PREFIXES) -> str | None:
    """Sanitize a single reference (e.g. a main image field)."""
    return _as_asset_url(entry, prefixes)


def dedupe_assets(*lists: Iterable[str]) -> list[str]:
    """Order-preserving union of several URL lists."""
    # dict keeps first-seen order
    return list(dict.fromkeys(url for urls in lists for url in urls))
