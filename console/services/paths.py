"""
Navigation targets computed from the current console pathname.

These are total functions: they always return a root-relative path and
never raise, so header and row buttons can call them blindly.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

ROOT = "/"
ADD_SEGMENT = "add"


def _segments(pathname: Optional[str]) -> list[str]:
    if not pathname:
        return []
    return [s for s in pathname.split("/") if s]


def _join(segments: list[str]) -> str:
    return ROOT + "/".join(segments)


def parent_path(pathname: Optional[str]) -> str:
    """Strip the last path segment. The root is its own parent."""
    return _join(_segments(pathname)[:-1])


def add_path(pathname: Optional[str]) -> str:
    """Path of the ADD screen for the list at `pathname`."""
    return _join(_segments(pathname) + [ADD_SEGMENT])


def view_path(pathname: Optional[str], datum: Optional[Mapping[str, Any]], key: str = "slug") -> str:
    """
    Path of the VIEW screen for `datum`, one segment below the list.

    A datum without an identifying value has no view; the list path is
    returned unchanged.
    """
    segments = _segments(pathname)
    slug = datum.get(key) if isinstance(datum, Mapping) else None
    if slug is None or str(slug).strip("/") == "":
        return _join(segments)
    return _join(segments + [str(slug).strip("/")])
