"""Query options for list calls and the pagination metadata the API returns."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from typing import Any

_EMPTY_TYPES = (str, bytes, int, float, list, tuple, dict, set, frozenset)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, _EMPTY_TYPES) and not value)


def drop_empty(data: Mapping[str, Any], keep: Iterable[str] = ()) -> dict[str, Any]:
    """Return a copy of ``data`` without empty values, except for keys in ``keep``.

    Empty means None, False, zero, or an empty string or container.
    """
    kept = set(keep)
    return {key: value for key, value in data.items() if key in kept or not _is_empty(value)}


@dataclass
class ListOptions:
    """Query parameters accepted by the paginated list calls."""

    per_page: int = 0
    cursor: str = ""
    main_ip: str = ""
    label: str = ""
    tag: str = ""
    region: str = ""
    description: str = ""

    def to_params(self) -> dict[str, Any]:
        """Return the non-empty options as query parameters, ordered by name."""
        return dict(sorted(drop_empty(asdict(self)).items()))


@dataclass
class Links:
    """Cursors pointing at the neighbouring pages of a list."""

    next: str = ""
    prev: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Links:
        return cls(next=data.get("next") or "", prev=data.get("prev") or "")


@dataclass
class Meta:
    """Pagination metadata attached to list responses."""

    total: int = 0
    links: Links | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Meta:
        links = data.get("links")
        return cls(
            total=data.get("total") or 0,
            links=Links.from_dict(links) if links is not None else None,
        )