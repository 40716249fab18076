"""Value objects stored as encoded composites on a release."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from datetime import date
    from decimal import Decimal

    from kollector.domain.model.primitives import LookupId


def storage_filename(value: str | None) -> str | None:
    """Reduce an image URL or path to its storage-relative filename."""

    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    if "://" in text:
        text = urlsplit(text).path
    filename = text.rstrip("/").rsplit("/", 1)[-1]
    return filename or None


@dataclass(frozen=True, slots=True)
class PurchaseInfo:
    store_id: LookupId | None = None
    price: Decimal | None = None
    currency: str | None = None
    purchased_on: date | None = None
    notes: str | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.store_id is None
            and self.price is None
            and self.currency is None
            and self.purchased_on is None
            and self.notes is None
        )


@dataclass(frozen=True, slots=True)
class ReleaseImages:
    """Filenames only; URLs are built by the presentation side."""

    cover_front: str | None = None
    cover_back: str | None = None
    thumbnail: str | None = None

    @classmethod
    def from_values(
        cls,
        *,
        cover_front: str | None = None,
        cover_back: str | None = None,
        thumbnail: str | None = None,
    ) -> ReleaseImages:
        return cls(
            cover_front=storage_filename(cover_front),
            cover_back=storage_filename(cover_back),
            thumbnail=storage_filename(thumbnail),
        )

    @property
    def is_empty(self) -> bool:
        return self.cover_front is None and self.cover_back is None and self.thumbnail is None

    @property
    def preferred_cover(self) -> str | None:
        return self.cover_front or self.thumbnail


@dataclass(frozen=True, slots=True)
class ReleaseLink:
    url: str
    link_type: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class Track:
    title: str
    year: int | None = None
    artists: tuple[str, ...] = ()
    genres: tuple[str, ...] = ()
    live: bool = False
    duration_seconds: int | None = None
    index: int = 0


@dataclass(frozen=True, slots=True)
class Medium:
    name: str | None = None
    tracks: tuple[Track, ...] = ()
