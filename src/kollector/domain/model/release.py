"""The release aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from kollector.domain.model.primitives import name_key

if TYPE_CHECKING:
    from datetime import date

    from kollector.domain.model.primitives import (
        CatalogNumber,
        ExternalRef,
        LookupId,
        ReleaseId,
        TenantId,
    )
    from kollector.domain.model.values import Medium, PurchaseInfo, ReleaseImages, ReleaseLink


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class Release:
    """A cataloged release owned by one tenant.

    Artist and genre relations are ordered lookup-ID tuples and the nested
    structures are immutable value objects; the storage layer encodes them as
    composite columns. Updates replace whole values rather than mutating them.
    """

    tenant_id: TenantId
    title: str
    id: ReleaseId | None = None

    release_date: date | None = None
    original_release_date: date | None = None
    live: bool = False
    catalog_number: CatalogNumber | None = None
    upc: str | None = None
    duration_seconds: int | None = None
    notes: str | None = None
    external_ref: ExternalRef | None = None

    artist_ids: tuple[LookupId, ...] = ()
    genre_ids: tuple[LookupId, ...] = ()
    label_id: LookupId | None = None
    country_id: LookupId | None = None
    format_id: LookupId | None = None
    packaging_id: LookupId | None = None

    purchase_info: PurchaseInfo | None = None
    images: ReleaseImages | None = None
    links: tuple[ReleaseLink, ...] = ()
    media: tuple[Medium, ...] = ()

    created_at: datetime | None = None
    updated_at: datetime | None = None

    _catalog_key: str | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.sync_catalog_key()

    @property
    def catalog_key(self) -> str | None:
        """Comparison key of ``catalog_number``, ignoring case and surrounding space."""
        return self._catalog_key

    def sync_catalog_key(self) -> None:
        key = name_key(self.catalog_number) if self.catalog_number else ""
        self._catalog_key = key or None

    def touch(self, *, now: datetime | None = None) -> None:
        moment = now or utcnow()
        if self.created_at is None:
            self.created_at = moment
        self.updated_at = moment

    def shares_artist_with(self, artist_ids: set[LookupId]) -> bool:
        return not artist_ids.isdisjoint(self.artist_ids)
