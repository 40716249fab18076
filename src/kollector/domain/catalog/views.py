"""Display-ready projections of a release."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date, datetime
    from decimal import Decimal

    from kollector.domain.catalog.resolver import LookupRef
    from kollector.domain.model import (
        ExternalRef,
        LookupId,
        Medium,
        ReleaseId,
        ReleaseLink,
        TenantId,
    )


@dataclass(frozen=True, slots=True)
class PurchaseInfoView:
    store_id: LookupId | None
    store_name: str | None
    price: Decimal | None
    currency: str
    purchased_on: date | None
    notes: str | None


@dataclass(frozen=True, slots=True)
class ImagesView:
    cover_front: str | None
    cover_back: str | None
    thumbnail: str | None


@dataclass(frozen=True, slots=True)
class ReleaseDetail:
    id: ReleaseId
    tenant_id: TenantId
    title: str
    release_date: date | None
    original_release_date: date | None
    live: bool
    catalog_number: str | None
    upc: str | None
    duration_seconds: int | None
    notes: str | None
    external_ref: ExternalRef | None
    artists: tuple[LookupRef, ...]
    genres: tuple[LookupRef, ...]
    label: LookupRef | None
    country: LookupRef | None
    format: LookupRef | None
    packaging: LookupRef | None
    purchase_info: PurchaseInfoView | None
    images: ImagesView | None
    links: tuple[ReleaseLink, ...]
    media: tuple[Medium, ...]
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True, slots=True)
class ReleaseSummary:
    id: ReleaseId
    title: str
    release_date: date | None
    artist_names: tuple[str, ...]
    genre_names: tuple[str, ...]
    label_name: str | None
    country_name: str | None
    format_name: str | None
    cover_image: str | None
    created_at: datetime | None
