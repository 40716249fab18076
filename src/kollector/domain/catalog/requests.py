"""Inbound request DTOs for release commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date
    from decimal import Decimal

    from kollector.domain.model import (
        ExternalRef,
        LookupId,
        Medium,
        ReleaseImages,
        ReleaseLink,
    )


@dataclass(slots=True, kw_only=True)
class PurchaseInfoInput:
    """Purchase details; the store may be named instead of referenced."""

    store_id: LookupId | None = None
    store_name: str | None = None
    price: Decimal | None = None
    currency: str | None = None
    purchased_on: date | None = None
    notes: str | None = None


@dataclass(slots=True, kw_only=True)
class ReleaseFields:
    title: str
    release_date: date | None = None
    original_release_date: date | None = None
    live: bool = False
    catalog_number: str | None = None
    upc: str | None = None
    duration_seconds: int | None = None
    notes: str | None = None
    external_ref: ExternalRef | None = None
    purchase_info: PurchaseInfoInput | None = None
    images: ReleaseImages | None = None
    links: list[ReleaseLink] = field(default_factory=list)
    media: list[Medium] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class CreateReleaseRequest(ReleaseFields):
    """Every lookup may be given by ID, by name, or both for the list-valued ones."""

    artist_ids: list[LookupId] = field(default_factory=list)
    artist_names: list[str] = field(default_factory=list)
    genre_ids: list[LookupId] = field(default_factory=list)
    genre_names: list[str] = field(default_factory=list)
    label_id: LookupId | None = None
    label_name: str | None = None
    country_id: LookupId | None = None
    country_name: str | None = None
    format_id: LookupId | None = None
    format_name: str | None = None
    packaging_id: LookupId | None = None
    packaging_name: str | None = None


@dataclass(slots=True, kw_only=True)
class UpdateReleaseRequest(ReleaseFields):
    """Full replacement; lookups are already-resolved IDs (store excepted)."""

    artist_ids: list[LookupId] = field(default_factory=list)
    genre_ids: list[LookupId] = field(default_factory=list)
    label_id: LookupId | None = None
    country_id: LookupId | None = None
    format_id: LookupId | None = None
    packaging_id: LookupId | None = None
