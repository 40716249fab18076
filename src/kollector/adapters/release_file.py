"""JSON file schemas for release submissions and lookup seed lists."""

from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from kollector.domain.catalog import CreateReleaseRequest, PurchaseInfoInput
from kollector.domain.model import LookupKind, Medium, ReleaseImages, ReleaseLink, Track

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)


class ReleaseFileError(ValueError):
    """Raised when an input file cannot be read as the expected document."""


class ReleaseFileModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class PurchaseInfoFile(ReleaseFileModel):
    store_id: int | None = None
    store_name: str | None = Field(default=None, alias="store")
    price: Decimal | None = None
    currency: str | None = None
    purchased_on: date | None = Field(default=None, alias="date")
    notes: str | None = None

    _blank_strings = field_validator("store_name", "currency", "notes", mode="before")(
        _blank_to_none
    )


class ImagesFile(ReleaseFileModel):
    cover_front: str | None = None
    cover_back: str | None = None
    thumbnail: str | None = None


class LinkFile(ReleaseFileModel):
    url: str
    type: str | None = None
    description: str | None = None


class TrackFile(ReleaseFileModel):
    title: str
    year: int | None = None
    artists: list[str] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)
    live: bool = False
    duration_seconds: int | None = None
    index: int | None = None


class MediumFile(ReleaseFileModel):
    name: str | None = None
    tracks: list[TrackFile] = Field(default_factory=list)


class ReleaseFile(ReleaseFileModel):
    """A release submission where every lookup may be an ID or a name."""

    title: str
    release_date: date | None = None
    original_release_date: date | None = None
    live: bool = False
    catalog_number: str | None = None
    upc: str | None = None
    duration_seconds: int | None = None
    notes: str | None = None
    external_ref: int | None = None

    artist_ids: list[int] = Field(default_factory=list)
    artists: list[str] = Field(default_factory=list)
    genre_ids: list[int] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)
    label_id: int | None = None
    label: str | None = None
    country_id: int | None = None
    country: str | None = None
    format_id: int | None = None
    format: str | None = None
    packaging_id: int | None = None
    packaging: str | None = None

    purchase_info: PurchaseInfoFile | None = None
    images: ImagesFile | None = None
    links: list[LinkFile] = Field(default_factory=list)
    media: list[MediumFile] = Field(default_factory=list)

    _blank_strings = field_validator(
        "catalog_number", "upc", "notes", "label", "country", "format", "packaging", mode="before"
    )(_blank_to_none)

    def to_request(self) -> CreateReleaseRequest:
        purchase = self.purchase_info
        images = self.images
        return CreateReleaseRequest(
            title=self.title,
            release_date=self.release_date,
            original_release_date=self.original_release_date,
            live=self.live,
            catalog_number=self.catalog_number,
            upc=self.upc,
            duration_seconds=self.duration_seconds,
            notes=self.notes,
            external_ref=self.external_ref,
            artist_ids=list(self.artist_ids),
            artist_names=list(self.artists),
            genre_ids=list(self.genre_ids),
            genre_names=list(self.genres),
            label_id=self.label_id,
            label_name=self.label,
            country_id=self.country_id,
            country_name=self.country,
            format_id=self.format_id,
            format_name=self.format,
            packaging_id=self.packaging_id,
            packaging_name=self.packaging,
            purchase_info=(
                PurchaseInfoInput(
                    store_id=purchase.store_id,
                    store_name=purchase.store_name,
                    price=purchase.price,
                    currency=purchase.currency,
                    purchased_on=purchase.purchased_on,
                    notes=purchase.notes,
                )
                if purchase is not None
                else None
            ),
            images=(
                ReleaseImages.from_values(
                    cover_front=images.cover_front,
                    cover_back=images.cover_back,
                    thumbnail=images.thumbnail,
                )
                if images is not None
                else None
            ),
            links=[
                ReleaseLink(url=link.url, link_type=link.type, description=link.description)
                for link in self.links
            ],
            media=[_medium(medium) for medium in self.media],
        )


def _medium(medium: MediumFile) -> Medium:
    return Medium(
        name=medium.name,
        tracks=tuple(
            Track(
                title=track.title,
                year=track.year,
                artists=tuple(track.artists),
                genres=tuple(track.genres),
                live=track.live,
                duration_seconds=track.duration_seconds,
                index=track.index if track.index is not None else position,
            )
            for position, track in enumerate(medium.tracks, start=1)
        ),
    )


class LookupSeedFile(ReleaseFileModel):
    """Names to seed, keyed by lookup kind (``artist``/``artists`` both accepted)."""

    names: dict[LookupKind, list[str]] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: object) -> LookupSeedFile:
        if not isinstance(data, dict):
            raise ReleaseFileError("Lookup seed file must contain a JSON object")
        names: dict[LookupKind, list[str]] = {}
        for key, values in data.items():
            kind = _lookup_kind(str(key))
            if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                raise ReleaseFileError(f"Seed entry {key!r} must be a list of names")
            names.setdefault(kind, []).extend(values)
        return cls(names=names)


_PLURALS = {"countries": LookupKind.COUNTRY}


def _lookup_kind(key: str) -> LookupKind:
    normalized = key.strip().lower()
    if normalized in _PLURALS:
        return _PLURALS[normalized]
    try:
        return LookupKind(normalized.removesuffix("s"))
    except ValueError as exc:
        raise ReleaseFileError(f"Unknown lookup kind {key!r}") from exc


def _read_json(path: Path) -> object:
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ReleaseFileError(f"Cannot read {path}: {exc}") from exc


def load_release_file(path: Path) -> CreateReleaseRequest:
    data = _read_json(path)
    try:
        document = ReleaseFile.model_validate(data)
    except ValidationError as exc:
        raise ReleaseFileError(f"Invalid release file {path}: {exc}") from exc
    log.debug("Loaded release file %s (%r)", path, document.title)
    return document.to_request()


def load_lookup_seed_file(path: Path) -> LookupSeedFile:
    return LookupSeedFile.from_mapping(_read_json(path))
