"""Encoded relation codec for release columns.

Relation lists and nested value objects are stored as JSON text next to the
release row. Encoding (version 1):

- artist/genre ID lists: ``[3,7]``
- purchase info: ``{"StoreID", "Price", "Currency", "Date", "Notes"}``. The older
  ``{"StoreId", "StoreName", "Price", "Currency", "PurchaseDate", "Notes"}`` shape is
  still read and is recognised by its ``PurchaseDate`` key.
- images: ``{"CoverFront", "CoverBack", "Thumbnail"}`` holding filenames
- links: ``[{"Url", "Type", "Description"}]`` (``UrlType`` is read as ``Type``)
- media: ``[{"Name", "Tracks": [{"Title", "ReleaseYear", "Artists", "Genres",
  "Live", "LengthSecs", "Index"}]}]`` (``Title`` is read as ``Name`` on a medium)

Object keys are matched case-insensitively on decode. Empty values encode to
``None`` so the column stays NULL.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from kollector.domain.model import (
    LookupId,
    Medium,
    PurchaseInfo,
    ReleaseImages,
    ReleaseLink,
    Track,
)

log = logging.getLogger(__name__)

_ID_LIST_ADAPTER: TypeAdapter[list[int]] = TypeAdapter(list[int])


class DecodeError(ValueError):
    """Raised when stored text cannot be decoded into the expected structure."""


def _field(name: str, **kwargs: Any) -> Any:
    return Field(validation_alias=name.lower(), serialization_alias=name, **kwargs)


def _date_only(value: Any) -> Any:
    # older rows stored full timestamps such as 2021-03-04T00:00:00
    if isinstance(value, str) and len(value) > 10 and value[10] in "T ":  # noqa: PLR2004
        return value[:10]
    return value


def _string_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if not text.startswith("["):
            return [text]
        value = json.loads(text)
    if isinstance(value, list):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return value


class CodecModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _fold_keys(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {str(key).lower(): value for key, value in data.items()}
        return data


class PurchaseInfoPayload(CodecModel):
    store_id: int | None = _field("StoreID", default=None)
    price: Decimal | None = _field("Price", default=None)
    currency: str | None = _field("Currency", default=None)
    purchased_on: date | None = _field("Date", default=None)
    notes: str | None = _field("Notes", default=None)

    _purchased_on_date = field_validator("purchased_on", mode="before")(_date_only)


class LegacyPurchaseInfoPayload(CodecModel):
    store_id: int | None = _field("StoreId", default=None)
    price: Decimal | None = _field("Price", default=None)
    currency: str | None = _field("Currency", default=None)
    purchased_on: date | None = _field("PurchaseDate", default=None)
    notes: str | None = _field("Notes", default=None)

    _purchased_on_date = field_validator("purchased_on", mode="before")(_date_only)


class ImagesPayload(CodecModel):
    cover_front: str | None = _field("CoverFront", default=None)
    cover_back: str | None = _field("CoverBack", default=None)
    thumbnail: str | None = _field("Thumbnail", default=None)


class LinkPayload(CodecModel):
    url: str = _field("Url")
    link_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("type", "urltype"),
        serialization_alias="Type",
    )
    description: str | None = _field("Description", default=None)


class TrackPayload(CodecModel):
    title: str = _field("Title")
    year: int | None = _field("ReleaseYear", default=None)
    artists: list[str] = _field("Artists", default_factory=list)
    genres: list[str] = _field("Genres", default_factory=list)
    live: bool = _field("Live", default=False)
    length_secs: int | None = _field("LengthSecs", default=None)
    index: int = _field("Index", default=0)

    _artist_names = field_validator("artists", "genres", mode="before")(_string_list)

    @field_validator("year", mode="before")
    @classmethod
    def _year_from_timestamp(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.isdigit() and value[:4].isdigit():
            return int(value[:4])
        return value


class MediumPayload(CodecModel):
    name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("name", "title"),
        serialization_alias="Name",
    )
    tracks: list[TrackPayload] = _field("Tracks", default_factory=list)


# Helpers ---------------------------------------------------------------------


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Malformed JSON: {exc.msg}") from exc


def _validate[TModel: BaseModel](model: type[TModel], data: Any) -> TModel:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise DecodeError(f"Invalid {model.__name__}: {exc.error_count()} error(s)") from exc


def _validate_items[TModel: BaseModel](model: type[TModel], data: Any) -> list[TModel]:
    if not isinstance(data, list):
        raise DecodeError(f"Expected a JSON array of {model.__name__}")
    return [_validate(model, item) for item in data]


# ID lists --------------------------------------------------------------------


def encode_id_list(ids: Iterable[LookupId]) -> str | None:
    values = [int(value) for value in ids]
    if not values:
        return None
    return _dumps(values)


def decode_id_list(text: str) -> tuple[LookupId, ...]:
    try:
        return tuple(_ID_LIST_ADAPTER.validate_json(text))
    except ValidationError as exc:
        raise DecodeError(f"Invalid ID list: {exc.error_count()} error(s)") from exc


# Purchase info ---------------------------------------------------------------


def encode_purchase_info(info: PurchaseInfo | None) -> str | None:
    if info is None or info.is_empty:
        return None
    payload = PurchaseInfoPayload(
        store_id=info.store_id,
        price=info.price,
        currency=info.currency,
        purchased_on=info.purchased_on,
        notes=info.notes,
    )
    return _dumps(payload.model_dump(mode="json", by_alias=True))


def decode_purchase_info(text: str) -> PurchaseInfo | None:
    data = _loads(text)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise DecodeError("Expected a JSON object for purchase info")
    keys = {str(key).lower() for key in data}
    if "purchasedate" in keys:
        log.debug("Decoding purchase info in legacy shape")
        legacy = _validate(LegacyPurchaseInfoPayload, data)
        info = PurchaseInfo(
            store_id=legacy.store_id,
            price=legacy.price,
            currency=legacy.currency,
            purchased_on=legacy.purchased_on,
            notes=legacy.notes,
        )
    else:
        payload = _validate(PurchaseInfoPayload, data)
        info = PurchaseInfo(
            store_id=payload.store_id,
            price=payload.price,
            currency=payload.currency,
            purchased_on=payload.purchased_on,
            notes=payload.notes,
        )
    return None if info.is_empty else info


# Images ----------------------------------------------------------------------


def encode_images(images: ReleaseImages | None) -> str | None:
    if images is None or images.is_empty:
        return None
    payload = ImagesPayload(
        cover_front=images.cover_front,
        cover_back=images.cover_back,
        thumbnail=images.thumbnail,
    )
    return _dumps(payload.model_dump(mode="json", by_alias=True))


def decode_images(text: str) -> ReleaseImages | None:
    data = _loads(text)
    if data is None:
        return None
    payload = _validate(ImagesPayload, data)
    images = ReleaseImages.from_values(
        cover_front=payload.cover_front,
        cover_back=payload.cover_back,
        thumbnail=payload.thumbnail,
    )
    return None if images.is_empty else images


# Links -----------------------------------------------------------------------


def encode_links(links: Iterable[ReleaseLink]) -> str | None:
    payloads = [
        LinkPayload(url=link.url, link_type=link.link_type, description=link.description)
        for link in links
    ]
    if not payloads:
        return None
    return _dumps([payload.model_dump(mode="json", by_alias=True) for payload in payloads])


def decode_links(text: str) -> tuple[ReleaseLink, ...]:
    data = _loads(text)
    if data is None:
        return ()
    return tuple(
        ReleaseLink(url=item.url, link_type=item.link_type, description=item.description)
        for item in _validate_items(LinkPayload, data)
    )


# Media -----------------------------------------------------------------------


def _track_payload(track: Track) -> TrackPayload:
    return TrackPayload(
        title=track.title,
        year=track.year,
        artists=list(track.artists),
        genres=list(track.genres),
        live=track.live,
        length_secs=track.duration_seconds,
        index=track.index,
    )


def _track(payload: TrackPayload) -> Track:
    return Track(
        title=payload.title,
        year=payload.year,
        artists=tuple(payload.artists),
        genres=tuple(payload.genres),
        live=payload.live,
        duration_seconds=payload.length_secs,
        index=payload.index,
    )


def encode_media(media: Iterable[Medium]) -> str | None:
    payloads = [
        MediumPayload(name=medium.name, tracks=[_track_payload(track) for track in medium.tracks])
        for medium in media
    ]
    if not payloads:
        return None
    return _dumps([payload.model_dump(mode="json", by_alias=True) for payload in payloads])


def decode_media(text: str) -> tuple[Medium, ...]:
    data = _loads(text)
    if data is None:
        return ()
    return tuple(
        Medium(name=item.name, tracks=tuple(_track(track) for track in item.tracks))
        for item in _validate_items(MediumPayload, data)
    )
