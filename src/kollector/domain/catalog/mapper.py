"""Rebuild display views from stored releases."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from kollector.config import DEFAULT_CURRENCY
from kollector.domain.catalog.resolver import LookupRef
from kollector.domain.catalog.views import (
    ImagesView,
    PurchaseInfoView,
    ReleaseDetail,
    ReleaseSummary,
)
from kollector.domain.model import LookupKind, Medium

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kollector.domain.model import LookupId, Release, ReleaseImages, TenantId, Track
    from kollector.domain.ports import CatalogRepositories

log = logging.getLogger(__name__)


def _is_artist_id(value: str) -> bool:
    # ASCII only: str.isdigit also accepts characters such as "²" that int() rejects
    return value.isascii() and value.isdigit()


def placeholder_name(kind: LookupKind, lookup_id: LookupId) -> str:
    return f"{kind.label} {lookup_id}"


class ReleaseMapper:
    """Maps releases to views, resolving lookup IDs to current names.

    Missing lookups degrade to placeholders such as ``Artist 12`` so one dangling
    reference never breaks the whole view.
    """

    def __init__(
        self,
        repositories: CatalogRepositories,
        *,
        default_currency: str = DEFAULT_CURRENCY,
        image_base_url: str | None = None,
    ) -> None:
        self._repositories = repositories
        self._default_currency = default_currency
        self._image_base_url = image_base_url.rstrip("/") if image_base_url else None

    def to_detail(self, release: Release) -> ReleaseDetail:
        if release.id is None:
            raise ValueError("Release must be persisted before it can be mapped")
        tenant_id = release.tenant_id
        artists = self._refs(LookupKind.ARTIST, tenant_id, release.artist_ids)
        return ReleaseDetail(
            id=release.id,
            tenant_id=tenant_id,
            title=release.title,
            release_date=release.release_date,
            original_release_date=release.original_release_date,
            live=release.live,
            catalog_number=release.catalog_number,
            upc=release.upc,
            duration_seconds=release.duration_seconds,
            notes=release.notes,
            external_ref=release.external_ref,
            artists=artists,
            genres=self._refs(LookupKind.GENRE, tenant_id, release.genre_ids),
            label=self._ref(LookupKind.LABEL, tenant_id, release.label_id),
            country=self._ref(LookupKind.COUNTRY, tenant_id, release.country_id),
            format=self._ref(LookupKind.FORMAT, tenant_id, release.format_id),
            packaging=self._ref(LookupKind.PACKAGING, tenant_id, release.packaging_id),
            purchase_info=self._purchase_info(release),
            images=self._images(tenant_id, release.images),
            links=release.links,
            media=self._media(tenant_id, release.media),
            created_at=release.created_at,
            updated_at=release.updated_at,
        )

    def to_summary(self, release: Release) -> ReleaseSummary:
        if release.id is None:
            raise ValueError("Release must be persisted before it can be mapped")
        tenant_id = release.tenant_id
        cover = release.images.preferred_cover if release.images else None
        return ReleaseSummary(
            id=release.id,
            title=release.title,
            release_date=release.release_date,
            artist_names=tuple(
                ref.name for ref in self._refs(LookupKind.ARTIST, tenant_id, release.artist_ids)
            ),
            genre_names=tuple(
                ref.name for ref in self._refs(LookupKind.GENRE, tenant_id, release.genre_ids)
            ),
            label_name=self._name(LookupKind.LABEL, tenant_id, release.label_id),
            country_name=self._name(LookupKind.COUNTRY, tenant_id, release.country_id),
            format_name=self._name(LookupKind.FORMAT, tenant_id, release.format_id),
            cover_image=self._image_url(tenant_id, cover),
            created_at=release.created_at,
        )

    # Lookups -----------------------------------------------------------------

    def _refs(
        self, kind: LookupKind, tenant_id: TenantId, lookup_ids: Iterable[LookupId]
    ) -> tuple[LookupRef, ...]:
        ids = tuple(lookup_ids)
        if not ids:
            return ()
        found = self._repositories.lookups(kind).get_many(tenant_id, ids)
        refs: list[LookupRef] = []
        for lookup_id in ids:
            entity = found.get(lookup_id)
            if entity is None:
                log.debug("%s %s referenced but missing; using placeholder", kind.label, lookup_id)
                refs.append(LookupRef(id=lookup_id, name=placeholder_name(kind, lookup_id)))
            else:
                refs.append(LookupRef(id=lookup_id, name=entity.name))
        return tuple(refs)

    def _ref(
        self, kind: LookupKind, tenant_id: TenantId, lookup_id: LookupId | None
    ) -> LookupRef | None:
        if lookup_id is None:
            return None
        entity = self._repositories.lookups(kind).get(tenant_id, lookup_id)
        name = entity.name if entity is not None else placeholder_name(kind, lookup_id)
        return LookupRef(id=lookup_id, name=name)

    def _name(
        self, kind: LookupKind, tenant_id: TenantId, lookup_id: LookupId | None
    ) -> str | None:
        ref = self._ref(kind, tenant_id, lookup_id)
        return ref.name if ref is not None else None

    # Nested values -----------------------------------------------------------

    def _purchase_info(self, release: Release) -> PurchaseInfoView | None:
        info = release.purchase_info
        if info is None:
            return None
        return PurchaseInfoView(
            store_id=info.store_id,
            store_name=self._name(LookupKind.STORE, release.tenant_id, info.store_id),
            price=info.price,
            currency=info.currency or self._default_currency,
            purchased_on=info.purchased_on,
            notes=info.notes,
        )

    def _image_url(self, tenant_id: TenantId, filename: str | None) -> str | None:
        if filename is None or self._image_base_url is None:
            return filename
        return f"{self._image_base_url}/{tenant_id}/{filename}"

    def _images(self, tenant_id: TenantId, images: ReleaseImages | None) -> ImagesView | None:
        if images is None:
            return None
        return ImagesView(
            cover_front=self._image_url(tenant_id, images.cover_front),
            cover_back=self._image_url(tenant_id, images.cover_back),
            thumbnail=self._image_url(tenant_id, images.thumbnail),
        )

    def _media(self, tenant_id: TenantId, media: tuple[Medium, ...]) -> tuple[Medium, ...]:
        # track artists may be stored as artist ids in text form
        numeric = {
            int(artist)
            for medium in media
            for track in medium.tracks
            for artist in track.artists
            if _is_artist_id(artist)
        }
        if not numeric:
            return media
        names = {
            artist_id: artist.name
            for artist_id, artist in self._repositories.artists.get_many(tenant_id, numeric).items()
        }
        return tuple(
            replace(medium, tracks=tuple(self._track(track, names) for track in medium.tracks))
            for medium in media
        )

    @staticmethod
    def _track(track: Track, names: dict[LookupId, str]) -> Track:
        artists = tuple(
            names.get(int(artist), artist) if _is_artist_id(artist) else artist
            for artist in track.artists
        )
        return replace(track, artists=artists)
