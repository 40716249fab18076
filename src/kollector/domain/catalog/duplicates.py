"""Duplicate detection for release submissions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kollector.domain.model import name_key

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kollector.domain.model import Artist, LookupId, Release, ReleaseId, TenantId
    from kollector.domain.ports import LookupRepository, ReleaseRepository

log = logging.getLogger(__name__)


def _distinct(releases: Iterable[Release]) -> list[Release]:
    seen: set[int] = set()
    unique: list[Release] = []
    for release in releases:
        marker = release.id if release.id is not None else id(release)
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(release)
    return unique


class DuplicateDetector:
    """Finds releases a submission probably duplicates.

    Two passes, in order: an exact catalog-number match, which is authoritative
    and ends the search, then equal titles that share at least one artist. A
    title on its own never counts.
    """

    def __init__(
        self,
        releases: ReleaseRepository,
        artists: LookupRepository[Artist],
    ) -> None:
        self._releases = releases
        self._artists = artists

    def find_duplicates(
        self,
        tenant_id: TenantId | None,
        *,
        title: str,
        catalog_number: str | None = None,
        artist_ids: Iterable[LookupId] | None = None,
        artist_names: Iterable[str] | None = None,
        exclude_release_id: ReleaseId | None = None,
    ) -> list[Release]:
        if tenant_id is None:
            log.debug("No tenant context; skipping duplicate detection")
            return []

        if catalog_number is not None and catalog_number.strip():
            by_catalog = [
                release
                for release in self._releases.find_by_catalog_number(tenant_id, catalog_number)
                if release.id != exclude_release_id
            ]
            if by_catalog:
                log.info(
                    "Catalog number %r matches %d existing release(s)",
                    catalog_number.strip(),
                    len(by_catalog),
                )
                return _distinct(by_catalog)

        candidate_ids = set(artist_ids or ())
        candidate_names = {name_key(name) for name in artist_names or () if name and name.strip()}
        if not candidate_ids and not candidate_names:
            return []

        title_key = name_key(title)
        if not title_key:
            return []

        same_title = [
            release
            for release in self._releases.list(tenant_id)
            if release.id != exclude_release_id
            and release.artist_ids
            and name_key(release.title) == title_key
        ]
        if not same_title:
            return []

        names_by_id: dict[LookupId, str] = {}
        if candidate_names:
            wanted = {artist_id for release in same_title for artist_id in release.artist_ids}
            names_by_id = {
                artist_id: artist.name_key
                for artist_id, artist in self._artists.get_many(tenant_id, wanted).items()
            }

        matches = [
            release
            for release in same_title
            if self._shares_artist(release, candidate_ids, candidate_names, names_by_id)
        ]
        if matches:
            log.info("Title %r with overlapping artists matches %d release(s)", title, len(matches))
        return _distinct(matches)

    @staticmethod
    def _shares_artist(
        release: Release,
        candidate_ids: set[LookupId],
        candidate_names: set[str],
        names_by_id: dict[LookupId, str],
    ) -> bool:
        if release.shares_artist_with(candidate_ids):
            return True
        if not candidate_names:
            return False
        existing_names = {
            names_by_id[artist_id] for artist_id in release.artist_ids if artist_id in names_by_id
        }
        return not existing_names.isdisjoint(candidate_names)
