"""Factories and counters shared by catalog tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import text

from kollector.domain.catalog import CreateReleaseRequest
from kollector.domain.model import Artist, LookupKind, Medium, Release, Track

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

    from kollector.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork

    UowFactory = Callable[[], SqlAlchemyCatalogUnitOfWork]


def make_create_request(
    title: str = "Black Metal",
    *,
    artist_names: Sequence[str] = ("Bathory",),
    **overrides: Any,
) -> CreateReleaseRequest:
    return CreateReleaseRequest(title=title, artist_names=list(artist_names), **overrides)


def make_media() -> tuple[Medium, ...]:
    return (
        Medium(
            name="Disc 1",
            tracks=(
                Track(
                    title="Witching Hour",
                    year=1982,
                    artists=("Venom",),
                    genres=("Black Metal",),
                    duration_seconds=221,
                    index=1,
                ),
                Track(
                    title="Countess Bathory",
                    artists=("Venom", "Cronos"),
                    live=True,
                    index=2,
                ),
            ),
        ),
    )


def add_artists(uow_factory: UowFactory, tenant_id: UUID, *names: str) -> list[int]:
    ids: list[int] = []
    with uow_factory() as uow:
        for name in names:
            artist = Artist(tenant_id=tenant_id, name=name)
            uow.repositories.artists.add(artist)
            assert artist.id is not None
            ids.append(artist.id)
        uow.commit()
    return ids


def add_release(uow_factory: UowFactory, release: Release) -> int:
    with uow_factory() as uow:
        uow.repositories.releases.add(release)
        uow.commit()
    assert release.id is not None
    return release.id


def count_lookups(uow_factory: UowFactory, tenant_id: UUID, kind: LookupKind) -> int:
    with uow_factory() as uow:
        return uow.repositories.lookups(kind).count(tenant_id)


def count_releases(uow_factory: UowFactory, tenant_id: UUID) -> int:
    with uow_factory() as uow:
        return uow.repositories.releases.count(tenant_id)


def write_raw_columns(uow_factory: UowFactory, release_id: int, **columns: str | None) -> None:
    """Store column text as-is, bypassing the encoded column types."""

    assignments = ", ".join(f"{name} = :{name}" for name in columns)
    with uow_factory() as uow:
        uow.session.execute(
            text(f"UPDATE release SET {assignments} WHERE id = :release_id"),  # noqa: S608
            {**columns, "release_id": release_id},
        )
        uow.commit()
