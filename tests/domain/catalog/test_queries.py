from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from kollector.domain.catalog import ReleaseQueries, ReleaseWriter
from kollector.domain.errors import NotFoundError, UnauthenticatedError
from kollector.domain.model import Medium, ReleaseImages, Track
from tests.helpers.catalog import make_create_request

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from kollector.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork

    UowFactory = Callable[[], SqlAlchemyCatalogUnitOfWork]


@pytest.fixture
def queries(sqlite_unit_of_work: UowFactory) -> ReleaseQueries:
    return ReleaseQueries(sqlite_unit_of_work, image_base_url="https://img.example.com")


def _create(uow_factory: UowFactory, tenant_id: UUID, title: str, **overrides: object) -> int:
    result = ReleaseWriter(uow_factory).create(
        tenant_id,
        make_create_request(title, **overrides),
    )
    assert result.release.id is not None
    return result.release.id


def test_get_detail_reads_back_what_was_written(
    queries: ReleaseQueries, sqlite_unit_of_work: UowFactory, tenant_id: UUID
) -> None:
    release_id = _create(
        sqlite_unit_of_work,
        tenant_id,
        "Blood Fire Death",
        genre_names=["Viking Metal"],
        release_date=date(1988, 10, 8),
    )

    detail = queries.get_detail(tenant_id, release_id)

    assert detail.title == "Blood Fire Death"
    assert [ref.name for ref in detail.artists] == ["Bathory"]
    assert [ref.name for ref in detail.genres] == ["Viking Metal"]
    assert detail.release_date == date(1988, 10, 8)


def test_non_ascii_digit_track_artist_survives_create_and_read(
    queries: ReleaseQueries, sqlite_unit_of_work: UowFactory, tenant_id: UUID
) -> None:
    media = [Medium(tracks=(Track(title="E = mc²", artists=("²",), index=1),))]
    release_id = _create(sqlite_unit_of_work, tenant_id, "Relativity", media=media)

    detail = queries.get_detail(tenant_id, release_id)

    assert detail.media[0].tracks[0].artists == ("²",)


def test_get_summary_lists_names_and_cover(
    queries: ReleaseQueries, sqlite_unit_of_work: UowFactory, tenant_id: UUID
) -> None:
    release_id = _create(
        sqlite_unit_of_work,
        tenant_id,
        "Requiem",
        label_name="Black Mark",
        format_name="CD",
        images=ReleaseImages(cover_front="/uploads/requiem.jpg"),
    )

    summary = queries.get_summary(tenant_id, release_id)

    assert summary.artist_names == ("Bathory",)
    assert summary.label_name == "Black Mark"
    assert summary.format_name == "CD"
    assert summary.country_name is None
    assert summary.cover_image == f"https://img.example.com/{tenant_id}/requiem.jpg"


def test_other_tenant_sees_not_found(
    queries: ReleaseQueries, sqlite_unit_of_work: UowFactory, tenant_id: UUID, other_tenant_id: UUID
) -> None:
    release_id = _create(sqlite_unit_of_work, tenant_id, "Private")

    with pytest.raises(NotFoundError, match=f"Release with ID {release_id} not found"):
        queries.get_detail(other_tenant_id, release_id)
    with pytest.raises(UnauthenticatedError):
        queries.get_summary(None, release_id)


def test_check_duplicates_reports_matches_without_writing(
    queries: ReleaseQueries, sqlite_unit_of_work: UowFactory, tenant_id: UUID
) -> None:
    release_id = _create(sqlite_unit_of_work, tenant_id, "Nordland I")

    by_name = queries.check_duplicates(tenant_id, title="nordland i", artist_names=["BATHORY"])
    unrelated = queries.check_duplicates(tenant_id, title="Nordland I", artist_names=["Enslaved"])
    anonymous = queries.check_duplicates(None, title="Nordland I", artist_names=["Bathory"])

    assert [summary.id for summary in by_name] == [release_id]
    assert unrelated == []
    assert anonymous == []
