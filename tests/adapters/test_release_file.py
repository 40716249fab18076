from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from kollector.adapters.release_file import (
    ReleaseFileError,
    load_lookup_seed_file,
    load_release_file,
)
from kollector.domain.model import LookupKind

if TYPE_CHECKING:
    from pathlib import Path


def _write(tmp_path: Path, payload: object, name: str = "release.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_release_file_maps_names_and_ids(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        {
            "title": "Under the Sign of the Black Mark",
            "release_date": "1987-05-11",
            "artists": ["Bathory"],
            "artist_ids": [7],
            "genres": ["Black Metal"],
            "label": "Under One Flag",
            "country_id": 3,
            "format": "  ",
            "catalog_number": "FLAG 11",
            "purchase_info": {"store": "Shadow Records", "price": "25.00", "date": "2020-06-01"},
            "images": {"cover_front": "https://cdn.example.com/a/front.jpg"},
            "links": [{"url": "https://www.discogs.com/release/1", "type": "Discogs"}],
            "media": [
                {
                    "name": "Side A",
                    "tracks": [{"title": "Nocturnal Obeisance"}, {"title": "Massacre", "index": 7}],
                }
            ],
            "unknown_key": "ignored",
        },
    )

    request = load_release_file(path)

    assert request.title == "Under the Sign of the Black Mark"
    assert request.release_date == date(1987, 5, 11)
    assert request.artist_ids == [7]
    assert request.artist_names == ["Bathory"]
    assert request.genre_names == ["Black Metal"]
    assert request.label_name == "Under One Flag"
    assert request.country_id == 3
    assert request.format_name is None
    assert request.purchase_info is not None
    assert request.purchase_info.store_name == "Shadow Records"
    assert request.purchase_info.price == Decimal("25.00")
    assert request.purchase_info.purchased_on == date(2020, 6, 1)
    assert request.images is not None
    assert request.images.cover_front == "front.jpg"
    assert request.links[0].link_type == "Discogs"
    tracks = request.media[0].tracks
    assert [(track.title, track.index) for track in tracks] == [
        ("Nocturnal Obeisance", 1),
        ("Massacre", 7),
    ]


def test_load_release_file_requires_title(tmp_path: Path) -> None:
    path = _write(tmp_path, {"artists": ["Bathory"]})

    with pytest.raises(ReleaseFileError, match="Invalid release file"):
        load_release_file(path)


def test_load_release_file_reports_unreadable_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ReleaseFileError, match="Cannot read"):
        load_release_file(path)
    with pytest.raises(ReleaseFileError, match="Cannot read"):
        load_release_file(tmp_path / "missing.json")


def test_seed_file_accepts_singular_and_plural_kinds(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        {"artists": ["Bathory"], "Genre": ["Black Metal"], "countries": ["Sweden"], "store": []},
        name="seed.json",
    )

    seed = load_lookup_seed_file(path)

    assert seed.names == {
        LookupKind.ARTIST: ["Bathory"],
        LookupKind.GENRE: ["Black Metal"],
        LookupKind.COUNTRY: ["Sweden"],
        LookupKind.STORE: [],
    }


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        (["Bathory"], "must contain a JSON object"),
        ({"bands": ["Bathory"]}, "Unknown lookup kind"),
        ({"artists": "Bathory"}, "must be a list of names"),
    ],
)
def test_seed_file_rejects_bad_documents(tmp_path: Path, payload: object, message: str) -> None:
    path = _write(tmp_path, payload, name="seed.json")

    with pytest.raises(ReleaseFileError, match=message):
        load_lookup_seed_file(path)
