"""Field checks applied before a release is written."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final
from urllib.parse import urlsplit

from kollector.domain.catalog.requests import CreateReleaseRequest
from kollector.domain.errors import ReleaseValidationError
from kollector.domain.model import LookupKind, clean_text, utcnow

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from datetime import date

    from kollector.domain.catalog.requests import ReleaseFields
    from kollector.domain.model import LookupId, ReleaseImages, TenantId
    from kollector.domain.ports import CatalogRepositories

MAX_TITLE_LENGTH: Final[int] = 300
MAX_CATALOG_NUMBER_LENGTH: Final[int] = 100
MAX_UPC_LENGTH: Final[int] = 50
MAX_LINK_URL_LENGTH: Final[int] = 500
MAX_LINK_TYPE_LENGTH: Final[int] = 50
MAX_LINK_DESCRIPTION_LENGTH: Final[int] = 100
MAX_TRACK_TITLE_LENGTH: Final[int] = 200
MAX_IMAGE_FILENAME_LENGTH: Final[int] = 255
MAX_CURRENCY_LENGTH: Final[int] = 3
MIN_RELEASE_YEAR: Final[int] = 1900

_WEB_SCHEMES: Final = frozenset({"http", "https"})

type References = Mapping[LookupKind, Iterable[LookupId | None]]


def _too_long(value: str | None, limit: int) -> bool:
    return value is not None and len(value) > limit


def _is_web_url(url: str) -> bool:
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return parts.scheme.lower() in _WEB_SCHEMES and bool(parts.netloc)


def _image_problems(images: ReleaseImages | None) -> list[str]:
    if images is None:
        return []
    problems: list[str] = []
    for label, value in (
        ("Front cover", images.cover_front),
        ("Back cover", images.cover_back),
        ("Thumbnail", images.thumbnail),
    ):
        if _too_long(value, MAX_IMAGE_FILENAME_LENGTH):
            problems.append(
                f"{label} filename cannot exceed {MAX_IMAGE_FILENAME_LENGTH} characters"
            )
    return problems


def _year_problems(fields: ReleaseFields, today: date | None) -> list[str]:
    latest = (today.year if today is not None else utcnow().year) + 1
    problems: list[str] = []
    for label, value in (
        ("Release year", fields.release_date),
        ("Original release year", fields.original_release_date),
    ):
        if value is not None and not MIN_RELEASE_YEAR <= value.year <= latest:
            problems.append(f"{label} must be between {MIN_RELEASE_YEAR} and {latest}")
    return problems


def _naming_problems(request: CreateReleaseRequest) -> list[str]:
    """Name lists must not hold blanks, and a single lookup is either an ID or a name."""

    problems: list[str] = []
    if any(clean_text(name) is None for name in request.artist_names):
        problems.append("Artist names cannot be empty or whitespace")
    if any(clean_text(name) is None for name in request.genre_names):
        problems.append("Genre names cannot be empty or whitespace")
    for label, lookup_id, name in (
        ("Label", request.label_id, request.label_name),
        ("Country", request.country_id, request.country_name),
        ("Format", request.format_id, request.format_name),
        ("Packaging", request.packaging_id, request.packaging_name),
    ):
        if lookup_id is not None and clean_text(name) is not None:
            problems.append(f"Cannot specify both {label}Id and {label}Name")
    return problems


def release_problems(
    fields: ReleaseFields,
    *,
    artist_ids: Sequence[LookupId],
    require_artists: bool,
    today: date | None = None,
) -> list[str]:
    problems: list[str] = []

    title = fields.title.strip() if fields.title else ""
    if not title:
        problems.append("Title is required")
    elif len(title) > MAX_TITLE_LENGTH:
        problems.append(f"Title cannot exceed {MAX_TITLE_LENGTH} characters")

    if require_artists and not artist_ids:
        problems.append("At least one artist is required")
    if isinstance(fields, CreateReleaseRequest):
        problems.extend(_naming_problems(fields))

    problems.extend(_year_problems(fields, today))
    if _too_long(fields.catalog_number, MAX_CATALOG_NUMBER_LENGTH):
        problems.append(f"Catalog number cannot exceed {MAX_CATALOG_NUMBER_LENGTH} characters")
    if _too_long(fields.upc, MAX_UPC_LENGTH):
        problems.append(f"UPC cannot exceed {MAX_UPC_LENGTH} characters")
    if fields.duration_seconds is not None and fields.duration_seconds < 0:
        problems.append("Duration cannot be negative")

    for position, link in enumerate(fields.links, start=1):
        if not link.url or not link.url.strip():
            problems.append(f"Link {position}: URL is required")
        elif len(link.url) > MAX_LINK_URL_LENGTH:
            problems.append(f"Link {position}: URL cannot exceed {MAX_LINK_URL_LENGTH} characters")
        elif not _is_web_url(link.url):
            problems.append(f"Link {position}: URL must be a valid http or https URL")
        if _too_long(link.link_type, MAX_LINK_TYPE_LENGTH):
            problems.append(
                f"Link {position}: type cannot exceed {MAX_LINK_TYPE_LENGTH} characters"
            )
        if _too_long(link.description, MAX_LINK_DESCRIPTION_LENGTH):
            problems.append(
                f"Link {position}: description cannot exceed "
                f"{MAX_LINK_DESCRIPTION_LENGTH} characters"
            )

    for disc, medium in enumerate(fields.media, start=1):
        for track in medium.tracks:
            if not track.title or not track.title.strip():
                problems.append(f"Medium {disc}, track {track.index}: title is required")
            elif len(track.title) > MAX_TRACK_TITLE_LENGTH:
                problems.append(
                    f"Medium {disc}, track {track.index}: title cannot exceed "
                    f"{MAX_TRACK_TITLE_LENGTH} characters"
                )
            if track.duration_seconds is not None and track.duration_seconds < 0:
                problems.append(f"Medium {disc}, track {track.index}: duration cannot be negative")

    purchase = fields.purchase_info
    if purchase is not None:
        if purchase.store_id is not None and clean_text(purchase.store_name) is not None:
            problems.append("Cannot specify both StoreId and StoreName")
        if purchase.price is not None and purchase.price < 0:
            problems.append("Purchase price cannot be negative")
        if purchase.price is not None and clean_text(purchase.currency) is None:
            problems.append("Currency is required when price is specified")
        if _too_long(purchase.currency, MAX_CURRENCY_LENGTH):
            problems.append(f"Currency code cannot exceed {MAX_CURRENCY_LENGTH} characters")

    problems.extend(_image_problems(fields.images))
    return problems


def reference_problems(
    references: References,
    *,
    repositories: CatalogRepositories | None = None,
    tenant_id: TenantId | None = None,
) -> list[str]:
    """IDs must be positive and, given repositories, name a lookup of this tenant.

    Another tenant's lookup is reported the same way as one that does not exist.
    """

    problems: list[str] = []
    for kind, values in references.items():
        ids = [value for value in values if value is not None]
        if any(value <= 0 for value in ids):
            problems.append(f"All {kind} IDs must be positive integers")
        wanted = sorted({value for value in ids if value > 0})
        if not wanted or repositories is None or tenant_id is None:
            continue
        found = repositories.lookups(kind).get_many(tenant_id, wanted)
        missing = [value for value in wanted if value not in found]
        if missing:
            problems.append(f"Unknown {kind} ID(s): {', '.join(map(str, missing))}")
    return problems


def validate_release(
    fields: ReleaseFields,
    *,
    artist_ids: Sequence[LookupId],
    require_artists: bool,
    references: References | None = None,
    repositories: CatalogRepositories | None = None,
    tenant_id: TenantId | None = None,
) -> None:
    """Raise ``ReleaseValidationError`` listing every problem found.

    ``references`` defaults to the artist IDs alone.
    """

    problems = release_problems(fields, artist_ids=artist_ids, require_artists=require_artists)
    problems.extend(
        reference_problems(
            references if references is not None else {LookupKind.ARTIST: artist_ids},
            repositories=repositories,
            tenant_id=tenant_id,
        )
    )
    if problems:
        raise ReleaseValidationError(problems)
