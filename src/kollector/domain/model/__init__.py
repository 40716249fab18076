"""Domain model for the release catalog."""

from __future__ import annotations

from kollector.domain.model.enums import LookupKind
from kollector.domain.model.lookups import (
    LOOKUP_CLASS_BY_KIND,
    Artist,
    Country,
    Format,
    Genre,
    Label,
    LookupEntity,
    Packaging,
    Store,
    new_lookup,
)
from kollector.domain.model.primitives import (
    CatalogNumber,
    ExternalRef,
    LookupId,
    ReleaseId,
    TenantId,
    clean_text,
    name_key,
)
from kollector.domain.model.release import Release, utcnow
from kollector.domain.model.values import (
    Medium,
    PurchaseInfo,
    ReleaseImages,
    ReleaseLink,
    Track,
    storage_filename,
)

__all__ = [
    "LOOKUP_CLASS_BY_KIND",
    "Artist",
    "CatalogNumber",
    "Country",
    "ExternalRef",
    "Format",
    "Genre",
    "Label",
    "LookupEntity",
    "LookupId",
    "LookupKind",
    "Medium",
    "Packaging",
    "PurchaseInfo",
    "Release",
    "ReleaseId",
    "ReleaseImages",
    "ReleaseLink",
    "Store",
    "TenantId",
    "Track",
    "clean_text",
    "name_key",
    "new_lookup",
    "storage_filename",
    "utcnow",
]
