"""Domain primitives: scalar aliases and normalisation helpers.

Scalar aliases may be promoted to proper value objects later without changing imports.
"""

from __future__ import annotations

import unicodedata
from uuid import UUID

type TenantId = UUID
type LookupId = int
type ReleaseId = int
type CatalogNumber = str
type ExternalRef = int


def name_key(value: str) -> str:
    """Comparison key for case-insensitive name matching."""

    text = unicodedata.normalize("NFKC", value)
    return text.strip().casefold()


def clean_text(value: str | None) -> str | None:
    """Trim free text; blank strings collapse to ``None``."""

    if value is None:
        return None
    text = value.strip()
    return text or None
