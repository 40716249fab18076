"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class LookupKind(StrEnum):
    """Discriminator for the small named reference entities shared by releases."""

    ARTIST = "artist"
    GENRE = "genre"
    LABEL = "label"
    COUNTRY = "country"
    FORMAT = "format"
    PACKAGING = "packaging"
    STORE = "store"

    @property
    def label(self) -> str:
        """Display prefix used for placeholders such as ``Artist 12``."""
        return self.value.capitalize()
