"""Catalog behaviour configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_flag, optional_env
from .errors import ConfigurationError

DEFAULT_CURRENCY: Final[str] = "GBP"


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    """Knobs for release ingestion and display."""

    default_currency: str = DEFAULT_CURRENCY
    check_duplicates_on_update: bool = False
    image_base_url: str | None = None


def get_catalog_config() -> CatalogConfig:
    currency = (optional_env("KOLLECTOR_DEFAULT_CURRENCY") or DEFAULT_CURRENCY).upper()
    if len(currency) != 3 or not currency.isalpha():  # noqa: PLR2004
        raise ConfigurationError(
            f"KOLLECTOR_DEFAULT_CURRENCY must be a three letter code, got {currency!r}",
            variables=("KOLLECTOR_DEFAULT_CURRENCY",),
        )
    base_url = optional_env("KOLLECTOR_IMAGE_BASE_URL")
    return CatalogConfig(
        default_currency=currency,
        check_duplicates_on_update=env_flag("KOLLECTOR_CHECK_DUPLICATES_ON_UPDATE"),
        image_base_url=base_url.rstrip("/") if base_url else None,
    )
