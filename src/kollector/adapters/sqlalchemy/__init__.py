"""SQLAlchemy adapter package for Kollector."""

from __future__ import annotations

from .mappings import (
    LOOKUP_TABLE_BY_KIND,
    configure_engine,
    create_all_tables,
    mapper_registry,
    release_table,
    start_mappers,
)
from .repositories import (
    SqlAlchemyArtistRepository,
    SqlAlchemyCountryRepository,
    SqlAlchemyFormatRepository,
    SqlAlchemyGenreRepository,
    SqlAlchemyLabelRepository,
    SqlAlchemyLookupRepository,
    SqlAlchemyPackagingRepository,
    SqlAlchemyReleaseRepository,
    SqlAlchemyStoreRepository,
)
from .unit_of_work import SqlAlchemyCatalogUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "LOOKUP_TABLE_BY_KIND",
    "SqlAlchemyArtistRepository",
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyCountryRepository",
    "SqlAlchemyFormatRepository",
    "SqlAlchemyGenreRepository",
    "SqlAlchemyLabelRepository",
    "SqlAlchemyLookupRepository",
    "SqlAlchemyPackagingRepository",
    "SqlAlchemyReleaseRepository",
    "SqlAlchemyStoreRepository",
    "StartupError",
    "configure_engine",
    "create_all_tables",
    "mapper_registry",
    "release_table",
    "shutdown",
    "startup",
]
