"""Ports for storage and transaction boundaries."""

from __future__ import annotations

from kollector.domain.ports.persistence import LookupRepository, ReleaseRepository, Repository
from kollector.domain.ports.unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "LookupRepository",
    "ReleaseRepository",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
