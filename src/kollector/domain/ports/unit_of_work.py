"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from kollector.domain.model import LookupKind

if TYPE_CHECKING:
    from types import TracebackType

    from kollector.domain.model import (
        Artist,
        Country,
        Format,
        Genre,
        Label,
        Packaging,
        Store,
    )
    from kollector.domain.ports.persistence import LookupRepository, ReleaseRepository


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    Entering an already active unit of work is a no-op that joins the open
    transaction; only the outermost exit ends it.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CatalogRepositories(RepositoryCollection):
    """Repositories required to resolve lookups and persist releases."""

    artists: LookupRepository[Artist]
    genres: LookupRepository[Genre]
    labels: LookupRepository[Label]
    countries: LookupRepository[Country]
    formats: LookupRepository[Format]
    packagings: LookupRepository[Packaging]
    stores: LookupRepository[Store]
    releases: ReleaseRepository

    def lookups(self, kind: LookupKind) -> LookupRepository[Any]:
        match kind:
            case LookupKind.ARTIST:
                return self.artists
            case LookupKind.GENRE:
                return self.genres
            case LookupKind.LABEL:
                return self.labels
            case LookupKind.COUNTRY:
                return self.countries
            case LookupKind.FORMAT:
                return self.formats
            case LookupKind.PACKAGING:
                return self.packagings
            case LookupKind.STORE:
                return self.stores


type CatalogUnitOfWork = UnitOfWork[CatalogRepositories]
