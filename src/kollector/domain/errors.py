"""Failure taxonomy surfaced by catalog operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kollector.domain.model import ReleaseId


class ErrorKind(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    DUPLICATE = "duplicate"
    STORAGE = "storage"


class CatalogError(Exception):
    """Base class for every failure a catalog operation reports to its caller."""

    kind: ClassVar[ErrorKind]


class UnauthenticatedError(CatalogError):
    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "No authenticated tenant available") -> None:
        super().__init__(message)


class NotFoundError(CatalogError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ReleaseValidationError(CatalogError):
    kind = ErrorKind.VALIDATION

    def __init__(self, problems: Iterable[str]) -> None:
        self.problems = tuple(problems)
        super().__init__("; ".join(self.problems) or "Invalid release")


@dataclass(frozen=True, slots=True)
class DuplicateRef:
    id: ReleaseId
    title: str


class DuplicateReleaseError(CatalogError):
    """Carries the conflicting releases so callers can offer them to the user."""

    kind = ErrorKind.DUPLICATE

    def __init__(self, duplicates: Iterable[DuplicateRef], message: str | None = None) -> None:
        self.duplicates = tuple(duplicates)
        if message is None:
            listing = ", ".join(f"'{ref.title}' (ID: {ref.id})" for ref in self.duplicates)
            message = f"Potential duplicate release found. Similar release(s) exist: {listing}"
        super().__init__(message)


class DuplicateLookupError(CatalogError):
    kind = ErrorKind.DUPLICATE

    def __init__(self, kind_label: str, name: str) -> None:
        super().__init__(f"{kind_label} named {name!r} already exists")
        self.name = name


class StorageError(CatalogError):
    """Lower-layer failure; the message is safe to show, the cause is chained."""

    kind = ErrorKind.STORAGE
