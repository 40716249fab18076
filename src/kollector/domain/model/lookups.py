"""Lookup entities: tenant-owned named references (artist, genre, label, ...)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from kollector.domain.model.enums import LookupKind
from kollector.domain.model.primitives import name_key as compute_name_key

if TYPE_CHECKING:
    from kollector.domain.model.primitives import LookupId, TenantId


@dataclass(eq=False, kw_only=True)
class LookupEntity:
    """Shared shape of every lookup kind.

    ``name`` keeps the caller's casing; ``name_key`` is the derived comparison key
    used for case-insensitive resolution within a tenant.
    """

    tenant_id: TenantId
    name: str
    id: LookupId | None = None
    _name_key: str = field(default="", init=False, repr=False)

    # class-level discriminator; subclasses must override
    KIND: ClassVar[LookupKind]

    def __post_init__(self) -> None:
        self.name = self.name.strip()
        if not self.name:
            raise ValueError(f"{self.KIND.label} name must not be blank")
        self._name_key = compute_name_key(self.name)

    @property
    def kind(self) -> LookupKind:
        return self.KIND

    @property
    def name_key(self) -> str:
        return self._name_key

    def rename(self, name: str) -> None:
        cleaned = name.strip()
        if not cleaned:
            raise ValueError(f"{self.KIND.label} name must not be blank")
        self.name = cleaned
        self._name_key = compute_name_key(cleaned)

    def matches(self, name: str) -> bool:
        return self._name_key == compute_name_key(name)


@dataclass(eq=False, kw_only=True)
class Artist(LookupEntity):
    KIND: ClassVar[LookupKind] = LookupKind.ARTIST


@dataclass(eq=False, kw_only=True)
class Genre(LookupEntity):
    KIND: ClassVar[LookupKind] = LookupKind.GENRE


@dataclass(eq=False, kw_only=True)
class Label(LookupEntity):
    KIND: ClassVar[LookupKind] = LookupKind.LABEL


@dataclass(eq=False, kw_only=True)
class Country(LookupEntity):
    KIND: ClassVar[LookupKind] = LookupKind.COUNTRY


@dataclass(eq=False, kw_only=True)
class Format(LookupEntity):
    KIND: ClassVar[LookupKind] = LookupKind.FORMAT


@dataclass(eq=False, kw_only=True)
class Packaging(LookupEntity):
    KIND: ClassVar[LookupKind] = LookupKind.PACKAGING


@dataclass(eq=False, kw_only=True)
class Store(LookupEntity):
    KIND: ClassVar[LookupKind] = LookupKind.STORE


LOOKUP_CLASS_BY_KIND: dict[LookupKind, type[LookupEntity]] = {
    LookupKind.ARTIST: Artist,
    LookupKind.GENRE: Genre,
    LookupKind.LABEL: Label,
    LookupKind.COUNTRY: Country,
    LookupKind.FORMAT: Format,
    LookupKind.PACKAGING: Packaging,
    LookupKind.STORE: Store,
}


def new_lookup(kind: LookupKind, *, tenant_id: TenantId, name: str) -> LookupEntity:
    return LOOKUP_CLASS_BY_KIND[kind](tenant_id=tenant_id, name=name)
