"""Resolve-or-create for lookup references."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kollector.domain.model import LookupKind, clean_text, new_lookup
from kollector.domain.tenancy import require_tenant

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kollector.domain.model import LookupEntity, LookupId, TenantId
    from kollector.domain.ports import CatalogRepositories

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LookupRef:
    id: LookupId
    name: str


@dataclass(slots=True)
class CreatedEntities:
    """Lookups created on the fly while handling one request."""

    artists: list[LookupRef] = field(default_factory=list)
    genres: list[LookupRef] = field(default_factory=list)
    labels: list[LookupRef] = field(default_factory=list)
    countries: list[LookupRef] = field(default_factory=list)
    formats: list[LookupRef] = field(default_factory=list)
    packagings: list[LookupRef] = field(default_factory=list)
    stores: list[LookupRef] = field(default_factory=list)

    def for_kind(self, kind: LookupKind) -> list[LookupRef]:
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

    def record(self, entity: LookupEntity) -> None:
        if entity.id is None:
            raise ValueError(f"{entity.kind.label} {entity.name!r} has no id yet")
        self.for_kind(entity.kind).append(LookupRef(id=entity.id, name=entity.name))

    @property
    def total(self) -> int:
        return sum(len(self.for_kind(kind)) for kind in LookupKind)

    @property
    def is_empty(self) -> bool:
        return self.total == 0


class EntityResolver:
    """Turns explicit IDs and free-text names into lookup IDs for one tenant.

    New lookups are written through the caller's repositories, so they share the
    caller's transaction and vanish with it on rollback.
    """

    def __init__(self, repositories: CatalogRepositories) -> None:
        self._repositories = repositories
        self.created = CreatedEntities()

    def resolve_or_create(
        self,
        kind: LookupKind,
        explicit_id: LookupId | None,
        name: str | None,
        tenant_id: TenantId | None,
    ) -> LookupId | None:
        tenant = require_tenant(tenant_id)
        if explicit_id is not None:
            # existence within the tenant is checked when the release is validated
            return explicit_id
        cleaned = clean_text(name)
        if cleaned is None:
            return None
        return self._resolve_name(kind, cleaned, tenant)

    def resolve_or_create_many(
        self,
        kind: LookupKind,
        explicit_ids: Iterable[LookupId] | None,
        names: Iterable[str] | None,
        tenant_id: TenantId | None,
    ) -> list[LookupId]:
        """IDs first, then resolved names; overlaps are kept as supplied."""

        tenant = require_tenant(tenant_id)
        resolved: list[LookupId] = list(explicit_ids or ())
        for name in names or ():
            cleaned = clean_text(name)
            if cleaned is None:
                continue
            resolved.append(self._resolve_name(kind, cleaned, tenant))
        return resolved

    def _resolve_name(self, kind: LookupKind, name: str, tenant_id: TenantId) -> LookupId:
        repository = self._repositories.lookups(kind)
        existing = repository.find_by_name(tenant_id, name)
        if existing is not None and existing.id is not None:
            log.debug("Resolved %s %r to existing id %s", kind, name, existing.id)
            return existing.id

        entity = new_lookup(kind, tenant_id=tenant_id, name=name)
        repository.add(entity)
        if entity.id is None:
            raise RuntimeError(f"{kind.label} {name!r} was not assigned an id on add")
        self.created.record(entity)
        log.info("Created %s %r (id=%s) for tenant %s", kind, name, entity.id, tenant_id)
        return entity.id
