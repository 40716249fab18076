"""Maintenance of lookup entities outside release ingestion."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kollector.domain.catalog.resolver import EntityResolver, LookupRef
from kollector.domain.errors import DuplicateLookupError, NotFoundError
from kollector.domain.model import clean_text, new_lookup
from kollector.domain.tenancy import require_tenant

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from kollector.domain.model import LookupEntity, LookupId, LookupKind, TenantId
    from kollector.domain.ports import CatalogUnitOfWork, LookupRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SeedResult:
    kind: LookupKind
    created: int
    existing: int


def _ref(entity: LookupEntity) -> LookupRef:
    if entity.id is None:
        raise ValueError(f"{entity.kind.label} {entity.name!r} has no id yet")
    return LookupRef(id=entity.id, name=entity.name)


class LookupService:
    """Per-tenant CRUD for any lookup kind, plus idempotent bulk seeding."""

    def __init__(self, unit_of_work_factory: Callable[[], CatalogUnitOfWork]) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    def list(self, tenant_id: TenantId | None, kind: LookupKind) -> list[LookupRef]:
        tenant = require_tenant(tenant_id)
        with self._unit_of_work_factory() as uow:
            return [_ref(entity) for entity in uow.repositories.lookups(kind).list(tenant)]

    def get(self, tenant_id: TenantId | None, kind: LookupKind, lookup_id: LookupId) -> LookupRef:
        tenant = require_tenant(tenant_id)
        with self._unit_of_work_factory() as uow:
            return _ref(self._require(uow.repositories.lookups(kind), kind, tenant, lookup_id))

    def create(self, tenant_id: TenantId | None, kind: LookupKind, name: str) -> LookupRef:
        tenant = require_tenant(tenant_id)
        cleaned = clean_text(name)
        if cleaned is None:
            raise ValueError(f"{kind.label} name must not be blank")
        with self._unit_of_work_factory() as uow:
            repository = uow.repositories.lookups(kind)
            if repository.find_by_name(tenant, cleaned) is not None:
                raise DuplicateLookupError(kind.label, cleaned)
            entity = new_lookup(kind, tenant_id=tenant, name=cleaned)
            repository.add(entity)
            ref = _ref(entity)
            uow.commit()
        log.info("Created %s %r (id=%s) for tenant %s", kind, ref.name, ref.id, tenant)
        return ref

    def rename(
        self,
        tenant_id: TenantId | None,
        kind: LookupKind,
        lookup_id: LookupId,
        name: str,
    ) -> LookupRef:
        tenant = require_tenant(tenant_id)
        with self._unit_of_work_factory() as uow:
            repository = uow.repositories.lookups(kind)
            entity = self._require(repository, kind, tenant, lookup_id)
            clash = None if entity.matches(name) else repository.find_by_name(tenant, name)
            if clash is not None:
                raise DuplicateLookupError(kind.label, name.strip())
            entity.rename(name)
            ref = _ref(entity)
            uow.commit()
        return ref

    def delete(self, tenant_id: TenantId | None, kind: LookupKind, lookup_id: LookupId) -> None:
        """Remove a lookup; releases that list it show a placeholder afterwards."""

        tenant = require_tenant(tenant_id)
        with self._unit_of_work_factory() as uow:
            repository = uow.repositories.lookups(kind)
            repository.remove(self._require(repository, kind, tenant, lookup_id))
            uow.commit()
        log.info("Deleted %s %s for tenant %s", kind, lookup_id, tenant)

    def seed(
        self, tenant_id: TenantId | None, kind: LookupKind, names: Iterable[str]
    ) -> SeedResult:
        """Create every name not already present; safe to run repeatedly."""

        tenant = require_tenant(tenant_id)
        requested = 0
        with self._unit_of_work_factory() as uow:
            resolver = EntityResolver(uow.repositories)
            for name in names:
                if resolver.resolve_or_create(kind, None, name, tenant) is not None:
                    requested += 1
            uow.commit()
        created = len(resolver.created.for_kind(kind))
        result = SeedResult(kind=kind, created=created, existing=requested - created)
        log.info(
            "Seeded %s for tenant %s: created=%s, existing=%s",
            kind,
            tenant,
            result.created,
            result.existing,
        )
        return result

    @staticmethod
    def _require(
        repository: LookupRepository[LookupEntity],
        kind: LookupKind,
        tenant_id: TenantId,
        lookup_id: LookupId,
    ) -> LookupEntity:
        entity = repository.get(tenant_id, lookup_id)
        if entity is None:
            raise NotFoundError(kind.label, lookup_id)
        return entity
