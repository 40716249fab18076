"""Ports for persisting domain aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from kollector.domain.model import LookupEntity, Release

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kollector.domain.model import ExternalRef, LookupId, ReleaseId, TenantId


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store.

    ``add`` makes the entity's identity available immediately; ``remove`` is
    applied with the surrounding transaction.
    """

    def add(self, entity: TEntity) -> None: ...

    def remove(self, entity: TEntity) -> None: ...


@runtime_checkable
class LookupRepository[TLookup: LookupEntity](Repository[TLookup], Protocol):
    """Tenant-scoped store for one lookup kind."""

    def get(self, tenant_id: TenantId, lookup_id: LookupId) -> TLookup | None: ...

    def get_many(
        self, tenant_id: TenantId, lookup_ids: Iterable[LookupId]
    ) -> dict[LookupId, TLookup]: ...

    def find_by_name(self, tenant_id: TenantId, name: str) -> TLookup | None:
        """Case-insensitive match on the trimmed name."""
        ...

    def list(self, tenant_id: TenantId) -> list[TLookup]: ...

    def count(self, tenant_id: TenantId) -> int: ...


@runtime_checkable
class ReleaseRepository(Repository[Release], Protocol):
    """Tenant-scoped store for releases."""

    def get(self, tenant_id: TenantId, release_id: ReleaseId) -> Release | None: ...

    def get_by_external_ref(
        self, tenant_id: TenantId, external_ref: ExternalRef
    ) -> Release | None: ...

    def find_by_catalog_number(self, tenant_id: TenantId, catalog_number: str) -> list[Release]:
        """Exact match after trimming and lower-casing both sides."""
        ...

    def list(self, tenant_id: TenantId) -> list[Release]: ...

    def update(self, release: Release) -> None: ...

    def count(self, tenant_id: TenantId) -> int: ...
