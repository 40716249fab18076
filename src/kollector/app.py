"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from kollector.adapters.release_file import load_lookup_seed_file, load_release_file
from kollector.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from kollector.config import get_catalog_config
from kollector.domain.catalog import (
    LookupService,
    ReleaseQueries,
    ReleaseWriter,
)
from kollector.domain.ports import CatalogUnitOfWork

if TYPE_CHECKING:
    from pathlib import Path

    from kollector.config import CatalogConfig
    from kollector.domain.catalog import ReleaseDetail, ReleaseWriteResult, SeedResult
    from kollector.domain.model import ReleaseId, TenantId

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


log = getLogger(__name__)


def _ensure_started(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyCatalogUnitOfWork


def build_release_writer(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: CatalogConfig | None = None,
) -> ReleaseWriter:
    effective_config = config or get_catalog_config()
    return ReleaseWriter(
        _ensure_started(unit_of_work_factory),
        default_currency=effective_config.default_currency,
        image_base_url=effective_config.image_base_url,
        check_duplicates_on_update=effective_config.check_duplicates_on_update,
    )


def build_release_queries(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: CatalogConfig | None = None,
) -> ReleaseQueries:
    effective_config = config or get_catalog_config()
    return ReleaseQueries(
        _ensure_started(unit_of_work_factory),
        default_currency=effective_config.default_currency,
        image_base_url=effective_config.image_base_url,
    )


def build_lookup_service(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> LookupService:
    return LookupService(_ensure_started(unit_of_work_factory))


def add_release_from_file(
    tenant_id: TenantId | None,
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ReleaseWriteResult:
    """Create a release described by a JSON file."""

    request = load_release_file(path)
    result = build_release_writer(unit_of_work_factory=unit_of_work_factory).create(
        tenant_id, request
    )
    created = result.created
    log.info(
        f"Stored release {result.release.id} {result.release.title!r}; "
        f"new lookups={created.total if created else 0}"
    )
    return result


def seed_lookups_from_file(
    tenant_id: TenantId | None,
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[SeedResult]:
    """Seed lookup names from a JSON object keyed by lookup kind."""

    seed_file = load_lookup_seed_file(path)
    service = build_lookup_service(unit_of_work_factory=unit_of_work_factory)
    return [service.seed(tenant_id, kind, names) for kind, names in seed_file.names.items()]


def show_release(
    tenant_id: TenantId | None,
    release_id: ReleaseId,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ReleaseDetail:
    return build_release_queries(unit_of_work_factory=unit_of_work_factory).get_detail(
        tenant_id, release_id
    )


def delete_release(
    tenant_id: TenantId | None,
    release_id: ReleaseId,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> None:
    build_release_writer(unit_of_work_factory=unit_of_work_factory).delete(tenant_id, release_id)
