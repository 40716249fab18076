"""Read-side operations over releases."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kollector.config import DEFAULT_CURRENCY
from kollector.domain.catalog.duplicates import DuplicateDetector
from kollector.domain.catalog.mapper import ReleaseMapper
from kollector.domain.errors import NotFoundError
from kollector.domain.tenancy import require_tenant

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from kollector.domain.catalog.views import ReleaseDetail, ReleaseSummary
    from kollector.domain.model import LookupId, ReleaseId, TenantId
    from kollector.domain.ports import CatalogRepositories, CatalogUnitOfWork

log = logging.getLogger(__name__)


class ReleaseQueries:
    def __init__(
        self,
        unit_of_work_factory: Callable[[], CatalogUnitOfWork],
        *,
        default_currency: str = DEFAULT_CURRENCY,
        image_base_url: str | None = None,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._default_currency = default_currency
        self._image_base_url = image_base_url

    def _mapper(self, repositories: CatalogRepositories) -> ReleaseMapper:
        return ReleaseMapper(
            repositories,
            default_currency=self._default_currency,
            image_base_url=self._image_base_url,
        )

    def get_detail(self, tenant_id: TenantId | None, release_id: ReleaseId) -> ReleaseDetail:
        tenant = require_tenant(tenant_id)
        with self._unit_of_work_factory() as uow:
            release = uow.repositories.releases.get(tenant, release_id)
            if release is None:
                raise NotFoundError("Release", release_id)
            return self._mapper(uow.repositories).to_detail(release)

    def get_summary(self, tenant_id: TenantId | None, release_id: ReleaseId) -> ReleaseSummary:
        tenant = require_tenant(tenant_id)
        with self._unit_of_work_factory() as uow:
            release = uow.repositories.releases.get(tenant, release_id)
            if release is None:
                raise NotFoundError("Release", release_id)
            return self._mapper(uow.repositories).to_summary(release)

    def check_duplicates(
        self,
        tenant_id: TenantId | None,
        *,
        title: str,
        catalog_number: str | None = None,
        artist_ids: Iterable[LookupId] | None = None,
        artist_names: Iterable[str] | None = None,
        exclude_release_id: ReleaseId | None = None,
    ) -> list[ReleaseSummary]:
        """Look for duplicates without writing; no tenant means nothing to compare."""

        if tenant_id is None:
            return []
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            detector = DuplicateDetector(repositories.releases, repositories.artists)
            matches = detector.find_duplicates(
                tenant_id,
                title=title,
                catalog_number=catalog_number,
                artist_ids=artist_ids,
                artist_names=artist_names,
                exclude_release_id=exclude_release_id,
            )
            mapper = self._mapper(repositories)
            return [mapper.to_summary(release) for release in matches]
