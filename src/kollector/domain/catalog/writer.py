"""Transactional create/update/delete of releases."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from kollector.config import DEFAULT_CURRENCY
from kollector.domain.catalog.duplicates import DuplicateDetector
from kollector.domain.catalog.mapper import ReleaseMapper
from kollector.domain.catalog.resolver import CreatedEntities, EntityResolver
from kollector.domain.catalog.validation import validate_release
from kollector.domain.errors import (
    CatalogError,
    DuplicateRef,
    DuplicateReleaseError,
    NotFoundError,
    StorageError,
)
from kollector.domain.model import (
    LookupKind,
    PurchaseInfo,
    Release,
    ReleaseImages,
    clean_text,
)
from kollector.domain.tenancy import require_tenant

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from kollector.domain.catalog.requests import (
        CreateReleaseRequest,
        PurchaseInfoInput,
        ReleaseFields,
        UpdateReleaseRequest,
    )
    from kollector.domain.catalog.views import ReleaseDetail
    from kollector.domain.model import LookupId, ReleaseId, TenantId
    from kollector.domain.ports import CatalogRepositories, CatalogUnitOfWork

log = logging.getLogger(__name__)


class WriteStage(StrEnum):
    STARTED = "started"
    ENTITIES_RESOLVED = "entities_resolved"
    VALIDATED = "validated"
    DUPLICATE_CHECKED = "duplicate_checked"
    PERSISTED = "persisted"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


_TERMINAL = frozenset({WriteStage.COMMITTED, WriteStage.ROLLED_BACK})
_ORDER = (
    WriteStage.STARTED,
    WriteStage.ENTITIES_RESOLVED,
    WriteStage.VALIDATED,
    WriteStage.DUPLICATE_CHECKED,
    WriteStage.PERSISTED,
    WriteStage.COMMITTED,
)


@dataclass(slots=True)
class WriteProgress:
    """Stage tracker for one write; stages only move forward."""

    operation: str
    stage: WriteStage = WriteStage.STARTED
    history: list[WriteStage] = field(default_factory=lambda: [WriteStage.STARTED])

    def advance(self, stage: WriteStage) -> None:
        if self.stage in _TERMINAL:
            raise RuntimeError(f"{self.operation}: already {self.stage}, cannot move to {stage}")
        if stage is not WriteStage.ROLLED_BACK and _ORDER.index(stage) <= _ORDER.index(self.stage):
            raise RuntimeError(f"{self.operation}: cannot move from {self.stage} to {stage}")
        log.debug("%s: %s -> %s", self.operation, self.stage, stage)
        self.stage = stage
        self.history.append(stage)

    def roll_back(self) -> WriteStage:
        failed_at = self.stage
        if self.stage not in _TERMINAL:
            self.advance(WriteStage.ROLLED_BACK)
        return failed_at


@dataclass(frozen=True, slots=True)
class ReleaseWriteResult:
    release: Release
    view: ReleaseDetail
    created: CreatedEntities | None
    stages: tuple[WriteStage, ...] = ()


@dataclass(frozen=True, slots=True)
class _ResolvedReferences:
    artist_ids: list[LookupId]
    genre_ids: list[LookupId]
    label_id: LookupId | None
    country_id: LookupId | None
    format_id: LookupId | None
    packaging_id: LookupId | None
    purchase_info: PurchaseInfo | None

    def by_kind(self) -> dict[LookupKind, list[LookupId | None]]:
        store_id = self.purchase_info.store_id if self.purchase_info is not None else None
        return {
            LookupKind.ARTIST: list(self.artist_ids),
            LookupKind.GENRE: list(self.genre_ids),
            LookupKind.LABEL: [self.label_id],
            LookupKind.COUNTRY: [self.country_id],
            LookupKind.FORMAT: [self.format_id],
            LookupKind.PACKAGING: [self.packaging_id],
            LookupKind.STORE: [store_id],
        }


class ReleaseWriter:
    """Create, update and delete releases inside one transaction each.

    Lookup resolution happens before duplicate detection, which happens before
    the release is written. Any failure rolls the whole transaction back,
    including lookups created earlier in the same request.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], CatalogUnitOfWork],
        *,
        default_currency: str = DEFAULT_CURRENCY,
        image_base_url: str | None = None,
        check_duplicates_on_update: bool = False,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._default_currency = default_currency
        self._image_base_url = image_base_url
        self._check_duplicates_on_update = check_duplicates_on_update

    # Create ------------------------------------------------------------------

    def create(
        self, tenant_id: TenantId | None, request: CreateReleaseRequest
    ) -> ReleaseWriteResult:
        tenant = require_tenant(tenant_id)
        progress = WriteProgress("create")
        log.info("Creating release %r for tenant %s", request.title, tenant)

        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            try:
                resolver = EntityResolver(repositories)
                resolved = self._resolve_for_create(resolver, tenant, request)
                progress.advance(WriteStage.ENTITIES_RESOLVED)

                validate_release(
                    request,
                    artist_ids=resolved.artist_ids,
                    require_artists=True,
                    references=resolved.by_kind(),
                    repositories=repositories,
                    tenant_id=tenant,
                )
                progress.advance(WriteStage.VALIDATED)

                self._ensure_not_duplicate(
                    repositories,
                    tenant,
                    request,
                    artist_ids=resolved.artist_ids,
                    exclude_release_id=None,
                )
                progress.advance(WriteStage.DUPLICATE_CHECKED)

                release = Release(tenant_id=tenant, title=request.title.strip())
                self._apply(release, request, resolved)
                release.touch()
                repositories.releases.add(release)
                progress.advance(WriteStage.PERSISTED)

                view = self._mapper(repositories).to_detail(release)
                uow.commit()
                progress.advance(WriteStage.COMMITTED)
            except CatalogError as exc:
                self._roll_back(uow, progress, tenant, request.title, exc)
                raise
            except Exception as exc:
                self._roll_back(uow, progress, tenant, request.title, exc)
                raise StorageError("An error occurred while creating the release") from exc

        log.info(
            "Created release %s %r for tenant %s (%d new lookups)",
            release.id,
            release.title,
            tenant,
            resolver.created.total,
        )
        return ReleaseWriteResult(
            release=release,
            view=view,
            created=None if resolver.created.is_empty else resolver.created,
            stages=tuple(progress.history),
        )

    # Update ------------------------------------------------------------------

    def update(
        self,
        tenant_id: TenantId | None,
        release_id: ReleaseId,
        request: UpdateReleaseRequest,
    ) -> ReleaseWriteResult:
        tenant = require_tenant(tenant_id)
        progress = WriteProgress("update")
        log.info("Updating release %s for tenant %s", release_id, tenant)

        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            try:
                release = repositories.releases.get(tenant, release_id)
                if release is None:
                    raise NotFoundError("Release", release_id)  # noqa: TRY301

                resolver = EntityResolver(repositories)
                resolved = _ResolvedReferences(
                    artist_ids=list(request.artist_ids),
                    genre_ids=list(request.genre_ids),
                    label_id=request.label_id,
                    country_id=request.country_id,
                    format_id=request.format_id,
                    packaging_id=request.packaging_id,
                    purchase_info=self._purchase_info(resolver, tenant, request.purchase_info),
                )
                progress.advance(WriteStage.ENTITIES_RESOLVED)

                validate_release(
                    request,
                    artist_ids=resolved.artist_ids,
                    require_artists=True,
                    references=resolved.by_kind(),
                    repositories=repositories,
                    tenant_id=tenant,
                )
                progress.advance(WriteStage.VALIDATED)

                if self._check_duplicates_on_update:
                    self._ensure_not_duplicate(
                        repositories,
                        tenant,
                        request,
                        artist_ids=resolved.artist_ids,
                        exclude_release_id=release_id,
                    )
                else:
                    self._ensure_external_ref_free(
                        repositories, tenant, request, exclude_release_id=release_id
                    )
                progress.advance(WriteStage.DUPLICATE_CHECKED)

                release.title = request.title.strip()
                self._apply(release, request, resolved)
                release.touch()
                repositories.releases.update(release)
                progress.advance(WriteStage.PERSISTED)

                view = self._mapper(repositories).to_detail(release)
                uow.commit()
                progress.advance(WriteStage.COMMITTED)
            except CatalogError as exc:
                self._roll_back(uow, progress, tenant, request.title, exc)
                raise
            except Exception as exc:
                self._roll_back(uow, progress, tenant, request.title, exc)
                raise StorageError("An error occurred while updating the release") from exc

        return ReleaseWriteResult(
            release=release,
            view=view,
            created=None if resolver.created.is_empty else resolver.created,
            stages=tuple(progress.history),
        )

    # Delete ------------------------------------------------------------------

    def delete(self, tenant_id: TenantId | None, release_id: ReleaseId) -> None:
        tenant = require_tenant(tenant_id)
        log.info("Deleting release %s for tenant %s", release_id, tenant)

        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            try:
                release = repositories.releases.get(tenant, release_id)
                if release is None:
                    raise NotFoundError("Release", release_id)  # noqa: TRY301
                title = release.title
                repositories.releases.remove(release)
                uow.commit()
            except CatalogError:
                uow.rollback()
                raise
            except Exception as exc:
                log.exception("Error deleting release %s for tenant %s", release_id, tenant)
                uow.rollback()
                raise StorageError("An error occurred while deleting the release") from exc

        log.info("Deleted release %s %r for tenant %s", release_id, title, tenant)

    # Helpers -----------------------------------------------------------------

    def _mapper(self, repositories: CatalogRepositories) -> ReleaseMapper:
        return ReleaseMapper(
            repositories,
            default_currency=self._default_currency,
            image_base_url=self._image_base_url,
        )

    def _resolve_for_create(
        self,
        resolver: EntityResolver,
        tenant_id: TenantId,
        request: CreateReleaseRequest,
    ) -> _ResolvedReferences:
        return _ResolvedReferences(
            artist_ids=resolver.resolve_or_create_many(
                LookupKind.ARTIST, request.artist_ids, request.artist_names, tenant_id
            ),
            genre_ids=resolver.resolve_or_create_many(
                LookupKind.GENRE, request.genre_ids, request.genre_names, tenant_id
            ),
            label_id=resolver.resolve_or_create(
                LookupKind.LABEL, request.label_id, request.label_name, tenant_id
            ),
            country_id=resolver.resolve_or_create(
                LookupKind.COUNTRY, request.country_id, request.country_name, tenant_id
            ),
            format_id=resolver.resolve_or_create(
                LookupKind.FORMAT, request.format_id, request.format_name, tenant_id
            ),
            packaging_id=resolver.resolve_or_create(
                LookupKind.PACKAGING, request.packaging_id, request.packaging_name, tenant_id
            ),
            purchase_info=self._purchase_info(resolver, tenant_id, request.purchase_info),
        )

    @staticmethod
    def _purchase_info(
        resolver: EntityResolver,
        tenant_id: TenantId,
        purchase: PurchaseInfoInput | None,
    ) -> PurchaseInfo | None:
        if purchase is None:
            return None
        store_id = resolver.resolve_or_create(
            LookupKind.STORE, purchase.store_id, purchase.store_name, tenant_id
        )
        currency = clean_text(purchase.currency)
        info = PurchaseInfo(
            store_id=store_id,
            price=purchase.price,
            currency=currency.upper() if currency else None,
            purchased_on=purchase.purchased_on,
            notes=clean_text(purchase.notes),
        )
        return None if info.is_empty else info

    def _ensure_not_duplicate(
        self,
        repositories: CatalogRepositories,
        tenant_id: TenantId,
        fields: ReleaseFields,
        *,
        artist_ids: Sequence[LookupId],
        exclude_release_id: ReleaseId | None,
    ) -> None:
        self._ensure_external_ref_free(
            repositories, tenant_id, fields, exclude_release_id=exclude_release_id
        )
        detector = DuplicateDetector(repositories.releases, repositories.artists)
        duplicates = detector.find_duplicates(
            tenant_id,
            title=fields.title,
            catalog_number=fields.catalog_number,
            artist_ids=artist_ids,
            exclude_release_id=exclude_release_id,
        )
        if duplicates:
            raise DuplicateReleaseError(
                DuplicateRef(id=release.id, title=release.title)
                for release in duplicates
                if release.id is not None
            )

    @staticmethod
    def _ensure_external_ref_free(
        repositories: CatalogRepositories,
        tenant_id: TenantId,
        fields: ReleaseFields,
        *,
        exclude_release_id: ReleaseId | None,
    ) -> None:
        if fields.external_ref is None:
            return
        existing = repositories.releases.get_by_external_ref(tenant_id, fields.external_ref)
        if existing is None or existing.id is None or existing.id == exclude_release_id:
            return
        raise DuplicateReleaseError(
            [DuplicateRef(id=existing.id, title=existing.title)],
            message=(
                f"Release with external reference {fields.external_ref} already exists: "
                f"'{existing.title}' (ID: {existing.id})"
            ),
        )

    @staticmethod
    def _apply(release: Release, fields: ReleaseFields, resolved: _ResolvedReferences) -> None:
        release.release_date = fields.release_date
        release.original_release_date = fields.original_release_date
        release.live = fields.live
        release.catalog_number = clean_text(fields.catalog_number)
        release.upc = clean_text(fields.upc)
        release.duration_seconds = fields.duration_seconds
        release.notes = clean_text(fields.notes)
        release.external_ref = fields.external_ref

        release.artist_ids = tuple(resolved.artist_ids)
        release.genre_ids = tuple(resolved.genre_ids)
        release.label_id = resolved.label_id
        release.country_id = resolved.country_id
        release.format_id = resolved.format_id
        release.packaging_id = resolved.packaging_id

        release.purchase_info = resolved.purchase_info
        release.images = _normalized_images(fields.images)
        release.links = tuple(fields.links)
        release.media = tuple(fields.media)

    @staticmethod
    def _roll_back(
        uow: CatalogUnitOfWork,
        progress: WriteProgress,
        tenant_id: TenantId,
        title: str,
        exc: Exception,
    ) -> None:
        uow.rollback()
        failed_at = progress.roll_back()
        if isinstance(exc, CatalogError):
            log.warning(
                "Rolled back %s of %r for tenant %s at stage %s: %s",
                progress.operation,
                title,
                tenant_id,
                failed_at,
                exc,
            )
        else:
            log.exception(
                "Error during %s of %r for tenant %s at stage %s; rolled back",
                progress.operation,
                title,
                tenant_id,
                failed_at,
            )


def _normalized_images(images: ReleaseImages | None) -> ReleaseImages | None:
    if images is None:
        return None
    normalized = ReleaseImages.from_values(
        cover_front=images.cover_front,
        cover_back=images.cover_back,
        thumbnail=images.thumbnail,
    )
    return None if normalized.is_empty else normalized
