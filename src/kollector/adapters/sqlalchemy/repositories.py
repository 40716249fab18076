"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from kollector.adapters.sqlalchemy.mappings import LOOKUP_TABLE_BY_KIND, release_table
from kollector.domain.model import (
    Artist,
    Country,
    Format,
    Genre,
    Label,
    LookupEntity,
    Packaging,
    Release,
    Store,
    name_key,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

    from kollector.domain.model import ExternalRef, LookupId, ReleaseId, TenantId


class SqlAlchemyLookupRepository[TLookup: LookupEntity]:
    """Tenant-scoped persistence shared by every lookup kind."""

    def __init__(self, session: Session, lookup_cls: type[TLookup]) -> None:
        self.session = session
        self._lookup_cls = lookup_cls
        self._table = LOOKUP_TABLE_BY_KIND[lookup_cls.KIND]

    def add(self, entity: TLookup) -> None:
        self.session.add(entity)
        # callers need the generated id straight away
        self.session.flush()

    def remove(self, entity: TLookup) -> None:
        self.session.delete(entity)
        self.session.flush()

    def get(self, tenant_id: TenantId, lookup_id: LookupId) -> TLookup | None:
        stmt = (
            select(self._lookup_cls)
            .where(self._table.c.tenant_id == tenant_id)
            .where(self._table.c.id == lookup_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_many(
        self, tenant_id: TenantId, lookup_ids: Iterable[LookupId]
    ) -> dict[LookupId, TLookup]:
        wanted = set(lookup_ids)
        if not wanted:
            return {}
        stmt = (
            select(self._lookup_cls)
            .where(self._table.c.tenant_id == tenant_id)
            .where(self._table.c.id.in_(wanted))
        )
        found: dict[LookupId, TLookup] = {}
        for entity in self.session.execute(stmt).scalars():
            if entity.id is not None:
                found[entity.id] = entity
        return found

    def find_by_name(self, tenant_id: TenantId, name: str) -> TLookup | None:
        key = name_key(name)
        if not key:
            return None
        stmt = (
            select(self._lookup_cls)
            .where(self._table.c.tenant_id == tenant_id)
            .where(self._table.c.name_key == key)
            .order_by(self._table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def list(self, tenant_id: TenantId) -> list[TLookup]:
        stmt = (
            select(self._lookup_cls)
            .where(self._table.c.tenant_id == tenant_id)
            .order_by(self._table.c.name_key, self._table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def count(self, tenant_id: TenantId) -> int:
        stmt = (
            select(func.count())
            .select_from(self._table)
            .where(self._table.c.tenant_id == tenant_id)
        )
        return self.session.execute(stmt).scalar_one()


class SqlAlchemyArtistRepository(SqlAlchemyLookupRepository[Artist]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Artist)


class SqlAlchemyGenreRepository(SqlAlchemyLookupRepository[Genre]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Genre)


class SqlAlchemyLabelRepository(SqlAlchemyLookupRepository[Label]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Label)


class SqlAlchemyCountryRepository(SqlAlchemyLookupRepository[Country]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Country)


class SqlAlchemyFormatRepository(SqlAlchemyLookupRepository[Format]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Format)


class SqlAlchemyPackagingRepository(SqlAlchemyLookupRepository[Packaging]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Packaging)


class SqlAlchemyStoreRepository(SqlAlchemyLookupRepository[Store]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Store)


class SqlAlchemyReleaseRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Release) -> None:
        self.session.add(entity)
        self.session.flush()

    def update(self, release: Release) -> None:
        _ = release
        self.session.flush()

    def remove(self, entity: Release) -> None:
        self.session.delete(entity)
        self.session.flush()

    def get(self, tenant_id: TenantId, release_id: ReleaseId) -> Release | None:
        stmt = (
            select(Release)
            .where(release_table.c.tenant_id == tenant_id)
            .where(release_table.c.id == release_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_external_ref(
        self, tenant_id: TenantId, external_ref: ExternalRef
    ) -> Release | None:
        stmt = (
            select(Release)
            .where(release_table.c.tenant_id == tenant_id)
            .where(release_table.c.external_ref == external_ref)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def find_by_catalog_number(self, tenant_id: TenantId, catalog_number: str) -> list[Release]:
        key = name_key(catalog_number)
        if not key:
            return []
        stmt = (
            select(Release)
            .where(release_table.c.tenant_id == tenant_id)
            .where(release_table.c.catalog_key == key)
            .order_by(release_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def list(self, tenant_id: TenantId) -> list[Release]:
        stmt = (
            select(Release)
            .where(release_table.c.tenant_id == tenant_id)
            .order_by(release_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def count(self, tenant_id: TenantId) -> int:
        stmt = (
            select(func.count())
            .select_from(release_table)
            .where(release_table.c.tenant_id == tenant_id)
        )
        return self.session.execute(stmt).scalar_one()
