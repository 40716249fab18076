"""SQLAlchemy mapping metadata for the catalog domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    event,
    orm,
)

from kollector.adapters.sqlalchemy.codec import (
    DecodeError,
    decode_id_list,
    decode_images,
    decode_links,
    decode_media,
    decode_purchase_info,
    encode_id_list,
    encode_images,
    encode_links,
    encode_media,
    encode_purchase_info,
)
from kollector.domain.model import (
    LOOKUP_CLASS_BY_KIND,
    LookupKind,
    Medium,
    PurchaseInfo,
    Release,
    ReleaseImages,
    ReleaseLink,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class EncodedValueType[TValue](TypeDecorator[TValue]):
    """Text column holding a codec-encoded value.

    Rows that fail to decode load as the empty value and are logged; they are
    not raised into the caller.
    """

    impl = Text
    cache_ok = True
    empty: ClassVar[Any] = None

    def encode(self, value: Any) -> str | None:
        raise NotImplementedError

    def decode(self, text: str) -> Any:
        raise NotImplementedError

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return self.encode(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> Any:
        _ = dialect
        if value is None or not str(value).strip():
            return self.empty
        try:
            return self.decode(str(value))
        except DecodeError as exc:
            log.warning(
                "Treating undecodable %s column value as absent: %s", type(self).__name__, exc
            )
            return self.empty


class IdListType(EncodedValueType[tuple[int, ...]]):
    empty = ()

    def encode(self, value: Any) -> str | None:
        return encode_id_list(value)

    def decode(self, text: str) -> tuple[int, ...]:
        return decode_id_list(text)


class PurchaseInfoType(EncodedValueType[PurchaseInfo | None]):
    def encode(self, value: Any) -> str | None:
        return encode_purchase_info(value)

    def decode(self, text: str) -> PurchaseInfo | None:
        return decode_purchase_info(text)


class ImagesType(EncodedValueType[ReleaseImages | None]):
    def encode(self, value: Any) -> str | None:
        return encode_images(value)

    def decode(self, text: str) -> ReleaseImages | None:
        return decode_images(text)


class LinkListType(EncodedValueType[tuple[ReleaseLink, ...]]):
    empty = ()

    def encode(self, value: Any) -> str | None:
        return encode_links(value)

    def decode(self, text: str) -> tuple[ReleaseLink, ...]:
        return decode_links(text)


class MediaListType(EncodedValueType[tuple[Medium, ...]]):
    empty = ()

    def encode(self, value: Any) -> str | None:
        return encode_media(value)

    def decode(self, text: str) -> tuple[Medium, ...]:
        return decode_media(text)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Lookup tables ---------------------------------------------------------------


def _lookup_table(name: str) -> Table:
    # name_key is not unique: two concurrent requests may both create the same name
    return Table(
        name,
        mapper_registry.metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("tenant_id", UUIDColumnType, nullable=False),
        Column("name", String(200), nullable=False),
        Column("name_key", String(200), nullable=False),
        Index(f"ix_{name}_tenant_name_key", "tenant_id", "name_key"),
    )


LOOKUP_TABLE_BY_KIND: dict[LookupKind, Table] = {
    kind: _lookup_table(kind.value) for kind in LookupKind
}

artist_table = LOOKUP_TABLE_BY_KIND[LookupKind.ARTIST]
genre_table = LOOKUP_TABLE_BY_KIND[LookupKind.GENRE]
label_table = LOOKUP_TABLE_BY_KIND[LookupKind.LABEL]
country_table = LOOKUP_TABLE_BY_KIND[LookupKind.COUNTRY]
format_table = LOOKUP_TABLE_BY_KIND[LookupKind.FORMAT]
packaging_table = LOOKUP_TABLE_BY_KIND[LookupKind.PACKAGING]
store_table = LOOKUP_TABLE_BY_KIND[LookupKind.STORE]

# Releases --------------------------------------------------------------------


def _lookup_fk(table: Table) -> ForeignKey:
    return ForeignKey(table.c.id, ondelete="SET NULL")


release_table = Table(
    "release",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", UUIDColumnType, nullable=False, index=True),
    Column("title", String(300), nullable=False),
    Column("release_date", Date, nullable=True),
    Column("original_release_date", Date, nullable=True),
    Column("live", Boolean, nullable=False, default=False),
    Column("catalog_number", String(100), nullable=True),
    Column("catalog_key", String(400), nullable=True),
    Column("upc", String(50), nullable=True),
    Column("duration_seconds", Integer, nullable=True),
    Column("notes", Text, nullable=True),
    Column("external_ref", Integer, nullable=True),
    Column("artist_ids", IdListType(), nullable=True),
    Column("genre_ids", IdListType(), nullable=True),
    Column("label_id", Integer, _lookup_fk(label_table), nullable=True),
    Column("country_id", Integer, _lookup_fk(country_table), nullable=True),
    Column("format_id", Integer, _lookup_fk(format_table), nullable=True),
    Column("packaging_id", Integer, _lookup_fk(packaging_table), nullable=True),
    Column("purchase_info", PurchaseInfoType(), nullable=True),
    Column("images", ImagesType(), nullable=True),
    Column("links", LinkListType(), nullable=True),
    Column("media", MediaListType(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
    UniqueConstraint("tenant_id", "external_ref"),
    Index("ix_release_tenant_catalog_key", "tenant_id", "catalog_key"),
)


def _sync_release_keys(mapper: Any, connection: Any, target: Release) -> None:
    # catalog_number may have been assigned directly since the key was derived
    _ = mapper, connection
    target.sync_catalog_key()


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    for kind, lookup_cls in LOOKUP_CLASS_BY_KIND.items():
        table = LOOKUP_TABLE_BY_KIND[kind]
        mapper_registry.map_imperatively(
            lookup_cls,
            table,
            properties={"_name_key": table.c.name_key},
        )

    mapper_registry.map_imperatively(
        Release,
        release_table,
        properties={"_catalog_key": release_table.c.catalog_key},
    )
    event.listen(Release, "before_insert", _sync_release_keys)
    event.listen(Release, "before_update", _sync_release_keys)

    orm.configure_mappers()
    return mapper_registry


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    _ = connection_record
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def configure_engine(engine: Engine) -> None:
    """Install per-connection settings; call before the engine hands out connections."""

    if engine.dialect.name != "sqlite":
        return
    if not event.contains(engine, "connect", _enable_sqlite_foreign_keys):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
