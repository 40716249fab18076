"""SQLAlchemy-backed unit of work for the release catalog.

The adapter owns one engine per process. ``startup`` binds it, prepares the
schema and builds the session factory; every unit of work created afterwards
draws its session from that factory.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from kollector.adapters.sqlalchemy.mappings import (
    configure_engine,
    create_all_tables,
    start_mappers,
)
from kollector.adapters.sqlalchemy.repositories import (
    SqlAlchemyArtistRepository,
    SqlAlchemyCountryRepository,
    SqlAlchemyFormatRepository,
    SqlAlchemyGenreRepository,
    SqlAlchemyLabelRepository,
    SqlAlchemyPackagingRepository,
    SqlAlchemyReleaseRepository,
    SqlAlchemyStoreRepository,
)
from kollector.config import get_database_uri
from kollector.domain.ports.unit_of_work import CatalogRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """The adapter was used before ``startup`` or outside an open unit of work."""


@dataclass(frozen=True, slots=True)
class _Binding:
    engine: Engine
    sessions: sessionmaker[Session]


_binding: _Binding | None = None


def _current_binding() -> _Binding:
    if _binding is None:
        raise StartupError(
            "Catalog storage is not started; call "
            "kollector.adapters.sqlalchemy.unit_of_work.startup() first"
        )
    return _binding


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to an engine and create any missing tables.

    An explicit ``engine`` wins over ``database_uri``, which wins over the
    configured ``DATABASE_URI``. Rebinding a started adapter needs ``force``.
    """

    global _binding  # noqa: PLW0603

    if _binding is not None and not force:
        raise StartupError("Catalog storage already started; pass force=True to rebind it")

    bound = engine if engine is not None else create_engine(database_uri or get_database_uri())
    configure_engine(bound)
    start_mappers()
    create_all_tables(bound)
    _binding = _Binding(engine=bound, sessions=sessionmaker(bind=bound, expire_on_commit=False))
    log.info("Catalog storage bound to %s", bound.url.render_as_string(hide_password=True))


def configured_engine() -> Engine | None:
    return _binding.engine if _binding is not None else None


def is_started() -> bool:
    return _binding is not None


def shutdown() -> None:
    """Dispose the bound engine; a later ``startup`` may bind a new one."""

    global _binding  # noqa: PLW0603

    if _binding is not None:
        _binding.engine.dispose()
        log.debug("Catalog storage engine disposed")
    _binding = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session per outermost ``with`` block.

    Entering again while open joins the same session. A ``commit`` from a
    nested block only flushes, so the outermost block decides the outcome;
    ``rollback`` always discards the whole transaction. Leaving the outermost
    block on an exception rolls back before the session is closed.
    """

    def __init__(self) -> None:
        self._sessions = _current_binding().sessions
        self._session: Session | None = None
        self._repositories: TRepositories | None = None
        self._depth = 0

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is None:
            self._session = self._sessions()
            self._repositories = self._build_repositories(self._session)
        self._depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self._depth -= 1
        if self._depth == 0:
            session = self.session
            try:
                if exc_type is not None:
                    session.rollback()
            finally:
                session.close()
                self._session = None
                self._repositories = None
        return False

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open; use it as a context manager")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open; use it as a context manager")
        return self._repositories

    def commit(self) -> None:
        if self._depth > 1:
            self.session.flush()
        else:
            self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SqlAlchemyCatalogUnitOfWork(BaseSqlAlchemyUnitOfWork[CatalogRepositories]):
    def _build_repositories(self, session: Session) -> CatalogRepositories:
        return CatalogRepositories(
            artists=SqlAlchemyArtistRepository(session),
            genres=SqlAlchemyGenreRepository(session),
            labels=SqlAlchemyLabelRepository(session),
            countries=SqlAlchemyCountryRepository(session),
            formats=SqlAlchemyFormatRepository(session),
            packagings=SqlAlchemyPackagingRepository(session),
            stores=SqlAlchemyStoreRepository(session),
            releases=SqlAlchemyReleaseRepository(session),
        )


if TYPE_CHECKING:
    from kollector.domain.ports.unit_of_work import CatalogUnitOfWork

    _uow_check: CatalogUnitOfWork = SqlAlchemyCatalogUnitOfWork()
