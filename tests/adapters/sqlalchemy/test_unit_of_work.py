from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from kollector.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from kollector.domain.model import Artist

if TYPE_CHECKING:
    from collections.abc import Iterator
    from uuid import UUID

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyCatalogUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:")
    engine_b = create_engine("sqlite+pysqlite:///:memory:")

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_repositories_unavailable_outside_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyCatalogUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_commit_persists_across_units(sqlite_engine: Engine, tenant_id: UUID) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyCatalogUnitOfWork() as uow:
        uow.repositories.artists.add(Artist(tenant_id=tenant_id, name="Celtic Frost"))
        uow.commit()

    with SqlAlchemyCatalogUnitOfWork() as uow:
        assert uow.repositories.artists.count(tenant_id) == 1


def test_exception_rolls_back(sqlite_engine: Engine, tenant_id: UUID) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError, match="boom"), SqlAlchemyCatalogUnitOfWork() as uow:
        uow.repositories.artists.add(Artist(tenant_id=tenant_id, name="Hellhammer"))
        raise RuntimeError("boom")

    with SqlAlchemyCatalogUnitOfWork() as uow:
        assert uow.repositories.artists.count(tenant_id) == 0


def test_nested_enter_joins_outer_transaction(sqlite_engine: Engine, tenant_id: UUID) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyCatalogUnitOfWork()

    with uow:
        outer_session = uow.session
        with uow:
            assert uow.session is outer_session
            assert uow.depth == 2
            uow.repositories.artists.add(Artist(tenant_id=tenant_id, name="Sodom"))
            uow.commit()
        assert uow.depth == 1
        # the inner commit only flushed, so the outer rollback discards it
        uow.rollback()

    with SqlAlchemyCatalogUnitOfWork() as check:
        assert check.repositories.artists.count(tenant_id) == 0


def test_outer_commit_keeps_nested_work(sqlite_engine: Engine, tenant_id: UUID) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyCatalogUnitOfWork()

    with uow:
        with uow:
            uow.repositories.artists.add(Artist(tenant_id=tenant_id, name="Kreator"))
        uow.commit()

    assert uow.depth == 0
    with SqlAlchemyCatalogUnitOfWork() as check:
        assert check.repositories.artists.find_by_name(tenant_id, "KREATOR") is not None
