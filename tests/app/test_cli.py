from __future__ import annotations

import json
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from kollector.domain.catalog import LookupRef
from kollector.domain.errors import DuplicateRef, DuplicateReleaseError, NotFoundError
from kollector.domain.model import LookupKind
from kollector.ui import cli as cli_module

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path
    from uuid import UUID

    from kollector.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork

    UowFactory = Callable[[], SqlAlchemyCatalogUnitOfWork]


def test_releases_show_passes_tenant_and_id(
    monkeypatch: pytest.MonkeyPatch, tenant_id: UUID
) -> None:
    captured: dict[str, object] = {}

    def fake_show(tenant: object, release_id: object) -> dict[str, object]:
        captured.update(tenant=tenant, release_id=release_id)
        return {"id": release_id}

    monkeypatch.setattr(cli_module, "show_release", fake_show)

    cli_module.main(["releases", "show", "--tenant-id", str(tenant_id), "--id", "12"])

    assert captured == {"tenant": tenant_id, "release_id": 12}


def test_act_as_requires_admin(monkeypatch: pytest.MonkeyPatch, tenant_id: UUID) -> None:
    other = uuid4()
    seen: list[object] = []

    def fake_delete(tenant: object, release_id: object) -> None:
        _ = release_id
        seen.append(tenant)

    monkeypatch.setattr(cli_module, "delete_release", fake_delete)
    base = [
        "releases",
        "delete",
        "--tenant-id",
        str(tenant_id),
        "--id",
        "1",
        "--act-as",
        str(other),
    ]

    cli_module.main(base)
    cli_module.main([*base, "--admin"])

    assert seen == [tenant_id, other]


def test_lookups_add_parses_kind(monkeypatch: pytest.MonkeyPatch, tenant_id: UUID) -> None:
    captured: dict[str, object] = {}

    class FakeService:
        def create(self, tenant: object, kind: LookupKind, name: str) -> LookupRef:
            captured.update(tenant=tenant, kind=kind, name=name)
            return LookupRef(id=1, name=name)

    monkeypatch.setattr(cli_module, "build_lookup_service", FakeService)

    cli_module.main(
        ["lookups", "add", "--tenant-id", str(tenant_id), "--kind", "genre", "--name", "Doom"]
    )

    assert captured == {"tenant": tenant_id, "kind": LookupKind.GENRE, "name": "Doom"}


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (NotFoundError("Release", 5), 4),
        (DuplicateReleaseError([DuplicateRef(id=1, title="Black Metal")]), 6),
        (ValueError("bad input"), 2),
        (RuntimeError("boom"), 1),
    ],
)
def test_errors_map_to_exit_codes(
    monkeypatch: pytest.MonkeyPatch, tenant_id: UUID, error: Exception, code: int
) -> None:
    def failing_show(*_: object, **__: object) -> None:
        raise error

    monkeypatch.setattr(cli_module, "show_release", failing_show)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["releases", "show", "--tenant-id", str(tenant_id), "--id", "5"])

    assert excinfo.value.code == code


def test_invalid_tenant_id_is_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["releases", "show", "--tenant-id", "not-a-uuid", "--id", "1"])

    assert excinfo.value.code == 2


def test_release_add_and_show_round_trip(
    sqlite_unit_of_work: UowFactory,
    tenant_id: UUID,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _ = sqlite_unit_of_work
    release_path = tmp_path / "release.json"
    release_path.write_text(
        json.dumps({"title": "Black Metal", "artists": ["Bathory"], "genres": ["Black Metal"]}),
        encoding="utf-8",
    )
    tenant_args = ["--tenant-id", str(tenant_id)]

    cli_module.main(["releases", "add", *tenant_args, "--file", str(release_path)])
    added = json.loads(capsys.readouterr().out)
    cli_module.main(["releases", "show", *tenant_args, "--id", str(added["id"])])
    shown = json.loads(capsys.readouterr().out)

    assert shown["title"] == "Black Metal"
    assert [artist["name"] for artist in shown["artists"]] == ["Bathory"]
    assert shown["genres"] == added["genres"]

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["releases", "add", *tenant_args, "--file", str(release_path)])
    assert excinfo.value.code == 6
