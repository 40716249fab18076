from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from dotenv import load_dotenv

from kollector.app import (
    add_release_from_file,
    build_lookup_service,
    delete_release,
    seed_lookups_from_file,
    show_release,
)
from kollector.config import configure_logging
from kollector.domain.errors import CatalogError, DuplicateReleaseError, ErrorKind
from kollector.domain.model import LookupKind
from kollector.domain.tenancy import TenantContext

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHENTICATED: 3,
    ErrorKind.NOT_FOUND: 4,
    ErrorKind.VALIDATION: 5,
    ErrorKind.DUPLICATE: 6,
    ErrorKind.STORAGE: 1,
}


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid UUID: {value}") from exc


def _add_tenant_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--tenant-id",
        type=_parse_uuid,
        required=True,
        help="Tenant (user) the command runs as",
    )
    parser.add_argument(
        "--act-as",
        type=_parse_uuid,
        help="Tenant to act on behalf of (requires --admin)",
    )
    parser.add_argument(
        "--admin",
        action="store_true",
        help="Caller has administrator rights",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the Kollector release catalog")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookups = subparsers.add_parser("lookups", help="Lookup (artist, genre, ...) commands")
    lookups_sub = lookups.add_subparsers(dest="lookups_command", required=True)

    seed = lookups_sub.add_parser("seed", help="Seed lookup names from a JSON file")
    _add_tenant_arguments(seed)
    seed.add_argument(
        "--file",
        type=Path,
        required=True,
        help='JSON object such as {"artists": ["Bathory"], "genres": ["Black Metal"]}',
    )

    add_lookup = lookups_sub.add_parser("add", help="Create a single lookup")
    _add_tenant_arguments(add_lookup)
    add_lookup.add_argument(
        "--kind",
        type=LookupKind,
        choices=list(LookupKind),
        required=True,
        help="Lookup kind",
    )
    add_lookup.add_argument("--name", type=str, required=True, help="Lookup name")

    releases = subparsers.add_parser("releases", help="Release commands")
    releases_sub = releases.add_subparsers(dest="releases_command", required=True)

    add_release = releases_sub.add_parser("add", help="Create a release from a JSON file")
    _add_tenant_arguments(add_release)
    add_release.add_argument("--file", type=Path, required=True, help="Release JSON file")

    show = releases_sub.add_parser("show", help="Print a release as JSON")
    _add_tenant_arguments(show)
    show.add_argument("--id", dest="release_id", type=int, required=True, help="Release id")

    delete = releases_sub.add_parser("delete", help="Delete a release")
    _add_tenant_arguments(delete)
    delete.add_argument("--id", dest="release_id", type=int, required=True, help="Release id")

    return parser.parse_args(list(argv))


def _tenant(args: argparse.Namespace) -> UUID | None:
    context = TenantContext(user_id=args.tenant_id, is_admin=args.admin, act_as=args.act_as)
    return context.current_tenant_id()


def _to_json(value: Any) -> str:
    payload = dataclasses.asdict(value) if dataclasses.is_dataclass(value) else value
    return json.dumps(payload, default=str, indent=2)


def _run(args: argparse.Namespace) -> None:
    tenant_id = _tenant(args)
    if args.command == "lookups" and args.lookups_command == "seed":
        for result in seed_lookups_from_file(tenant_id, args.file):
            log.info(
                "Seeded %s: created=%s, existing=%s", result.kind, result.created, result.existing
            )
    elif args.command == "lookups" and args.lookups_command == "add":
        ref = build_lookup_service().create(tenant_id, args.kind, args.name)
        log.info("Created %s %r with id %s", args.kind, ref.name, ref.id)
    elif args.command == "releases" and args.releases_command == "add":
        result = add_release_from_file(tenant_id, args.file)
        print(_to_json(result.view))  # noqa: T201
        if result.created is not None:
            log.info("Also created: %s", _to_json(result.created))
    elif args.command == "releases" and args.releases_command == "show":
        print(_to_json(show_release(tenant_id, args.release_id)))  # noqa: T201
    elif args.command == "releases" and args.releases_command == "delete":
        delete_release(tenant_id, args.release_id)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        _run(parsed_args)
    except DuplicateReleaseError as exc:
        log.error("%s", exc)  # noqa: TRY400
        for ref in exc.duplicates:
            log.error("  possible duplicate: %s (ID: %s)", ref.title, ref.id)  # noqa: TRY400
        sys.exit(EXIT_CODES[exc.kind])
    except CatalogError as exc:
        log.error("%s failed: %s", parsed_args.command, exc)  # noqa: TRY400
        sys.exit(EXIT_CODES[exc.kind])
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
