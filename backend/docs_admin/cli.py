"""CLI entry point for docs-admin: generate and check password hashes, run the server."""

from __future__ import annotations

import argparse
import getpass
import logging
import sys

from .config import config
from .passwords import (
    DEFAULT_ROUNDS,
    MAX_ROUNDS,
    MIN_ROUNDS,
    hash_password,
    legacy_digest,
    verify_password,
)


def _read_password(args: argparse.Namespace, confirm: bool) -> str:
    if args.password is not None:
        return args.password
    password = getpass.getpass("Password: ")
    if confirm and getpass.getpass("Confirm password: ") != password:
        print("Passwords do not match.", file=sys.stderr)
        sys.exit(1)
    return password


def _cmd_hash_password(args: argparse.Namespace) -> None:
    password = _read_password(args, confirm=True)
    if not password:
        print("Password must not be empty.", file=sys.stderr)
        sys.exit(1)

    if args.legacy:
        print(legacy_digest(password))
    else:
        print(hash_password(password, rounds=args.rounds))


def _cmd_verify_password(args: argparse.Namespace) -> None:
    stored = args.hash or config.admin_password_hash
    if not stored:
        print("No hash given and ADMIN_PASSWORD_HASH is not set.", file=sys.stderr)
        sys.exit(2)

    if verify_password(_read_password(args, confirm=False), stored):
        print("OK")
        return
    print("Password does not match.", file=sys.stderr)
    sys.exit(1)


def _cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run(
        "docs_admin.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=config.log_level.lower(),
    )


def _rounds(value: str) -> int:
    rounds = int(value)
    if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
        raise argparse.ArgumentTypeError(f"must be between {MIN_ROUNDS} and {MAX_ROUNDS}")
    return rounds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docs-admin",
        description="Docs admin CLI: password hashes and the admin server",
    )
    sub = parser.add_subparsers(dest="command")

    # hash-password
    hash_parser = sub.add_parser("hash-password", help="Print a hash for ADMIN_PASSWORD_HASH")
    hash_parser.add_argument(
        "--password",
        default=None,
        help="Password to hash (default: prompt)",
    )
    hash_parser.add_argument(
        "--rounds",
        type=_rounds,
        default=DEFAULT_ROUNDS,
        help=f"PBKDF2 iterations (default: {DEFAULT_ROUNDS})",
    )
    hash_parser.add_argument(
        "--legacy",
        action="store_true",
        default=False,
        help="Print a bare SHA-256 hex digest instead of a pbkdf2_sha256 hash",
    )

    # verify-password
    verify_parser = sub.add_parser("verify-password", help="Check a password against a hash")
    verify_parser.add_argument(
        "--password",
        default=None,
        help="Password to check (default: prompt)",
    )
    verify_parser.add_argument(
        "--hash",
        default=None,
        help="Hash to check against (default: ADMIN_PASSWORD_HASH)",
    )

    # serve
    serve_parser = sub.add_parser("serve", help="Run the admin server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")

    return parser


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "hash-password":
        _cmd_hash_password(args)
    elif args.command == "verify-password":
        _cmd_verify_password(args)
    elif args.command == "serve":
        _cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
