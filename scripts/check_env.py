"""Pre-flight check for the bot's deployment configuration.

``check`` loads ``AppSettings`` from an env file and opens the SQLite store so
a missing Telegram token, Google client secret or unwritable data directory
is reported before the webhook starts failing. ``record`` and ``verify``
additionally pin the env file to a SHA256 baseline to catch drift::

    python -m scripts.check_env record --env-file /srv/calendar-bot/.env \
        --hash-file /srv/calendar-bot/.env.sha256
    python -m scripts.check_env verify --env-file /srv/calendar-bot/.env \
        --hash-file /srv/calendar-bot/.env.sha256
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from pathlib import Path

from pydantic import ValidationError

from calendar_bot.clients.kv_store import SQLiteKeyValueStore, StoreUnavailableError
from calendar_bot.core.config import AppSettings, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_STORAGE_ERROR = 4
EXIT_RUNTIME_ERROR = 5


def _digest(env_file: Path) -> str:
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def load_settings(env_file: Path) -> AppSettings:
    """Export ``env_file`` into the process environment and build settings."""
    if not env_file.exists():
        raise FileNotFoundError(f"Environment file {env_file} does not exist.")
    _load_env_file(str(env_file))
    return AppSettings()  # type: ignore[call-arg]


def probe_storage(settings: AppSettings) -> None:
    """Open both OAuth namespaces so schema creation errors surface early."""
    for namespace in (settings.storage.states_namespace, settings.storage.tokens_namespace):
        SQLiteKeyValueStore(settings.storage.db_path, namespace=namespace)


def _compare_baseline(env_file: Path, hash_file: Path) -> int:
    if not hash_file.exists():
        print(
            f"No baseline at {hash_file}; run the 'record' command first.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR
    expected = hash_file.read_text(encoding="utf-8").strip()
    actual = _digest(env_file)
    if expected != actual:
        print(
            f"Environment drift detected: expected {expected}, found {actual}.",
            file=sys.stderr,
        )
        return EXIT_CHECKSUM_ERROR
    print("Environment checksum OK.")
    return EXIT_OK


def _write_baseline(env_file: Path, hash_file: Path) -> int:
    checksum = _digest(env_file)
    hash_file.write_text(f"{checksum}\n", encoding="utf-8")
    print(f"Recorded checksum to {hash_file} ({checksum})")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate calendar bot settings and detect .env drift."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, needs_hash in (("check", False), ("record", True), ("verify", True)):
        sub = subparsers.add_parser(name)
        sub.add_argument("--env-file", default=".env", type=Path)
        if needs_hash:
            sub.add_argument("--hash-file", required=True, type=Path)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    env_file: Path = args.env_file

    try:
        settings = load_settings(env_file)
        probe_storage(settings)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR
    except StoreUnavailableError as exc:
        print(f"Storage at {settings.storage.db_path} is unusable: {exc}", file=sys.stderr)
        return EXIT_STORAGE_ERROR

    if args.command == "record":
        return _write_baseline(env_file, args.hash_file)
    if args.command == "verify":
        return _compare_baseline(env_file, args.hash_file)
    print(f"Settings OK; OAuth redirect URI is {settings.google.redirect_uri}")
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
