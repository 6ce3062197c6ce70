from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from account_upgrade.app.core.config import settings
from account_upgrade.app.core.paths import repo_root, resolve_repo_path
from account_upgrade.database.paths import resolve_auth_db_path
from account_upgrade.database.schema.ensure import ensure_schema
from account_upgrade.runtime.backup import run_backup, run_restore
from account_upgrade.services.legacy_passwds import RestoreFormatError
from account_upgrade.services.users import AccountStatus, UserStore

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"


def resolved_paths(*, db_path: str | Path | None = None) -> dict[str, Path]:
    return {
        "repo_root": repo_root(),
        "auth_db": resolve_auth_db_path(db_path),
        "backup_dir": resolve_repo_path(settings.BACKUP_DIR),
    }


def ensure_database(*, db_path: str | Path | None = None) -> Path:
    path = resolve_auth_db_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    ensure_schema(str(path))
    return path


def ensure_default_admin(*, db_path: str | Path | None = None) -> bool:
    db = ensure_database(db_path=db_path)
    store = UserStore(db_path=str(db))
    if store.get_by_username(DEFAULT_ADMIN_USERNAME) is not None:
        return False
    store.create_user(
        username=DEFAULT_ADMIN_USERNAME,
        password=DEFAULT_ADMIN_PASSWORD,
        role="admin",
        status=AccountStatus.ENABLED.value,
        created_by="system",
    )
    print(f"[OK] Created default admin: {DEFAULT_ADMIN_USERNAME} / {DEFAULT_ADMIN_PASSWORD}")
    return True


def print_paths(*, db_path: str | Path | None = None) -> None:
    paths = resolved_paths(db_path=db_path)
    print("[PATHS]")
    print(f"- repo root:  {paths['repo_root']}")
    print(f"- database:   {paths['auth_db']}")
    print(f"- backups:    {paths['backup_dir']}")


def run_server(*, host: str | None = None, port: int | None = None, reload: bool = False) -> None:
    try:
        import uvicorn
    except Exception as exc:  # pragma: no cover
        raise SystemExit(f"uvicorn is required to run the server: {exc}")

    uvicorn.run(
        "account_upgrade.app.main:app",
        host=host or settings.HOST,
        port=port or settings.PORT,
        reload=reload,
        log_level="info",
    )


def main(argv: list[str] | None = None) -> None:
    # `python -m account_upgrade` with no arguments starts the server.
    if argv is None and len(sys.argv) == 1:
        run_server()
        return

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    parser = argparse.ArgumentParser(description="Account upgrade service")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="Start the HTTP server")
    p_run.add_argument("--host", default=None)
    p_run.add_argument("--port", type=int, default=None)
    p_run.add_argument("--reload", action="store_true", help="Development mode: auto reload")

    db_help = "Database path (relative paths resolve against the repo root; default: settings.DATABASE_PATH)"

    p_init = sub.add_parser("init-db", help="Create the schema and the default admin")
    p_init.add_argument("--db-path", default=None, help=db_help)

    p_schema = sub.add_parser("ensure-schema", help="Create the schema only")
    p_schema.add_argument("--db-path", default=None, help=db_help)

    p_paths = sub.add_parser("paths", help="Print the resolved paths")
    p_paths.add_argument("--db-path", default=None, help=db_help)

    p_backup = sub.add_parser("backup", help="Write a backup bundle (zip)")
    p_backup.add_argument("--out", default=None, help="Bundle path (default: BACKUP_DIR/backup_<timestamp>.zip)")
    p_backup.add_argument("--db-path", default=None, help=db_help)

    p_restore = sub.add_parser("restore", help="Replace state from a backup bundle")
    p_restore.add_argument("bundle", help="Path to a bundle written by `backup`")
    p_restore.add_argument("--db-path", default=None, help=db_help)

    args = parser.parse_args(argv)

    if args.cmd == "run":
        run_server(host=args.host, port=args.port, reload=bool(args.reload))
        return

    if args.cmd == "init-db":
        ensure_default_admin(db_path=args.db_path)
        print_paths(db_path=args.db_path)
        return

    if args.cmd == "ensure-schema":
        ensure_database(db_path=args.db_path)
        print("[OK] Schema ready")
        print_paths(db_path=args.db_path)
        return

    if args.cmd == "paths":
        print_paths(db_path=args.db_path)
        return

    if args.cmd == "backup":
        out = run_backup(out=args.out, db_path=args.db_path)
        print(f"[OK] Backup written: {out}")
        return

    if args.cmd == "restore":
        try:
            counts = run_restore(args.bundle, db_path=args.db_path)
        except (RestoreFormatError, FileNotFoundError) as e:
            print(f"[FAIL] Restore aborted, nothing changed: {e}", file=sys.stderr)
            raise SystemExit(1)
        for name, count in counts.items():
            print(f"[OK] {name}: {count} entries restored")
        return

    raise SystemExit(2)
