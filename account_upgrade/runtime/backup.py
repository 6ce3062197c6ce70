from __future__ import annotations

import logging
import time
from pathlib import Path

from account_upgrade.app.core.config import settings
from account_upgrade.app.core.paths import resolve_repo_path
from account_upgrade.database.backup_bundle import read_bundle, write_bundle
from account_upgrade.database.paths import resolve_auth_db_path
from account_upgrade.database.schema.ensure import ensure_schema
from account_upgrade.services.legacy_passwds import LegacyPasswdsStateComponent, LegacyPasswdStore

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return time.strftime("%Y%m%d_%H%M%S", time.localtime())


def state_components(*, db_path: str | Path | None = None) -> list[LegacyPasswdsStateComponent]:
    db = resolve_auth_db_path(db_path)
    ensure_schema(str(db))
    return [LegacyPasswdsStateComponent(LegacyPasswdStore(db_path=str(db)))]


def default_backup_path() -> Path:
    return resolve_repo_path(settings.BACKUP_DIR) / f"backup_{_timestamp()}.zip"


def run_backup(*, out: str | Path | None = None, db_path: str | Path | None = None) -> Path:
    dest = Path(out) if out is not None else default_backup_path()
    entries = {c.name: c.backup_state() for c in state_components(db_path=db_path)}
    write_bundle(dest, entries)
    logger.info(f"Backup written to {dest}")
    return dest


def run_restore(src: str | Path, *, db_path: str | Path | None = None) -> dict[str, int]:
    """
    Restore every known component from a bundle.

    All components parse their blobs before any of them is written, so a
    malformed bundle leaves the current state untouched.
    """
    src = Path(src)
    if not src.exists():
        raise FileNotFoundError(f"Backup bundle not found: {src}")

    grouped = read_bundle(src)
    components = state_components(db_path=db_path)

    staged = []
    for component in components:
        restore = component.restore_state()
        for entry in grouped.get(component.name, []):
            restore.restore_entry(entry)
        staged.append((component, restore.finalize()))

    counts: dict[str, int] = {}
    for component, table in staged:
        component.put_state(table)
        counts[component.name] = len(table)
    logger.info(f"Restore from {src} applied: {counts}")
    return counts
