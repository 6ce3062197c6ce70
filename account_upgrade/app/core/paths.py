from __future__ import annotations

from pathlib import Path


def package_root() -> Path:
    # account_upgrade/app/core/paths.py -> account_upgrade
    return Path(__file__).resolve().parents[2]


def repo_root() -> Path:
    return package_root().parent


def resolve_package_path(path: str | Path) -> Path:
    p = Path(path)
    if p.is_absolute():
        return p
    return package_root() / p


def resolve_repo_path(path: str | Path) -> Path:
    """
    Resolve a path relative to the repository root (the parent of `account_upgrade/`).

    This is the preferred base for runtime configuration paths such as:
    - settings.DATABASE_PATH (default: data/auth.db)
    - settings.BACKUP_DIR (default: data/backups)
    """
    p = Path(path)
    if p.is_absolute():
        return p
    return repo_root() / p
