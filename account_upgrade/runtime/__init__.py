from account_upgrade.runtime.backup import run_backup, run_restore
from account_upgrade.runtime.runner import ensure_database, ensure_default_admin, main, print_paths, resolved_paths, run_server

__all__ = [
    "ensure_database",
    "ensure_default_admin",
    "main",
    "print_paths",
    "resolved_paths",
    "run_backup",
    "run_restore",
    "run_server",
]
