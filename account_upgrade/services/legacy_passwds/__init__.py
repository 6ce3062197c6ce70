from .backup import (
    BACKUP_FILENAME,
    FEATURE_DESC,
    FEATURE_NAME,
    LegacyPasswdsRestore,
    LegacyPasswdsStateComponent,
    RestoreFormatError,
    legacy_passwds_to_csv,
)
from .htpasswd import is_valid_htpasswd, verify_legacy, verify_legacy_miss
from .models import HTPASSWD_HASH_LENGTH, HtPasswdHash, LegacyPasswdsTable
from .store import LegacyPasswdStore, LegacyPasswdStoreLike

__all__ = [
    "BACKUP_FILENAME",
    "FEATURE_DESC",
    "FEATURE_NAME",
    "HTPASSWD_HASH_LENGTH",
    "HtPasswdHash",
    "LegacyPasswdStore",
    "LegacyPasswdStoreLike",
    "LegacyPasswdsRestore",
    "LegacyPasswdsStateComponent",
    "LegacyPasswdsTable",
    "RestoreFormatError",
    "is_valid_htpasswd",
    "legacy_passwds_to_csv",
    "verify_legacy",
    "verify_legacy_miss",
]
