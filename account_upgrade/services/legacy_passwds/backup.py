from __future__ import annotations

import csv
import io
from typing import Optional

from account_upgrade.database.backup_bundle import BackupEntry

from .models import HtPasswdHash, LegacyPasswdsTable
from .store import LegacyPasswdStoreLike


FEATURE_NAME = "legacy-passwds"
FEATURE_DESC = "Support for upgrading accounts from htpasswd-style passwords"

BACKUP_FILENAME = "htpasswd.csv"
BACKUP_VERSION = "0.1"
CSV_HEADERS = ("uid", "htpasswd")


class RestoreFormatError(ValueError):
    pass


def legacy_passwds_to_csv(table: LegacyPasswdsTable) -> str:
    """
    Render the table in the backup layout:

        "0.1"
        "uid","htpasswd"
        "<uid>","<hash>"
        ...
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([BACKUP_VERSION])
    writer.writerow(CSV_HEADERS)
    for uid, htpasswd in table.to_rows():
        writer.writerow([str(uid), str(htpasswd)])
    return buf.getvalue()


# Largest id sqlite can store in an INTEGER column.
MAX_USER_ID = 2**63 - 1


def parse_user_id(raw: str) -> int:
    value = (raw or "").strip()
    if not value or not value.isascii() or not value.isdigit():
        raise RestoreFormatError(f"Could not parse user id: {raw!r}")
    user_id = int(value)
    if user_id > MAX_USER_ID:
        raise RestoreFormatError(f"User id out of range: {raw!r}")
    return user_id


def import_htpasswds(data: bytes) -> list[tuple[int, HtPasswdHash]]:
    try:
        text = data.decode("ascii")
    except UnicodeDecodeError as e:
        raise RestoreFormatError(f"{BACKUP_FILENAME}: not ASCII text") from e

    try:
        records = [row for row in csv.reader(io.StringIO(text)) if row]
    except csv.Error as e:
        raise RestoreFormatError(f"{BACKUP_FILENAME}: {e}") from e

    out: list[tuple[int, HtPasswdHash]] = []
    # First row is the version marker, second the header.
    for record in records[2:]:
        if len(record) != 2:
            raise RestoreFormatError(f"Error processing user details record: {record!r}")
        id_str, htpasswd_str = record
        out.append((parse_user_id(id_str), HtPasswdHash(htpasswd_str)))
    return out


class LegacyPasswdsRestore:
    """
    Accumulates one restore pass for the legacy-passwds feature.

    Entries are fed in with `restore_entry`; nothing touches the store until
    the caller applies the table returned by `finalize`.
    """

    def __init__(self):
        self._rows: Optional[list[tuple[int, HtPasswdHash]]] = None

    def restore_entry(self, entry: BackupEntry) -> None:
        if entry.path != (BACKUP_FILENAME,):
            return
        if self._rows is not None:
            raise RestoreFormatError(f"{FEATURE_NAME}: found multiple {BACKUP_FILENAME} files")
        self._rows = import_htpasswds(entry.data)

    def finalize(self) -> LegacyPasswdsTable:
        # Later rows win on duplicate ids.
        return LegacyPasswdsTable(dict(self._rows or []))


class LegacyPasswdsStateComponent:
    """Backup/restore hooks for the legacy password table."""

    name = FEATURE_NAME
    description = FEATURE_DESC

    def __init__(self, store: LegacyPasswdStoreLike):
        self.store = store

    def get_state(self) -> LegacyPasswdsTable:
        return self.store.get_table()

    def put_state(self, table: LegacyPasswdsTable) -> None:
        self.store.replace_all(table)

    def backup_state(self) -> list[BackupEntry]:
        table = self.get_state()
        return [BackupEntry(path=(BACKUP_FILENAME,), data=legacy_passwds_to_csv(table).encode("ascii"))]

    def restore_state(self) -> LegacyPasswdsRestore:
        return LegacyPasswdsRestore()
