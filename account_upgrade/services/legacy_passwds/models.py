from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import NewType, Optional

# Classic crypt() output: 2 salt chars + 11 hash chars.
HtPasswdHash = NewType("HtPasswdHash", str)

HTPASSWD_HASH_LENGTH = 13


class LegacyPasswdsTable(Mapping[int, HtPasswdHash]):
    """
    Immutable snapshot of user_id -> legacy htpasswd hash.

    Compares equal to any other table with the same entries.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[int, str] | Iterable[tuple[int, str]] = ()):
        self._entries: dict[int, HtPasswdHash] = {
            int(uid): HtPasswdHash(htpasswd) for uid, htpasswd in dict(entries).items()
        }

    def __getitem__(self, user_id: int) -> HtPasswdHash:
        return self._entries[user_id]

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        # Hashes are sensitive; only show the ids.
        return f"LegacyPasswdsTable(user_ids={sorted(self._entries)!r})"

    def lookup(self, user_id: int) -> Optional[HtPasswdHash]:
        return self._entries.get(int(user_id))

    def to_rows(self) -> list[tuple[int, HtPasswdHash]]:
        return [(uid, self._entries[uid]) for uid in sorted(self._entries)]
