from __future__ import annotations

import zipfile
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class BackupEntry:
    """One blob of a backup bundle, addressed relative to its feature directory."""

    path: tuple[str, ...]
    data: bytes

    @property
    def name(self) -> str:
        return "/".join(self.path)


def write_bundle(dest: Path, entries_by_feature: dict[str, list[BackupEntry]]) -> Path:
    """
    Write a zip bundle; blobs of feature `f` are stored under `f/`.

    The file is written to a temp name and renamed so a partially written
    bundle never carries the final name.
    """
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    tmp = dest.with_name(dest.name + ".part")
    with zipfile.ZipFile(tmp, "w", zipfile.ZIP_DEFLATED) as zf:
        for feature, entries in entries_by_feature.items():
            for entry in entries:
                zf.writestr(f"{feature}/{entry.name}", entry.data)
    tmp.replace(dest)
    return dest


def read_bundle(src: Path) -> dict[str, list[BackupEntry]]:
    """Group the blobs of a bundle by feature directory, in archive order."""
    grouped: dict[str, list[BackupEntry]] = {}
    with zipfile.ZipFile(Path(src), "r") as zf:
        for info in zf.infolist():
            if info.is_dir():
                continue
            parts = tuple(p for p in info.filename.split("/") if p)
            if len(parts) < 2:
                continue
            feature, rest = parts[0], parts[1:]
            grouped.setdefault(feature, []).append(BackupEntry(path=rest, data=zf.read(info)))
    return grouped
