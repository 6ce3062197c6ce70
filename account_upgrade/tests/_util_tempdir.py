from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from uuid import uuid4


def make_temp_dir(*, prefix: str = "account_upgrade_test") -> Path:
    """
    Create a writable temp directory under `tempfile.gettempdir()`.

    Each call gets its own uuid-named directory so sqlite files never collide
    between test cases.
    """
    root = Path(tempfile.gettempdir()) / prefix / uuid4().hex
    root.mkdir(parents=True, exist_ok=True)
    return root


def cleanup_dir(path: Path) -> None:
    shutil.rmtree(path, ignore_errors=True)
