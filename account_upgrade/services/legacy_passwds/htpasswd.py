from __future__ import annotations

import logging

from passlib.hash import des_crypt

from .models import HTPASSWD_HASH_LENGTH

logger = logging.getLogger(__name__)


def is_valid_htpasswd(raw: bytes) -> bool:
    """Only classic 13-character crypt() hashes (printable ASCII, no spaces) are accepted."""
    return len(raw) == HTPASSWD_HASH_LENGTH and all(0x20 < b < 0x7F for b in raw)


def verify_legacy(stored_hash: str, presented: str) -> bool:
    """
    Check `presented` against a classic crypt() hash.

    Malformed stored hashes verify as False rather than raising, so callers
    can treat every failure the same way.
    """
    try:
        return bool(des_crypt.verify(presented, stored_hash))
    except (ValueError, TypeError) as e:
        logger.warning(f"Unusable legacy hash encountered: {type(e).__name__}")
        return False


# Checked when there is no real hash, so a miss costs the same as a mismatch.
_STAND_IN_HASH = des_crypt.using(salt="xx").hash("no legacy password")


def verify_legacy_miss(presented: str) -> bool:
    """Spend one verification on a stand-in hash; always False."""
    verify_legacy(_STAND_IN_HASH, presented)
    return False
