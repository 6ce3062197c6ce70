import hashlib
import hmac


def derive_credential(realm: str, username: str, password: str) -> str:
    """
    Derive the stored credential for `password`.

    The digest covers `username:realm:password`, so the same plaintext yields
    different credentials for different accounts and realms.
    """
    return hashlib.sha256(f"{username}:{realm}:{password}".encode("utf-8")).hexdigest()


def check_credential(stored: str | None, realm: str, username: str, password: str) -> bool:
    if not stored:
        return False
    return hmac.compare_digest(stored, derive_credential(realm, username, password))
