from .models import AccountStatus, User
from .password import check_credential, derive_credential
from .store import UserStore

__all__ = ["AccountStatus", "User", "UserStore", "check_credential", "derive_credential"]
