from dataclasses import dataclass, field

from fastapi.templating import Jinja2Templates

from account_upgrade.app.core.auth_hooks import AuthFailHooks
from account_upgrade.app.core.config import settings
from account_upgrade.app.core.paths import resolve_package_path
from account_upgrade.database.paths import resolve_auth_db_path
from account_upgrade.database.schema.ensure import ensure_schema
from account_upgrade.services.legacy_passwds import LegacyPasswdStore, LegacyPasswdStoreLike
from account_upgrade.services.users import UserStore


def create_templates(templates_dir: str | None = None) -> Jinja2Templates:
    return Jinja2Templates(directory=str(resolve_package_path(templates_dir or settings.TEMPLATES_DIR)))


@dataclass
class AppDependencies:
    user_store: UserStore
    legacy_passwd_store: LegacyPasswdStoreLike
    templates: Jinja2Templates
    auth_fail_hooks: AuthFailHooks = field(default_factory=AuthFailHooks)


def create_dependencies(db_path: str | None = None) -> AppDependencies:
    db_path = resolve_auth_db_path(db_path)

    ensure_schema(str(db_path))

    return AppDependencies(
        user_store=UserStore(db_path=str(db_path)),
        legacy_passwd_store=LegacyPasswdStore(db_path=str(db_path)),
        templates=create_templates(),
    )
