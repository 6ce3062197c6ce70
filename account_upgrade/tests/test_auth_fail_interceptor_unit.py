import unittest

from account_upgrade.app.core.auth_hooks import (
    AuthFailHooks,
    NoSuchUserError,
    PasswordMismatchError,
    UserStatusError,
)
from account_upgrade.app.core.errors import ErrorResponse, MLink
from account_upgrade.app.modules.legacy_passwds.interceptor import absolute_url, make_auth_fail_interceptor
from account_upgrade.tests._fakes import MemoryLegacyPasswdStore, enabled_user, legacy_user, suspended_user

BASE_URL = "https://hackage.example.org/some/ignored/path?q=1"
UPGRADE_PATH = "/users/htpasswd-upgrade"


class TestAuthFailInterceptor(unittest.TestCase):
    def setUp(self):
        self.store = MemoryLegacyPasswdStore({7: "abcdefghijklm", 8: "nopqrstuvwxyz"})
        self.hook = make_auth_fail_interceptor(self.store, base_url=BASE_URL, upgrade_path=UPGRADE_PATH)

    def test_disabled_without_credential_and_record_redirects(self):
        user = legacy_user(7, "alice")
        resp = self.hook(UserStatusError(user.user_id, user))

        self.assertIsInstance(resp, ErrorResponse)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.title, "Account needs to be re-enabled")
        links = [p for p in resp.messages if isinstance(p, MLink)]
        self.assertEqual([l.href for l in links], ["https://hackage.example.org/users/htpasswd-upgrade"])

    def test_response_never_contains_hash(self):
        user = legacy_user(7, "alice")
        resp = self.hook(UserStatusError(user.user_id, user))
        self.assertNotIn("abcdefghijklm", str(resp.to_payload()))

    def test_disabled_without_credential_and_no_record_has_no_opinion(self):
        user = legacy_user(9, "bob")
        self.assertIsNone(self.hook(UserStatusError(user.user_id, user)))

    def test_disabled_with_reason_never_redirects(self):
        user = suspended_user(8, "carol")
        self.assertIsNone(self.hook(UserStatusError(user.user_id, user)))

    def test_active_account_with_wrong_password_never_redirects(self):
        user = enabled_user(7, "alice")
        self.assertIsNone(self.hook(PasswordMismatchError(user.user_id, user)))

    def test_unknown_user_has_no_opinion(self):
        self.assertIsNone(self.hook(NoSuchUserError("nobody")))

    def test_only_reads_store(self):
        user = legacy_user(7, "alice")
        self.hook(UserStatusError(user.user_id, user))
        self.assertEqual(self.store.calls, [])
        self.assertEqual(self.store.lookup(7), "abcdefghijklm")

    def test_absolute_url_replaces_path(self):
        self.assertEqual(absolute_url("http://localhost:8001", "/x"), "http://localhost:8001/x")
        self.assertEqual(absolute_url(BASE_URL, "/x"), "https://hackage.example.org/x")


class TestAuthFailHooks(unittest.TestCase):
    def test_first_response_wins(self):
        hooks = AuthFailHooks()
        first = ErrorResponse(403, "first")
        hooks.register(lambda err: None)
        hooks.register(lambda err: first)
        hooks.register(lambda err: ErrorResponse(403, "second"))

        self.assertIs(hooks.run(NoSuchUserError("x")), first)

    def test_no_hooks_returns_none(self):
        self.assertIsNone(AuthFailHooks().run(NoSuchUserError("x")))


if __name__ == "__main__":
    unittest.main()
