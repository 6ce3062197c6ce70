"""
End-to-end upgrade flow against the real sqlite-backed stores and the full app:
admin seeds a legacy hash, the user's login is redirected, the upgrade
succeeds once, and the account then logs in normally.
"""
import os
import unittest

from fastapi.testclient import TestClient
from passlib.hash import des_crypt

from account_upgrade.app.dependencies import create_dependencies
from account_upgrade.app.main import create_app
from account_upgrade.runtime.runner import DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_USERNAME, ensure_default_admin
from account_upgrade.services.users import AccountStatus
from account_upgrade.tests._util_tempdir import cleanup_dir, make_temp_dir


class TestUpgradeFlowE2E(unittest.TestCase):
    def setUp(self):
        self.td = make_temp_dir(prefix="account_upgrade_e2e")
        self.db_path = os.path.join(str(self.td), "auth.db")
        ensure_default_admin(db_path=self.db_path)

        self.deps = create_dependencies(self.db_path)
        self.alice = self.deps.user_store.create_user("alice", password=None, status=AccountStatus.DISABLED.value)

        self.app = create_app()
        self.app.state.deps = self.deps

    def tearDown(self):
        cleanup_dir(self.td)

    def _admin_headers(self, client: TestClient) -> dict[str, str]:
        resp = client.post(
            "/api/auth/login",
            json={"username": DEFAULT_ADMIN_USERNAME, "password": DEFAULT_ADMIN_PASSWORD},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    def test_full_upgrade(self):
        htpasswd = des_crypt.hash("OldSecret")

        with TestClient(self.app) as client:
            headers = self._admin_headers(client)
            client.cookies.clear()

            put = client.put(
                "/user/alice/htpasswd",
                content=htpasswd.encode("ascii"),
                headers={**headers, "Content-Type": "text/plain"},
            )
            self.assertEqual(put.status_code, 204, put.text)
            self.assertEqual(self.deps.legacy_passwd_store.lookup(self.alice.user_id), htpasswd)

            redirected = client.post("/api/auth/login", json={"username": "alice", "password": "OldSecret"})
            self.assertEqual(redirected.status_code, 403)
            self.assertEqual(redirected.json()["detail"], "Account needs to be re-enabled")

            upgraded = client.post("/users/htpasswd-upgrade", auth=("alice", "OldSecret"))
            self.assertEqual(upgraded.status_code, 200, upgraded.text)

            again = client.post("/users/htpasswd-upgrade", auth=("alice", "OldSecret"))
            self.assertEqual(again.status_code, 401)

            login = client.post("/api/auth/login", json={"username": "alice", "password": "OldSecret"})
            self.assertEqual(login.status_code, 200, login.text)

        self.assertIsNone(self.deps.legacy_passwd_store.lookup(self.alice.user_id))
        self.assertTrue(self.deps.user_store.get_by_user_id(self.alice.user_id).is_enabled)

    def test_admin_set_rejected_once_account_is_enabled(self):
        with TestClient(self.app) as client:
            headers = {**self._admin_headers(client), "Content-Type": "text/plain"}
            self.deps.user_store.set_credential(self.alice.user_id, "x")
            self.deps.user_store.set_enabled(self.alice.user_id, True)

            resp = client.put("/user/alice/htpasswd", content=b"abcdefghijklm", headers=headers)

        self.assertEqual(resp.status_code, 400)
        self.assertIsNone(self.deps.legacy_passwd_store.lookup(self.alice.user_id))


if __name__ == "__main__":
    unittest.main()
