import os
import unittest

from account_upgrade.database.schema.ensure import ensure_schema
from account_upgrade.services.users import AccountStatus, UserStore, check_credential, derive_credential
from account_upgrade.tests._util_tempdir import cleanup_dir, make_temp_dir


class TestUserStoreUnit(unittest.TestCase):
    def setUp(self):
        self.td = make_temp_dir(prefix="account_upgrade_users")
        self.db_path = os.path.join(str(self.td), "auth.db")
        ensure_schema(self.db_path)
        self.store = UserStore(db_path=self.db_path)

    def tearDown(self):
        cleanup_dir(self.td)

    def test_imported_account_awaits_credential(self):
        user = self.store.create_user("alice", password=None, status=AccountStatus.DISABLED.value)

        loaded = self.store.get_by_username("alice")
        self.assertEqual(loaded.user_id, user.user_id)
        self.assertIsNone(loaded.password_hash)
        self.assertTrue(loaded.is_disabled_without_credential())

    def test_reason_or_credential_makes_account_ineligible(self):
        suspended = self.store.create_user(
            "carol", password=None, status=AccountStatus.DISABLED.value, disabled_reason="spam"
        )
        locked = self.store.create_user("dave", password="pw", status=AccountStatus.DISABLED.value)
        active = self.store.create_user("erin", password="pw")

        for user in (suspended, locked, active):
            with self.subTest(username=user.username):
                self.assertFalse(self.store.get_by_user_id(user.user_id).is_disabled_without_credential())

    def test_set_credential_and_enable(self):
        user = self.store.create_user("alice", password=None, status=AccountStatus.DISABLED.value)

        self.store.set_credential(user.user_id, derive_credential("Hackage", "alice", "pw"))
        self.store.set_enabled(user.user_id, True)

        loaded = self.store.get_by_user_id(user.user_id)
        self.assertTrue(loaded.is_enabled)
        self.assertTrue(check_credential(loaded.password_hash, "Hackage", "alice", "pw"))
        self.assertFalse(check_credential(loaded.password_hash, "Other", "alice", "pw"))

    def test_enable_clears_disabled_reason(self):
        user = self.store.create_user("carol", password="pw", status=AccountStatus.DISABLED.value, disabled_reason="x")
        self.store.set_enabled(user.user_id, True)
        self.assertIsNone(self.store.get_by_user_id(user.user_id).disabled_reason)

    def test_updates_on_missing_user_raise(self):
        with self.assertRaises(LookupError):
            self.store.set_credential(404, "x")
        with self.assertRaises(LookupError):
            self.store.set_enabled(404, True)

    def test_duplicate_username_rejected(self):
        self.store.create_user("alice")
        with self.assertRaises(ValueError):
            self.store.create_user("alice")


if __name__ == "__main__":
    unittest.main()
