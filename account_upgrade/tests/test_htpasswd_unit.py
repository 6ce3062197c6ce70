import unittest

from passlib.hash import des_crypt

from account_upgrade.services.legacy_passwds import is_valid_htpasswd, verify_legacy, verify_legacy_miss


class TestHtpasswdUnit(unittest.TestCase):
    def test_accepts_crypt_alphabet(self):
        self.assertTrue(is_valid_htpasswd(b"./0123456789A"))
        self.assertTrue(is_valid_htpasswd(des_crypt.hash("secret").encode("ascii")))

    def test_rejects_unprintable_or_non_ascii(self):
        for raw in (b"abc\x00defghijk", b"abc defghijkl", b"abc\tdefghijkl", "abcdéfghijkl".encode("utf-8")):
            with self.subTest(raw=raw):
                self.assertFalse(is_valid_htpasswd(raw))

    def test_verify_legacy(self):
        stored = des_crypt.hash("secret")
        self.assertTrue(verify_legacy(stored, "secret"))
        self.assertFalse(verify_legacy(stored, "other"))
        self.assertFalse(verify_legacy("not-a-crypt!!", "secret"))

    def test_miss_never_verifies(self):
        self.assertFalse(verify_legacy_miss("no legacy password"))
        self.assertFalse(verify_legacy_miss(""))


if __name__ == "__main__":
    unittest.main()
