import unittest

from opldap.errors import AmbiguousUserError, ConfigurationError, UserNotFoundError
from opldap.models import LDAPConfig, LookupStatus, UserLookup


class LDAPConfigTests(unittest.TestCase):
    def test_defaults(self):
        cfg = LDAPConfig(host="dc1.example.com")
        self.assertEqual(cfg.url, "ldap://dc1.example.com:389")
        self.assertTrue(cfg.wants_starttls)
        self.assertIs(cfg.validate(), cfg)

    def test_ldaps(self):
        cfg = LDAPConfig(host="dc1", port=636, use_ssl=True)
        self.assertEqual(cfg.url, "ldaps://dc1:636")
        self.assertFalse(cfg.wants_starttls)
        self.assertTrue(cfg.wants_tls)

    def test_plain(self):
        cfg = LDAPConfig(host="dc1", skip_tls=True)
        self.assertFalse(cfg.wants_tls)

    def test_password_not_in_repr(self):
        self.assertNotIn("s3cret", repr(LDAPConfig(host="dc1", bind_password="s3cret")))

    def test_invalid(self):
        bad = [
            LDAPConfig(host=""),
            LDAPConfig(host="dc1", port=0),
            LDAPConfig(host="dc1", port="abc"),
            LDAPConfig(host="dc1", group_filter="(member=jdoe)"),
            LDAPConfig(host="dc1", user_filter="(|(uid=%s)(cn=%s))"),
            LDAPConfig(host="dc1", client_key_file="/tmp/key.pem"),
            LDAPConfig(host="dc1", connect_timeout=0),
        ]
        for cfg in bad:
            with self.subTest(cfg=cfg):
                with self.assertRaises(ConfigurationError):
                    cfg.validate()

    def test_timeouts_coerced_to_float(self):
        cfg = LDAPConfig(host="dc1", connect_timeout="5", receive_timeout=10).validate()
        self.assertEqual(cfg.connect_timeout, 5.0)
        self.assertIsInstance(cfg.receive_timeout, float)

    def test_non_numeric_timeout(self):
        for kwargs in ({"connect_timeout": "soon"}, {"receive_timeout": [5]}):
            with self.subTest(**kwargs):
                with self.assertRaises(ConfigurationError):
                    LDAPConfig(host="dc1", **kwargs).validate()


class UserLookupTests(unittest.TestCase):
    def test_found(self):
        u = UserLookup("jdoe", LookupStatus.FOUND, "CN=John Doe,OU=Users,DC=example,DC=com", "jdoe@example.com", 1)
        self.assertTrue(u.found)
        self.assertEqual(u.as_pair(), ("CN=John Doe,OU=Users,DC=example,DC=com", "jdoe@example.com"))
        self.assertIs(u.require(), u)

    def test_not_found(self):
        u = UserLookup("ghost", LookupStatus.NOT_FOUND)
        self.assertFalse(u.found)
        self.assertEqual(u.as_pair(), ("", ""))
        with self.assertRaises(UserNotFoundError) as ctx:
            u.require()
        self.assertNotIsInstance(ctx.exception, AmbiguousUserError)

    def test_ambiguous(self):
        u = UserLookup("jdoe", LookupStatus.AMBIGUOUS, matches=2)
        self.assertEqual(u.as_pair(), ("", ""))
        with self.assertRaises(AmbiguousUserError) as ctx:
            u.require()
        self.assertEqual(ctx.exception.matches, 2)


if __name__ == "__main__":
    unittest.main()
