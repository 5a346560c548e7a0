import os
import unittest
from unittest import mock

from opldap.client import LDAPClient
from opldap.env_settings import EnvSettings, client_from_env, get_env, setup_logging_from_env

ENV = {
    "LDAP_HOST": "dc1.example.com",
    "LDAP_PORT": "636",
    "LDAP_BIND_DN": "CN=svc,OU=Service,DC=example,DC=com",
    "LDAP_BIND_PASSWORD": "s3cret",
    "LDAP_BASE": "DC=example,DC=com",
    "LDAP_GROUP_FILTER": "(memberUid=%s)",
    "LDAP_ATTRIBUTES": "mail; description",
    "LDAP_USE_SSL": "true",
    "LDAP_INSECURE_SKIP_VERIFY": "1",
    "LDAP_CONNECT_TIMEOUT": "2.5",
}


class EnvSettingsTests(unittest.TestCase):
    def setUp(self):
        get_env.cache_clear()
        self.addCleanup(get_env.cache_clear)

    def test_reads_environment(self):
        with mock.patch.dict(os.environ, ENV, clear=True):
            cfg = EnvSettings().to_config()
        self.assertEqual(cfg.host, "dc1.example.com")
        self.assertEqual(cfg.port, 636)
        self.assertEqual(cfg.bind_password, "s3cret")
        self.assertEqual(cfg.base, "DC=example,DC=com")
        self.assertEqual(cfg.group_filter, "(memberUid=%s)")
        self.assertEqual(cfg.user_filter, "(samaccountname=%s)")
        self.assertEqual(cfg.attributes, ["mail", "description"])
        self.assertTrue(cfg.use_ssl)
        self.assertTrue(cfg.insecure_skip_verify)
        self.assertFalse(cfg.skip_tls)
        self.assertEqual(cfg.connect_timeout, 2.5)
        self.assertIsNone(cfg.receive_timeout)

    def test_field_names_accepted(self):
        st = EnvSettings(host="dc2", port=389, skip_tls=True)
        self.assertEqual(st.to_config().url, "ldap://dc2:389")

    def test_password_not_in_repr(self):
        self.assertNotIn("s3cret", repr(EnvSettings(host="dc2", bind_password="s3cret")))

    def test_get_env_is_cached(self):
        with mock.patch.dict(os.environ, ENV, clear=True):
            self.assertIs(get_env(), get_env())

    def test_client_from_env(self):
        with mock.patch.dict(os.environ, dict(ENV, LDAP_USE_SSL="false", LDAP_SKIP_TLS="true"), clear=True):
            client = client_from_env()
        self.assertIsInstance(client, LDAPClient)
        self.assertFalse(client.connected)
        self.assertEqual(client.cfg.url, "ldap://dc1.example.com:636")

    def test_setup_logging_from_env_uses_log_level(self):
        with mock.patch.dict(os.environ, dict(ENV, LDAP_LOG_LEVEL="debug"), clear=True):
            with mock.patch("opldap.env_settings.setup_logging") as setup_logging:
                setup_logging_from_env("/var/log/opldap.log")
        setup_logging.assert_called_once_with("debug", log_file="/var/log/opldap.log")

    def test_log_level_defaults_to_info(self):
        with mock.patch.dict(os.environ, ENV, clear=True):
            self.assertEqual(EnvSettings().log_level, "INFO")


if __name__ == "__main__":
    unittest.main()
