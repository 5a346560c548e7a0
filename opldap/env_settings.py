from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field

from .log_config import setup_logging
from .models import DEFAULT_GROUP_FILTER, DEFAULT_USER_FILTER, LDAPConfig
from .utils import split_list


class EnvSettings(BaseSettings):
    host: str = Field(..., alias="LDAP_HOST")
    port: int = Field(389, alias="LDAP_PORT")
    bind_dn: str = Field("", alias="LDAP_BIND_DN")
    bind_password: str = Field("", alias="LDAP_BIND_PASSWORD", repr=False)
    base: str = Field("", alias="LDAP_BASE")

    group_filter: str = Field(DEFAULT_GROUP_FILTER, alias="LDAP_GROUP_FILTER")
    user_filter: str = Field(DEFAULT_USER_FILTER, alias="LDAP_USER_FILTER")
    attributes: str = Field("", alias="LDAP_ATTRIBUTES")  # ',' or ';' separated

    # TLS
    use_ssl: bool = Field(False, alias="LDAP_USE_SSL")
    skip_tls: bool = Field(False, alias="LDAP_SKIP_TLS")
    insecure_skip_verify: bool = Field(False, alias="LDAP_INSECURE_SKIP_VERIFY")
    server_name: str = Field("", alias="LDAP_SERVER_NAME")
    ca_certs_file: str = Field("", alias="LDAP_CA_CERTS_FILE")
    client_cert_file: str = Field("", alias="LDAP_CLIENT_CERT_FILE")
    client_key_file: str = Field("", alias="LDAP_CLIENT_KEY_FILE")

    connect_timeout: Optional[float] = Field(None, alias="LDAP_CONNECT_TIMEOUT")
    receive_timeout: Optional[float] = Field(None, alias="LDAP_RECEIVE_TIMEOUT")

    log_level: str = Field("INFO", alias="LDAP_LOG_LEVEL")

    class Config:
        populate_by_name = True

    def to_config(self) -> LDAPConfig:
        return LDAPConfig(
            host=self.host,
            port=self.port,
            bind_dn=self.bind_dn,
            bind_password=self.bind_password,
            base=self.base,
            group_filter=self.group_filter,
            user_filter=self.user_filter,
            attributes=split_list(self.attributes),
            use_ssl=self.use_ssl,
            skip_tls=self.skip_tls,
            insecure_skip_verify=self.insecure_skip_verify,
            server_name=self.server_name,
            ca_certs_file=self.ca_certs_file,
            client_cert_file=self.client_cert_file,
            client_key_file=self.client_key_file,
            connect_timeout=self.connect_timeout,
            receive_timeout=self.receive_timeout,
        )


@lru_cache(maxsize=1)
def get_env() -> EnvSettings:
    return EnvSettings()


def client_from_env():
    """LDAPClient configured from LDAP_* environment variables (not yet connected)."""
    from .client import LDAPClient

    return LDAPClient(get_env().to_config())


def setup_logging_from_env(log_file: Optional[str] = None) -> None:
    """Configure logging at the LDAP_LOG_LEVEL level."""
    setup_logging(get_env().log_level, log_file=log_file)
