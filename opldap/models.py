from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import AmbiguousUserError, ConfigurationError, UserNotFoundError
from .utils import FILTER_SLOT, count_filter_slots

DEFAULT_GROUP_FILTER = "(member=%s)"
DEFAULT_USER_FILTER = "(samaccountname=%s)"


@dataclass
class LDAPConfig:
    host: str
    port: int = 389
    bind_dn: str = ""
    bind_password: str = field(default="", repr=False)
    base: str = ""
    group_filter: str = DEFAULT_GROUP_FILTER
    user_filter: str = DEFAULT_USER_FILTER
    attributes: List[str] = field(default_factory=list)
    use_ssl: bool = False
    skip_tls: bool = False
    insecure_skip_verify: bool = False
    server_name: str = ""
    ca_certs_file: str = ""
    client_cert_file: str = ""
    client_key_file: str = ""
    connect_timeout: Optional[float] = None
    receive_timeout: Optional[float] = None

    @property
    def url(self) -> str:
        scheme = "ldaps" if self.use_ssl else "ldap"
        return f"{scheme}://{self.host}:{self.port}"

    @property
    def wants_starttls(self) -> bool:
        return not self.use_ssl and not self.skip_tls

    @property
    def wants_tls(self) -> bool:
        return self.use_ssl or self.wants_starttls

    def validate(self) -> "LDAPConfig":
        if not (self.host or "").strip():
            raise ConfigurationError("host is empty")
        try:
            port = int(self.port)
        except (TypeError, ValueError):
            raise ConfigurationError(f"port is not a number: {self.port!r}")
        if not 1 <= port <= 65535:
            raise ConfigurationError(f"port out of range: {port}")
        for name in ("group_filter", "user_filter"):
            tmpl = getattr(self, name)
            if count_filter_slots(tmpl) != 1:
                raise ConfigurationError(f"{name} must contain exactly one {FILTER_SLOT}: {tmpl!r}")
        if self.client_key_file and not self.client_cert_file:
            raise ConfigurationError("client_key_file given without client_cert_file")
        for name in ("connect_timeout", "receive_timeout"):
            v = getattr(self, name)
            if v is None:
                continue
            try:
                seconds = float(v)
            except (TypeError, ValueError):
                raise ConfigurationError(f"{name} is not a number: {v!r}")
            if seconds <= 0:
                raise ConfigurationError(f"{name} must be positive: {v!r}")
            setattr(self, name, seconds)
        return self


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class UserLookup:
    username: str
    status: LookupStatus
    dn: str = ""
    user_principal_name: str = ""
    matches: int = 0

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    def as_pair(self) -> tuple[str, str]:
        """(dn, userPrincipalName); two empty strings unless exactly one entry matched."""
        if not self.found:
            return "", ""
        return self.dn, self.user_principal_name

    def require(self) -> "UserLookup":
        if self.status is LookupStatus.AMBIGUOUS:
            raise AmbiguousUserError(self.username, self.matches)
        if self.status is LookupStatus.NOT_FOUND:
            raise UserNotFoundError(self.username)
        return self
