"""Small LDAP directory client.

Public API:
    - LDAPConfig
    - LDAPClient
    - UserLookup, LookupStatus
    - format_group_path
    - errors (LDAPClientError and subclasses)
"""

from .models import LDAPConfig, LookupStatus, UserLookup
from .client import LDAPClient
from .dn import format_group_path
from .errors import (
    AmbiguousUserError,
    AuthenticationError,
    ConfigurationError,
    DirectoryConnectionError,
    LDAPClientError,
    MalformedDNError,
    NotConnectedError,
    SearchError,
    UserNotFoundError,
)

__all__ = [
    "LDAPConfig",
    "LDAPClient",
    "LookupStatus",
    "UserLookup",
    "format_group_path",
    "LDAPClientError",
    "ConfigurationError",
    "DirectoryConnectionError",
    "NotConnectedError",
    "AuthenticationError",
    "SearchError",
    "MalformedDNError",
    "UserNotFoundError",
    "AmbiguousUserError",
]
