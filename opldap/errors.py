"""Exceptions raised by the directory client.

Nothing in this package exits the process: every failure while dialing,
binding or searching surfaces as one of the classes below.
"""

from __future__ import annotations

from typing import Any, Optional


class LDAPClientError(Exception):
    """Base exception for directory client operations"""

    def __init__(self, message: str, result: Optional[dict[str, Any]] = None):
        self.message = message
        self.result = dict(result or {})
        super().__init__(self.message)


class ConfigurationError(LDAPClientError):
    """Invalid client configuration"""


class DirectoryConnectionError(LDAPClientError):
    """Server unreachable, or the TLS negotiation failed"""


class NotConnectedError(DirectoryConnectionError):
    """A search was issued before connect()"""

    def __init__(self, operation: str):
        super().__init__(f"{operation}: client is not connected, call connect() first")
        self.operation = operation


class AuthenticationError(LDAPClientError):
    """The server rejected the bind"""

    def __init__(self, bind_dn: str, result: Optional[dict[str, Any]] = None):
        res = dict(result or {})
        desc = res.get("description") or res.get("message") or "bind rejected"
        super().__init__(f"bind as {bind_dn!r} failed: {desc}", res)
        self.bind_dn = bind_dn


class SearchError(LDAPClientError):
    """A search request failed"""

    def __init__(self, search_filter: str, message: str, result: Optional[dict[str, Any]] = None):
        super().__init__(f"search {search_filter} failed: {message}", result)
        self.search_filter = search_filter


class MalformedDNError(LDAPClientError, ValueError):
    """The DN has no domain component suffix to strip"""

    def __init__(self, dn: str, reason: str = "no ',DC=' suffix"):
        super().__init__(f"malformed DN {dn!r}: {reason}")
        self.dn = dn


class UserNotFoundError(LDAPClientError):
    """No entry matched the account name"""

    def __init__(self, username: str, message: Optional[str] = None):
        super().__init__(message or f"user {username!r} not found")
        self.username = username


class AmbiguousUserError(UserNotFoundError):
    """More than one entry matched where exactly one was expected"""

    def __init__(self, username: str, matches: int):
        super().__init__(username, f"user {username!r} is ambiguous: {matches} entries matched")
        self.matches = matches
