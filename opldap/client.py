from __future__ import annotations

import logging
import ssl
import threading
from typing import Any

from ldap3 import ALL, SUBTREE, Connection, Server, Tls
from ldap3.core.exceptions import LDAPBindError, LDAPException

from .dn import format_group_path
from .errors import (
    AuthenticationError,
    ConfigurationError,
    DirectoryConnectionError,
    NotConnectedError,
    SearchError,
)
from .models import LDAPConfig, LookupStatus, UserLookup
from .utils import merge_attributes, render_filter

log = logging.getLogger(__name__)

GROUP_CLASS_FILTER = "(ObjectClass=group)"

ALL_GROUPS_ATTRS = ["cn", "ou", "memberOf", "member", "mail"]
USER_GROUPS_ATTRS = ["cn", "ou", "memberOf", "member"]
USER_ATTRS = ["cn", "ou", "memberOf", "member", "userPrincipalName"]

# success, sizeLimitExceeded
_OK_RESULT_CODES = (0, 4)


def _attr_str(entry: Any, name: str) -> str:
    return str(getattr(entry, name, "") or "")


class LDAPClient:
    """One bound connection plus a few fixed-shape searches under cfg.base.

    The connection is created by connect() and released by close(); use the
    client as a context manager to get both.
    """

    def __init__(self, cfg: LDAPConfig) -> None:
        self.cfg = cfg.validate()
        self.conn: Connection | None = None
        self._lock = threading.RLock()

        try:
            self.server = Server(
                host=cfg.host,
                port=int(cfg.port),
                use_ssl=cfg.use_ssl,
                get_info=ALL,
                tls=self._build_tls(cfg) if cfg.wants_tls else None,
                connect_timeout=cfg.connect_timeout,
            )
        except LDAPException as e:
            # e.g. a missing CA bundle is rejected by ldap3.Tls up front
            raise ConfigurationError(f"invalid server settings for {cfg.url}: {e}") from e

    @staticmethod
    def _build_tls(cfg: LDAPConfig) -> Tls:
        tls_kwargs: dict[str, Any] = {
            "validate": ssl.CERT_NONE if cfg.insecure_skip_verify else ssl.CERT_REQUIRED,
        }
        if cfg.server_name:
            tls_kwargs["valid_names"] = [cfg.server_name]
        if cfg.ca_certs_file:
            tls_kwargs["ca_certs_file"] = cfg.ca_certs_file
        if cfg.client_cert_file:
            tls_kwargs["local_certificate_file"] = cfg.client_cert_file
            if cfg.client_key_file:
                tls_kwargs["local_private_key_file"] = cfg.client_key_file
        return Tls(**tls_kwargs)

    @property
    def connected(self) -> bool:
        return self.conn is not None

    def __enter__(self) -> "LDAPClient":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def connect(self) -> "LDAPClient":
        """Dial and bind. Calling it again while connected does nothing."""
        with self._lock:
            if self.conn is not None:
                return self

            conn = Connection(
                self.server,
                user=self.cfg.bind_dn or None,
                password=self.cfg.bind_password or None,
                auto_bind=False,
                receive_timeout=self.cfg.receive_timeout,
            )
            try:
                conn.open()
                if self.cfg.wants_starttls and not conn.start_tls():
                    raise DirectoryConnectionError(
                        f"StartTLS with {self.cfg.url} failed", dict(conn.result or {})
                    )
                if not conn.bind():
                    raise AuthenticationError(self.cfg.bind_dn, dict(conn.result or {}))
            except LDAPBindError as e:
                self._discard(conn)
                log.warning("Bind to %s as %r rejected: %s", self.cfg.url, self.cfg.bind_dn, e)
                raise AuthenticationError(self.cfg.bind_dn, {"description": str(e)}) from e
            except LDAPException as e:
                self._discard(conn)
                log.warning("Connection to %s failed: %s", self.cfg.url, e)
                raise DirectoryConnectionError(f"connection to {self.cfg.url} failed: {e}") from e
            except AuthenticationError as e:
                self._discard(conn)
                log.warning("Bind to %s as %r rejected: %s", self.cfg.url, self.cfg.bind_dn, e)
                raise
            except DirectoryConnectionError as e:
                self._discard(conn)
                log.warning("Connection to %s failed: %s", self.cfg.url, e)
                raise

            self.conn = conn
            log.info("Connected to %s as %r", self.cfg.url, self.cfg.bind_dn)
            return self

    def close(self) -> None:
        """Unbind and drop the connection; no-op when not connected."""
        with self._lock:
            conn, self.conn = self.conn, None
            if conn is None:
                return
            self._discard(conn)
            log.info("Disconnected from %s", self.cfg.url)

    @staticmethod
    def _discard(conn: Connection) -> None:
        try:
            conn.unbind()
        except LDAPException as e:
            log.debug("unbind failed: %s", e)

    def _search(self, operation: str, search_filter: str, attributes: list[str]) -> list[Any]:
        with self._lock:
            if self.conn is None:
                raise NotConnectedError(operation)

            attrs = merge_attributes(attributes, self.cfg.attributes)
            log.debug("%s: base=%r filter=%s attrs=%s", operation, self.cfg.base, search_filter, attrs)
            try:
                self.conn.search(
                    search_base=self.cfg.base,
                    search_filter=search_filter,
                    search_scope=SUBTREE,
                    attributes=attrs,
                )
            except LDAPException as e:
                log.warning("%s: search %s failed: %s", operation, search_filter, e)
                raise SearchError(search_filter, str(e)) from e

            res = dict(self.conn.result or {})
            if res.get("result", 0) not in _OK_RESULT_CODES:
                desc = res.get("description") or res.get("message") or "unknown error"
                log.warning("%s: search %s failed: %s", operation, search_filter, desc)
                raise SearchError(search_filter, desc, res)

            entries = list(self.conn.entries or [])
            log.debug("%s: %d entries", operation, len(entries))
            return entries

    def get_all_groups(self) -> list[str]:
        """Common names of every group under the base DN, in result order."""
        groups: list[str] = []
        for e in self._search("get_all_groups", GROUP_CLASS_FILTER, ALL_GROUPS_ATTRS):
            log.debug("group %s", e.entry_dn)
            groups.append(_attr_str(e, "cn"))
        return groups

    def get_groups_of_user(self, username: str) -> list[str]:
        """Groups matched by cfg.group_filter for username, as /OU/.../CN paths."""
        flt = render_filter(self.cfg.group_filter, username)
        entries = self._search("get_groups_of_user", flt, USER_GROUPS_ATTRS)
        return [format_group_path(e.entry_dn) for e in entries]

    def get_user_by_sam(self, username: str) -> UserLookup:
        flt = render_filter(self.cfg.user_filter, username)
        entries = self._search("get_user_by_sam", flt, USER_ATTRS)

        if len(entries) == 1:
            e = entries[0]
            return UserLookup(
                username=username,
                status=LookupStatus.FOUND,
                dn=str(e.entry_dn),
                user_principal_name=_attr_str(e, "userPrincipalName"),
                matches=1,
            )
        status = LookupStatus.NOT_FOUND if not entries else LookupStatus.AMBIGUOUS
        if status is LookupStatus.AMBIGUOUS:
            log.warning("get_user_by_sam: %d entries match %r", len(entries), username)
        return UserLookup(username=username, status=status, matches=len(entries))

