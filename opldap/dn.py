from __future__ import annotations

import re

from .errors import MalformedDNError

_DC_RE = re.compile(r"^\s*DC=", re.IGNORECASE)
_HEX_PAIR_RE = re.compile(r"[0-9A-Fa-f]{2}")
_PREFIX_RE = re.compile(r"^\s*(?:CN|OU)=", re.IGNORECASE)


def split_dn(dn: str) -> list[str]:
    """Split a DN on unescaped commas (CN=a\\,b,OU=c -> ['CN=a\\,b', 'OU=c'])."""
    parts: list[str] = []
    cur: list[str] = []
    esc = False
    for ch in dn or "":
        if esc:
            cur.append(ch)
            esc = False
            continue
        if ch == "\\":
            cur.append(ch)
            esc = True
            continue
        if ch == ",":
            parts.append("".join(cur))
            cur = []
            continue
        cur.append(ch)
    parts.append("".join(cur))
    return parts


def _is_domain_component(rdn: str) -> bool:
    return bool(_DC_RE.match(rdn))


def unescape_dn_value(value: str) -> str:
    """Undo RFC 4514 escapes: backslash + special char, or backslash + two hex digits.

    Sales\\, EU -> Sales, EU; a\\2Cb -> a,b; caf\\C3\\A9 -> café
    """
    out: list[str] = []
    raw = bytearray()
    i, n = 0, len(value)
    while i < n:
        ch = value[i]
        if ch == "\\" and _HEX_PAIR_RE.match(value, i + 1):
            raw.append(int(value[i + 1:i + 3], 16))
            i += 3
            continue
        if raw:
            out.append(raw.decode("utf-8", errors="replace"))
            raw = bytearray()
        if ch == "\\" and i + 1 < n:
            out.append(value[i + 1])
            i += 2
            continue
        out.append(ch)
        i += 1
    if raw:
        out.append(raw.decode("utf-8", errors="replace"))
    return "".join(out)


def format_group_path(dn: str) -> str:
    """Turn a group DN into a slash path rooted at the domain.

    CN=Admins,OU=Groups,DC=example,DC=com -> /Groups/Admins

    The domain suffix starts at the first unescaped DC= component.
    Raises MalformedDNError when there is none or nothing precedes it.
    """
    s = dn if isinstance(dn, str) else ""
    rdns = split_dn(s)
    for idx, rdn in enumerate(rdns):
        if _is_domain_component(rdn):
            break
    else:
        raise MalformedDNError(s)

    head = rdns[:idx]
    if not any(p.strip() for p in head):
        raise MalformedDNError(s, "no components before the domain suffix")

    parts = [unescape_dn_value(_PREFIX_RE.sub("", p).strip()) for p in head]
    parts.reverse()
    return "/" + "/".join(parts)
