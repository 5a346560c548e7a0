from __future__ import annotations

from typing import Iterable

FILTER_SLOT = "%s"


def escape_ldap_filter_value(value: str) -> str:
    """RFC 4515 escaping for LDAP filter values."""
    out: list[str] = []
    for ch in value:
        if ch == "\\":
            out.append("\\5c")
        elif ch == "*":
            out.append("\\2a")
        elif ch == "(":
            out.append("\\28")
        elif ch == ")":
            out.append("\\29")
        elif ch == "\x00":
            out.append("\\00")
        else:
            out.append(ch)
    return "".join(out)


def count_filter_slots(template: str) -> int:
    return (template or "").count(FILTER_SLOT)


def render_filter(template: str, value: str) -> str:
    """Substitute the escaped value into the single `%s` slot of a filter template.

    (memberUid=%s) + "a*)(x" -> (memberUid=a\\2a\\29\\28x)
    """
    if count_filter_slots(template) != 1:
        raise ValueError(f"filter template must contain exactly one {FILTER_SLOT}: {template!r}")
    return template.replace(FILTER_SLOT, escape_ldap_filter_value(value or ""), 1)


def merge_attributes(base: Iterable[str], extra: Iterable[str]) -> list[str]:
    """Attribute list with extras appended, duplicates dropped case-insensitively."""
    out: list[str] = []
    seen: set[str] = set()
    for name in list(base) + list(extra or []):
        name = (name or "").strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        out.append(name)
    return out


def split_list(text: str) -> list[str]:
    if not text:
        return []
    return [x.strip() for x in text.replace(";", ",").split(",") if x.strip()]
