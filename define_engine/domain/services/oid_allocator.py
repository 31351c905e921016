from __future__ import annotations

from enum import Enum
import re
from typing import TYPE_CHECKING

from ...constants import OidPrefixes

if TYPE_CHECKING:
    from collections.abc import Collection

_SUFFIX_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


class OidType(str, Enum):
    ITEM_GROUP = "ItemGroup"
    ITEM_DEF = "ItemDef"
    ITEM_REF = "ItemRef"
    CODE_LIST = "CodeList"
    CODE_LIST_ITEM = "CodeListItem"
    LEAF = "Leaf"

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]


_PREFIXES: dict[OidType, str] = {
    OidType.ITEM_GROUP: OidPrefixes.ITEM_GROUP,
    OidType.ITEM_DEF: OidPrefixes.ITEM_DEF,
    OidType.ITEM_REF: OidPrefixes.ITEM_REF,
    OidType.CODE_LIST: OidPrefixes.CODE_LIST,
    OidType.CODE_LIST_ITEM: OidPrefixes.CODE_LIST_ITEM,
    OidType.LEAF: OidPrefixes.LEAF,
}


def _coerce_type(entity_type: OidType | str) -> OidType:
    if isinstance(entity_type, OidType):
        return entity_type
    try:
        return OidType(entity_type)
    except ValueError:
        valid = ", ".join(member.value for member in OidType)
        raise ValueError(
            f"Unknown entity type {entity_type!r}, expected one of: {valid}"
        ) from None


def name_suffix(name_hint: str | None) -> str:
    if not name_hint:
        return ""
    return _SUFFIX_UNSAFE.sub("_", name_hint.strip()).strip("_")


def allocate_oid(
    entity_type: OidType | str,
    existing_oids: Collection[str],
    name_hint: str | None = None,
) -> str:
    """Return a prefixed OID that is not in ``existing_oids``.

    ``IG.DM`` style OIDs are derived from ``name_hint`` when one is given;
    collisions fall back to a numeric suffix (``IG.DM.1``, ``IG.DM.2``, ...).
    Without a hint the OID is the prefix plus the first free number.
    """
    prefix = _coerce_type(entity_type).prefix
    suffix = name_suffix(name_hint)
    if suffix:
        candidate = f"{prefix}{suffix}"
        if candidate not in existing_oids:
            return candidate
        base = f"{candidate}."
    else:
        base = prefix
    counter = 1
    while f"{base}{counter}" in existing_oids:
        counter += 1
    return f"{base}{counter}"
