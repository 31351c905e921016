"""Transitions over the codelist collection of a metadata version.

Every function takes a mapping of codelists keyed by OID and returns a new
dict; neither the mapping nor the codelists passed in are modified. The
functions keep the codelist invariants intact:

* ``linked_code_list_oid`` is symmetric and links at most one partner;
* the populated item collection matches the codelist type;
* ``item_order`` lists exactly the keys of that collection;
* ``sources.item_defs`` names exactly the ItemDefs that reference a codelist.

Unknown OIDs are caller errors and raise ``UnknownOidError``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import TYPE_CHECKING

from ..entities.codelist import (
    CodeList,
    CodeListItem,
    CodeListType,
    DecodedItems,
    EnumeratedItem,
    EnumeratedItems,
    ExternalCodeList,
    ExternalItems,
    empty_collection,
)
from ..exceptions import InvariantViolationError, UnknownOidError
from .oid_allocator import OidType, allocate_oid
from .standard_sync import apply_new_value_rule, synchronize

if TYPE_CHECKING:
    from ..entities.codelist import CodedItem, ItemCollection
    from ..entities.metadata import Alias, TranslatedText
    from ..entities.terminology import StandardCodeList


class _Unset(Enum):
    UNSET = "UNSET"


UNSET = _Unset.UNSET


@dataclass(frozen=True, slots=True)
class CodeListPatch:
    name: str | _Unset = UNSET
    data_type: str | _Unset = UNSET
    format_name: str | None | _Unset = UNSET
    comment_oid: str | None | _Unset = UNSET
    external: ExternalCodeList | _Unset = UNSET

    def changes(self) -> dict[str, object]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


@dataclass(frozen=True, slots=True)
class CodedValuePatch:
    coded_value: str | _Unset = UNSET
    decode: TranslatedText | None | _Unset = UNSET
    alias: Alias | None | _Unset = UNSET
    extended_value: str | None | _Unset = UNSET
    rank: float | None | _Unset = UNSET

    def changes(self) -> dict[str, object]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


def _require(code_lists: Mapping[str, CodeList], oid: str) -> CodeList:
    try:
        return code_lists[oid]
    except KeyError:
        raise UnknownOidError("CodeList", oid) from None


def _clear_link(result: dict[str, CodeList], oid: str) -> None:
    partner_oid = result[oid].linked_code_list_oid
    if partner_oid is None:
        return
    result[oid] = replace(result[oid], linked_code_list_oid=None)
    partner = result.get(partner_oid)
    if partner is not None and partner.linked_code_list_oid == oid:
        result[partner_oid] = replace(partner, linked_code_list_oid=None)


def set_link(
    code_lists: Mapping[str, CodeList], oid: str, target_oid: str | None
) -> dict[str, CodeList]:
    """Link ``oid`` with ``target_oid``, or unlink it when the target is None.

    Both former partners are unlinked before the new pair is established:
    with A-B and C-D linked, ``set_link(state, B, C)`` leaves A and D
    unlinked and B-C linked.
    """
    result = dict(code_lists)
    source = _require(result, oid)
    if target_oid is None:
        _clear_link(result, oid)
        return result
    if target_oid == oid:
        raise InvariantViolationError(f"CodeList {oid} cannot be linked to itself")
    target = _require(result, target_oid)
    for code_list in (source, target):
        if code_list.code_list_type is CodeListType.EXTERNAL:
            raise InvariantViolationError(
                f"External codelist {code_list.oid} cannot be linked"
            )
    _clear_link(result, oid)
    _clear_link(result, target_oid)
    result[oid] = replace(result[oid], linked_code_list_oid=target_oid)
    result[target_oid] = replace(result[target_oid], linked_code_list_oid=oid)
    return result


def _convert_items(
    items: ItemCollection,
    new_type: CodeListType,
    external: ExternalCodeList | None,
) -> ItemCollection:
    match (items, new_type):
        case (EnumeratedItems(items=enumerated), CodeListType.DECODED):
            return DecodedItems(
                items={oid: item.to_decoded() for oid, item in enumerated.items()}
            )
        case (DecodedItems(items=decoded), CodeListType.ENUMERATED):
            return EnumeratedItems(
                items={oid: item.to_enumerated() for oid, item in decoded.items()}
            )
        case _:
            return empty_collection(new_type, external)


def set_type(
    code_lists: Mapping[str, CodeList],
    oid: str,
    new_type: CodeListType | str,
    external: ExternalCodeList | None = None,
) -> dict[str, CodeList]:
    """Switch a codelist between the enumerated, decoded and external types.

    Enumerated and decoded items convert into each other and keep their
    OIDs; decodes are dropped going to enumerated and start empty going to
    decoded. Switching to external clears all items. Any link is severed
    on every real type change.
    """
    code_list = _require(code_lists, oid)
    target_type = CodeListType(new_type)
    result = dict(code_lists)
    if code_list.code_list_type is target_type:
        return result
    if code_list.linked_code_list_oid:
        result = set_link(result, oid, None)
    items = _convert_items(code_list.items, target_type, external)
    item_order = tuple(
        item_oid for item_oid in code_list.item_order if item_oid in items.items
    )
    result[oid] = replace(result[oid], items=items, item_order=item_order)
    return result


def add_code_list(
    code_lists: Mapping[str, CodeList],
    *,
    name: str,
    code_list_type: CodeListType | str = CodeListType.DECODED,
    data_type: str = "text",
    external: ExternalCodeList | None = None,
) -> tuple[dict[str, CodeList], str]:
    oid = allocate_oid(OidType.CODE_LIST, code_lists, name)
    result = dict(code_lists)
    result[oid] = CodeList(
        oid=oid,
        name=name,
        items=empty_collection(CodeListType(code_list_type), external),
        data_type=data_type,
    )
    return result, oid


def update_code_list(
    code_lists: Mapping[str, CodeList], oid: str, patch: CodeListPatch
) -> dict[str, CodeList]:
    code_list = _require(code_lists, oid)
    changes = patch.changes()
    external = changes.pop("external", UNSET)
    if external is not UNSET:
        if not isinstance(code_list.items, ExternalItems):
            raise InvariantViolationError(
                f"CodeList {oid} is not external; its external reference cannot be set"
            )
        changes["items"] = ExternalItems(external=external)
    result = dict(code_lists)
    result[oid] = replace(code_list, **changes)
    return result


def delete_code_lists(
    code_lists: Mapping[str, CodeList], oids: Iterable[str]
) -> dict[str, CodeList]:
    """Remove codelists, unlinking any partner that survives the deletion.

    ItemDefs referencing a deleted codelist are left as they are; the
    caller dereferences them separately.
    """
    doomed = list(dict.fromkeys(oids))
    result = dict(code_lists)
    for oid in doomed:
        partner_oid = _require(code_lists, oid).linked_code_list_oid
        if partner_oid is not None and partner_oid not in doomed:
            partner = result.get(partner_oid)
            if partner is not None:
                result[partner_oid] = replace(partner, linked_code_list_oid=None)
    for oid in doomed:
        del result[oid]
    return result


def _without(values: tuple[str, ...], value: str) -> tuple[str, ...]:
    return tuple(v for v in values if v != value)


def update_item_def_code_list(
    code_lists: Mapping[str, CodeList],
    item_def_oid: str,
    previous_code_list_oid: str | None,
    new_code_list_oid: str | None,
) -> dict[str, CodeList]:
    """Move an ItemDef's back-reference from one codelist to another."""
    result = dict(code_lists)
    if previous_code_list_oid == new_code_list_oid:
        return result
    if previous_code_list_oid is not None:
        previous = result.get(previous_code_list_oid)
        if previous is not None and item_def_oid in previous.sources.item_defs:
            sources = replace(
                previous.sources,
                item_defs=_without(previous.sources.item_defs, item_def_oid),
            )
            result[previous_code_list_oid] = replace(previous, sources=sources)
    if new_code_list_oid is not None:
        new = _require(result, new_code_list_oid)
        if item_def_oid not in new.sources.item_defs:
            sources = replace(
                new.sources, item_defs=(*new.sources.item_defs, item_def_oid)
            )
            result[new_code_list_oid] = replace(new, sources=sources)
    return result


def delete_code_list_references(
    code_lists: Mapping[str, CodeList], references: Mapping[str, Iterable[str]]
) -> dict[str, CodeList]:
    """Drop ItemDef back-references, e.g. after the variables were deleted.

    ``references`` maps codelist OIDs to the ItemDef OIDs that no longer use
    them. A codelist that loses its last consumer is kept; codelists may
    exist without any variable referencing them.
    """
    result = dict(code_lists)
    for code_list_oid, item_def_oids in references.items():
        code_list = result.get(code_list_oid)
        if code_list is None:
            continue
        dropped = set(item_def_oids)
        remaining = tuple(
            oid for oid in code_list.sources.item_defs if oid not in dropped
        )
        if remaining != code_list.sources.item_defs:
            sources = replace(code_list.sources, item_defs=remaining)
            result[code_list_oid] = replace(code_list, sources=sources)
    return result


def set_standard(
    code_lists: Mapping[str, CodeList],
    oid: str,
    *,
    standard_oid: str | None,
    cdisc_submission_value: str | None,
    alias: Alias | None,
    standard_code_list: StandardCodeList | None,
) -> dict[str, CodeList]:
    code_list = _require(code_lists, oid)
    updated = replace(
        code_list,
        standard_oid=standard_oid,
        cdisc_submission_value=cdisc_submission_value,
        alias=alias,
    )
    result = dict(code_lists)
    result[oid] = synchronize(updated, standard_code_list)
    return result


def set_standard_oids(
    code_lists: Mapping[str, CodeList],
    updates: Mapping[str, tuple[str | None, str | None]],
    standard_code_lists: Mapping[str, StandardCodeList | None] | None = None,
) -> dict[str, CodeList]:
    """Re-point standards in bulk.

    Items are left alone unless ``standard_code_lists`` carries an entry for
    the codelist, in which case they are synchronized against it.
    """
    standard_code_lists = standard_code_lists or {}
    result = dict(code_lists)
    for oid, (standard_oid, cdisc_submission_value) in updates.items():
        code_list = replace(
            _require(result, oid),
            standard_oid=standard_oid,
            cdisc_submission_value=cdisc_submission_value,
        )
        if oid in standard_code_lists:
            code_list = synchronize(code_list, standard_code_lists[oid])
        result[oid] = code_list
    return result


def _fit_item(items: ItemCollection, item: CodedItem) -> CodedItem:
    if isinstance(items, EnumeratedItems) and isinstance(item, CodeListItem):
        return item.to_enumerated()
    if isinstance(items, DecodedItems) and isinstance(item, EnumeratedItem):
        return item.to_decoded()
    return item


def put_coded_item(code_list: CodeList, item_oid: str, item: CodedItem) -> CodeList:
    """Insert or replace one coded value; new OIDs go to the end of the order."""
    if isinstance(code_list.items, ExternalItems):
        raise InvariantViolationError(
            f"External codelist {code_list.oid} cannot hold coded values"
        )
    items = dict(code_list.items.items)
    items[item_oid] = _fit_item(code_list.items, item)
    item_order = code_list.item_order
    if item_oid not in code_list.items.items:
        item_order = (*item_order, item_oid)
    return replace(
        code_list,
        items=replace(code_list.items, items=items),
        item_order=item_order,
    )


def add_coded_value(
    code_lists: Mapping[str, CodeList],
    code_list_oid: str,
    coded_value: str,
    standard_code_list: StandardCodeList | None = None,
    *,
    allow_extension: bool = False,
) -> tuple[dict[str, CodeList], str | None]:
    """Append a coded value; external codelists are returned unchanged.

    With ``standard_code_list`` the new value takes the standard's alias, or
    is flagged as extended when the standard lacks it. A value missing from
    a non-extensible standard raises ``NonExtensibleViolationError`` unless
    ``allow_extension`` is set.
    """
    code_list = _require(code_lists, code_list_oid)
    result = dict(code_lists)
    if isinstance(code_list.items, ExternalItems):
        return result, None
    item = apply_new_value_rule(
        _fit_item(code_list.items, CodeListItem(coded_value=coded_value)),
        code_list.name,
        standard_code_list,
        allow_extension=allow_extension,
    )
    item_oid = allocate_oid(OidType.CODE_LIST_ITEM, code_list.items.items)
    result[code_list_oid] = put_coded_item(code_list, item_oid, item)
    return result, item_oid


def update_coded_value(
    code_lists: Mapping[str, CodeList],
    code_list_oid: str,
    item_oid: str,
    patch: CodedValuePatch,
    standard_code_list: StandardCodeList | None = None,
    *,
    allow_extension: bool = False,
) -> dict[str, CodeList]:
    """Patch one coded value.

    A changed coded value is checked against ``standard_code_list`` the same
    way ``add_coded_value`` checks a new one.
    """
    code_list = _require(code_lists, code_list_oid)
    result = dict(code_lists)
    if isinstance(code_list.items, ExternalItems):
        return result
    item = code_list.items.items.get(item_oid)
    if item is None:
        raise UnknownOidError("CodeListItem", item_oid)
    changes = patch.changes()
    if isinstance(item, EnumeratedItem):
        changes.pop("decode", None)
    updated = replace(item, **changes)
    if updated.coded_value != item.coded_value:
        updated = apply_new_value_rule(
            updated,
            code_list.name,
            standard_code_list,
            allow_extension=allow_extension,
        )
    result[code_list_oid] = put_coded_item(code_list, item_oid, updated)
    return result


def delete_coded_values(
    code_lists: Mapping[str, CodeList],
    code_list_oid: str,
    item_oids: Iterable[str],
) -> dict[str, CodeList]:
    """Remove coded values by OID from both the collection and the order."""
    code_list = _require(code_lists, code_list_oid)
    result = dict(code_lists)
    if isinstance(code_list.items, ExternalItems):
        return result
    doomed = set(item_oids)
    for item_oid in doomed:
        if item_oid not in code_list.items.items:
            raise UnknownOidError("CodeListItem", item_oid)
    items = {
        item_oid: item
        for item_oid, item in code_list.items.items.items()
        if item_oid not in doomed
    }
    result[code_list_oid] = replace(
        code_list,
        items=replace(code_list.items, items=items),
        item_order=tuple(oid for oid in code_list.item_order if oid not in doomed),
    )
    return result
