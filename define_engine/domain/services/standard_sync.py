"""Keep coded values in line with the controlled terminology they cite."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from ...constants import Flags
from ..entities.codelist import CodeListItem, EnumeratedItem, ExternalItems
from ..exceptions import NonExtensibleViolationError

if TYPE_CHECKING:
    from ..entities.codelist import CodeList
    from ..entities.terminology import StandardCodeList


def synchronize_item[T: (CodeListItem, EnumeratedItem)](
    item: T, standard: StandardCodeList | None
) -> T:
    if standard is None:
        if item.alias is None and item.extended_value is None:
            return item
        return replace(item, alias=None, extended_value=None)
    standard_item = standard.find(item.coded_value)
    if standard_item is not None:
        if item.alias == standard_item.alias:
            return item
        return replace(item, alias=standard_item.alias)
    if item.extended_value == Flags.EXTENDED_VALUE:
        return item
    return replace(item, alias=None, extended_value=Flags.EXTENDED_VALUE)


def synchronize(code_list: CodeList, standard: StandardCodeList | None) -> CodeList:
    """Reconcile every coded value of ``code_list`` against ``standard``.

    With no standard, aliases and extended-value flags are stripped. With a
    standard, matching values take the standard's alias and values missing
    from it are flagged as extended. Coded values themselves never change.
    """
    if isinstance(code_list.items, ExternalItems):
        return code_list
    current = code_list.items.items
    synchronized = {
        item_oid: synchronize_item(item, standard) for item_oid, item in current.items()
    }
    if all(synchronized[item_oid] is current[item_oid] for item_oid in current):
        return code_list
    return replace(code_list, items=replace(code_list.items, items=synchronized))


def apply_new_value_rule[T: (CodeListItem, EnumeratedItem)](
    item: T,
    code_list_name: str,
    standard: StandardCodeList | None,
    *,
    allow_extension: bool = False,
) -> T:
    """Prepare a newly entered coded value for a standard-backed codelist.

    Raises ``NonExtensibleViolationError`` when the value is absent from a
    non-extensible standard and extension is not allowed.
    """
    if standard is None:
        return item
    standard_item = standard.find(item.coded_value)
    if standard_item is not None:
        return replace(item, alias=standard_item.alias, extended_value=None)
    if not standard.extensible and not allow_extension:
        raise NonExtensibleViolationError(code_list_name, item.coded_value)
    return replace(item, alias=None, extended_value=Flags.EXTENDED_VALUE)
