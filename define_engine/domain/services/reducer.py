"""Apply edit actions to a metadata version.

``reduce`` is a pure function: it returns a new ``MetaDataVersion`` and
leaves the one passed in untouched.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from ..exceptions import UnknownOidError
from . import codelist_transitions as transitions
from .actions import (
    CreateCodedValue,
    CreateCodeList,
    DeleteCodedValues,
    DeleteCodeLists,
    DeleteVariableReferences,
    SetItemDefCodeList,
    SetLink,
    SetStandard,
    SetStandardOids,
    SetType,
    UpdateCodedValue,
    UpdateCodeList,
)

if TYPE_CHECKING:
    from ..entities.codelist import CodeList
    from ..entities.metadata import ItemDef
    from ..entities.study import MetaDataVersion
    from .actions import Action


def _with_code_lists(
    state: MetaDataVersion, code_lists: dict[str, CodeList]
) -> MetaDataVersion:
    return replace(state, code_lists=code_lists)


def _insert_at(
    order: tuple[str, ...], oid: str, position: int | None
) -> tuple[str, ...]:
    if position is None or position >= len(order):
        return (*order, oid)
    position = max(position, 0)
    return (*order[:position], oid, *order[position:])


def _create_code_list(state: MetaDataVersion, action: CreateCodeList) -> MetaDataVersion:
    code_lists, oid = transitions.add_code_list(
        state.code_lists,
        name=action.name,
        code_list_type=action.code_list_type,
        data_type=action.data_type,
        external=action.external,
    )
    return replace(
        state,
        code_lists=code_lists,
        code_list_order=_insert_at(state.code_list_order, oid, action.position),
    )


def _delete_code_lists(
    state: MetaDataVersion, action: DeleteCodeLists
) -> MetaDataVersion:
    code_lists = transitions.delete_code_lists(state.code_lists, action.oids)
    doomed = set(action.oids)
    return replace(
        state,
        code_lists=code_lists,
        code_list_order=tuple(
            oid for oid in state.code_list_order if oid not in doomed
        ),
    )


def _set_item_def_code_list(
    state: MetaDataVersion, action: SetItemDefCodeList
) -> MetaDataVersion:
    item_def = state.get_item_def(action.item_def_oid)
    if action.code_list_oid is not None and action.code_list_oid not in state.code_lists:
        raise UnknownOidError("CodeList", action.code_list_oid)
    code_lists = transitions.update_item_def_code_list(
        state.code_lists,
        item_def.oid,
        item_def.code_list_oid,
        action.code_list_oid,
    )
    item_defs = dict(state.item_defs)
    item_defs[item_def.oid] = replace(item_def, code_list_oid=action.code_list_oid)
    return replace(state, item_defs=item_defs, code_lists=code_lists)


def _delete_variable_references(
    state: MetaDataVersion, action: DeleteVariableReferences
) -> MetaDataVersion:
    """Remove variables from a dataset and clean up what referenced them.

    ItemDefs left without any dataset are deleted together with their
    value-level children, and their codelists drop the back-reference.
    """
    item_group = state.get_item_group(action.item_group_oid)
    doomed_refs = set(action.item_ref_oids)
    for item_ref_oid in doomed_refs:
        if item_ref_oid not in item_group.item_refs:
            raise UnknownOidError("ItemRef", item_ref_oid)

    item_groups = dict(state.item_groups)
    item_groups[item_group.oid] = replace(
        item_group,
        item_refs={
            oid: item_ref
            for oid, item_ref in item_group.item_refs.items()
            if oid not in doomed_refs
        },
        item_ref_order=tuple(
            oid for oid in item_group.item_ref_order if oid not in doomed_refs
        ),
    )

    item_defs = dict(state.item_defs)
    orphaned: set[str] = set()
    for item_ref_oid in doomed_refs:
        item_def_oid = item_group.item_refs[item_ref_oid].item_oid
        item_def = item_defs.get(item_def_oid)
        if item_def is None:
            continue
        remaining = tuple(
            oid for oid in item_def.sources.item_groups if oid != item_group.oid
        )
        if remaining or item_def.sources.value_lists:
            item_defs[item_def_oid] = replace(
                item_def, sources=replace(item_def.sources, item_groups=remaining)
            )
        else:
            orphaned.add(item_def_oid)
    orphaned.update(
        oid
        for oid, item_def in item_defs.items()
        if item_def.parent_item_def_oid in orphaned
    )

    deleted: list[ItemDef] = [item_defs.pop(oid) for oid in sorted(orphaned)]
    references: dict[str, list[str]] = {}
    for item_def in deleted:
        if item_def.code_list_oid is not None:
            references.setdefault(item_def.code_list_oid, []).append(item_def.oid)
    code_lists = transitions.delete_code_list_references(state.code_lists, references)
    return replace(
        state, item_groups=item_groups, item_defs=item_defs, code_lists=code_lists
    )


def reduce(state: MetaDataVersion, action: Action) -> MetaDataVersion:
    match action:
        case CreateCodeList():
            return _create_code_list(state, action)
        case UpdateCodeList(oid=oid, patch=patch):
            return _with_code_lists(
                state, transitions.update_code_list(state.code_lists, oid, patch)
            )
        case SetLink(oid=oid, target_oid=target_oid):
            return _with_code_lists(
                state, transitions.set_link(state.code_lists, oid, target_oid)
            )
        case SetType(oid=oid, new_type=new_type, external=external):
            return _with_code_lists(
                state,
                transitions.set_type(state.code_lists, oid, new_type, external),
            )
        case DeleteCodeLists():
            return _delete_code_lists(state, action)
        case SetStandard():
            return _with_code_lists(
                state,
                transitions.set_standard(
                    state.code_lists,
                    action.oid,
                    standard_oid=action.standard_oid,
                    cdisc_submission_value=action.cdisc_submission_value,
                    alias=action.alias,
                    standard_code_list=action.standard_code_list,
                ),
            )
        case SetStandardOids(updates=updates, standard_code_lists=standards):
            return _with_code_lists(
                state,
                transitions.set_standard_oids(state.code_lists, updates, standards),
            )
        case CreateCodedValue():
            code_lists, _ = transitions.add_coded_value(
                state.code_lists,
                action.code_list_oid,
                action.coded_value,
                action.standard_code_list,
                allow_extension=action.allow_extension,
            )
            return _with_code_lists(state, code_lists)
        case UpdateCodedValue():
            return _with_code_lists(
                state,
                transitions.update_coded_value(
                    state.code_lists,
                    action.code_list_oid,
                    action.item_oid,
                    action.patch,
                    action.standard_code_list,
                    allow_extension=action.allow_extension,
                ),
            )
        case DeleteCodedValues(code_list_oid=code_list_oid, item_oids=item_oids):
            return _with_code_lists(
                state,
                transitions.delete_coded_values(
                    state.code_lists, code_list_oid, item_oids
                ),
            )
        case SetItemDefCodeList():
            return _set_item_def_code_list(state, action)
        case DeleteVariableReferences():
            return _delete_variable_references(state, action)
        case _:
            raise ValueError(f"Unsupported action: {action!r}")
