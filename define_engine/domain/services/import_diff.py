from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from ..exceptions import UnknownOidError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..entities.codelist import CodeList
    from ..entities.metadata import ItemDef, ItemGroup, ItemRef
    from ..entities.study import MetaDataVersion


def _empty_item_groups() -> dict[str, ItemGroup]:
    return {}


def _empty_item_defs() -> dict[str, ItemDef]:
    return {}


def _empty_item_refs() -> dict[str, ItemRef]:
    return {}


def _empty_code_lists() -> dict[str, CodeList]:
    return {}


def _empty_variable_diffs() -> dict[str, VariableDiff]:
    return {}


@dataclass(slots=True)
class VariableDiff:
    new_item_defs: dict[str, ItemDef] = field(default_factory=_empty_item_defs)
    updated_item_defs: dict[str, ItemDef] = field(default_factory=_empty_item_defs)
    new_item_refs: dict[str, ItemRef] = field(default_factory=_empty_item_refs)
    updated_item_refs: dict[str, ItemRef] = field(default_factory=_empty_item_refs)

    def is_empty(self) -> bool:
        return not (
            self.new_item_defs
            or self.updated_item_defs
            or self.new_item_refs
            or self.updated_item_refs
        )


@dataclass(slots=True)
class ImportDiff:
    """Creates and replacements produced by one reconciled import batch.

    ``variables`` is keyed by the OID of the dataset the variables belong to.
    Every entity is complete and replaces the stored one verbatim.
    """

    new_item_groups: dict[str, ItemGroup] = field(default_factory=_empty_item_groups)
    updated_item_groups: dict[str, ItemGroup] = field(
        default_factory=_empty_item_groups
    )
    variables: dict[str, VariableDiff] = field(default_factory=_empty_variable_diffs)
    new_code_lists: dict[str, CodeList] = field(default_factory=_empty_code_lists)
    updated_code_lists: dict[str, CodeList] = field(default_factory=_empty_code_lists)

    def is_empty(self) -> bool:
        return not (
            self.new_item_groups
            or self.updated_item_groups
            or self.new_code_lists
            or self.updated_code_lists
            or any(not diff.is_empty() for diff in self.variables.values())
        )

    def summary(self) -> dict[str, tuple[int, int]]:
        """Return ``{collection: (created, updated)}`` counts."""
        return {
            "datasets": (len(self.new_item_groups), len(self.updated_item_groups)),
            "variables": (
                sum(len(diff.new_item_defs) for diff in self.variables.values()),
                sum(len(diff.updated_item_defs) for diff in self.variables.values()),
            ),
            "variable references": (
                sum(len(diff.new_item_refs) for diff in self.variables.values()),
                sum(len(diff.updated_item_refs) for diff in self.variables.values()),
            ),
            "codelists": (len(self.new_code_lists), len(self.updated_code_lists)),
        }


def _check_known(
    updated: Mapping[str, object], existing: Mapping[str, object], kind: str
) -> None:
    for oid in updated:
        if oid not in existing:
            raise UnknownOidError(kind, oid)


def apply_import_diff(state: MetaDataVersion, diff: ImportDiff) -> MetaDataVersion:
    """Apply a reconciliation diff as one transition of the metadata version."""
    _check_known(diff.updated_item_groups, state.item_groups, "ItemGroup")
    _check_known(diff.updated_code_lists, state.code_lists, "CodeList")

    item_groups = dict(state.item_groups)
    item_groups.update(diff.updated_item_groups)
    item_groups.update(diff.new_item_groups)
    item_group_order = state.item_group_order + tuple(
        oid for oid in diff.new_item_groups if oid not in state.item_groups
    )

    item_defs = dict(state.item_defs)
    for group_oid, variable_diff in diff.variables.items():
        _check_known(variable_diff.updated_item_defs, state.item_defs, "ItemDef")
        item_defs.update(variable_diff.updated_item_defs)
        item_defs.update(variable_diff.new_item_defs)
        try:
            item_group = item_groups[group_oid]
        except KeyError:
            raise UnknownOidError("ItemGroup", group_oid) from None
        _check_known(variable_diff.updated_item_refs, item_group.item_refs, "ItemRef")
        item_refs = dict(item_group.item_refs)
        item_refs.update(variable_diff.updated_item_refs)
        item_refs.update(variable_diff.new_item_refs)
        item_ref_order = item_group.item_ref_order + tuple(
            oid for oid in variable_diff.new_item_refs if oid not in item_group.item_refs
        )
        item_groups[group_oid] = replace(
            item_group, item_refs=item_refs, item_ref_order=item_ref_order
        )

    code_lists = dict(state.code_lists)
    code_lists.update(diff.updated_code_lists)
    code_lists.update(diff.new_code_lists)
    code_list_order = state.code_list_order + tuple(
        oid for oid in diff.new_code_lists if oid not in state.code_lists
    )

    return replace(
        state,
        item_groups=item_groups,
        item_defs=item_defs,
        code_lists=code_lists,
        item_group_order=item_group_order,
        code_list_order=code_list_order,
    )
