from __future__ import annotations

from dataclasses import dataclass, field

from ...constants import Defaults
from ..exceptions import UnknownOidError
from .codelist import CodeList
from .metadata import ItemDef, ItemGroup, ensure_order_matches


def _empty_item_groups() -> dict[str, ItemGroup]:
    return {}


def _empty_item_defs() -> dict[str, ItemDef]:
    return {}


def _empty_code_lists() -> dict[str, CodeList]:
    return {}


@dataclass(frozen=True, slots=True)
class MetaDataVersion:
    """Snapshot of the whole metadata entity graph.

    Every transition returns a new snapshot; the mappings held here are
    never modified after construction.
    """

    model: str = Defaults.MODEL
    item_groups: dict[str, ItemGroup] = field(default_factory=_empty_item_groups)
    item_defs: dict[str, ItemDef] = field(default_factory=_empty_item_defs)
    code_lists: dict[str, CodeList] = field(default_factory=_empty_code_lists)
    item_group_order: tuple[str, ...] = ()
    code_list_order: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        ensure_order_matches(
            self.item_group_order, self.item_groups, owner="MetaDataVersion item groups"
        )
        ensure_order_matches(
            self.code_list_order, self.code_lists, owner="MetaDataVersion codelists"
        )

    def get_item_group(self, oid: str) -> ItemGroup:
        try:
            return self.item_groups[oid]
        except KeyError:
            raise UnknownOidError("ItemGroup", oid) from None

    def get_item_def(self, oid: str) -> ItemDef:
        try:
            return self.item_defs[oid]
        except KeyError:
            raise UnknownOidError("ItemDef", oid) from None

    def get_code_list(self, oid: str) -> CodeList:
        try:
            return self.code_lists[oid]
        except KeyError:
            raise UnknownOidError("CodeList", oid) from None

    def find_item_group_oid(self, name: str) -> str | None:
        for oid, item_group in self.item_groups.items():
            if item_group.name == name:
                return oid
        return None

    def find_code_list_oid(self, name: str) -> str | None:
        for oid, code_list in self.code_lists.items():
            if code_list.name == name:
                return oid
        return None

    def find_item_def_oid(self, item_group_oid: str, name: str) -> str | None:
        item_group = self.item_groups.get(item_group_oid)
        if item_group is None:
            return None
        for item_ref_oid in item_group.item_ref_order:
            item_oid = item_group.item_refs[item_ref_oid].item_oid
            item_def = self.item_defs.get(item_oid)
            if item_def is not None and item_def.name == name:
                return item_oid
        return None
