from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass, field

from ...constants import DatasetPurposes, Flags
from ..exceptions import InvariantViolationError


def ensure_order_matches(
    order: Sequence[str], keys: Collection[str], *, owner: str
) -> None:
    """Raise unless ``order`` lists every key of ``keys`` exactly once."""
    if len(order) != len(set(order)):
        raise InvariantViolationError(f"{owner}: order list contains duplicates")
    if set(order) != set(keys):
        missing = sorted(set(keys) - set(order))
        extra = sorted(set(order) - set(keys))
        raise InvariantViolationError(
            f"{owner}: order list out of sync (missing={missing}, unknown={extra})"
        )


@dataclass(frozen=True, slots=True)
class TranslatedText:
    value: str
    lang: str | None = None


@dataclass(frozen=True, slots=True)
class Alias:
    name: str
    context: str


@dataclass(frozen=True, slots=True)
class Leaf:
    id: str
    href: str | None = None
    title: str | None = None


@dataclass(frozen=True, slots=True)
class Origin:
    type: str | None = None
    source: str | None = None
    description: TranslatedText | None = None


@dataclass(frozen=True, slots=True)
class ItemDefSources:
    item_groups: tuple[str, ...] = ()
    value_lists: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ItemRef:
    oid: str
    item_oid: str
    order_number: int | None = None
    mandatory: str = Flags.NO
    key_sequence: int | None = None
    method_oid: str | None = None


@dataclass(frozen=True, slots=True)
class ItemDef:
    oid: str
    name: str
    data_type: str = "text"
    length: int | None = None
    fraction_digits: int | None = None
    display_format: str | None = None
    description: TranslatedText | None = None
    origin: Origin | None = None
    code_list_oid: str | None = None
    parent_item_def_oid: str | None = None
    sources: ItemDefSources = field(default_factory=ItemDefSources)

    @property
    def label(self) -> str | None:
        return self.description.value if self.description else None


def _empty_item_refs() -> dict[str, ItemRef]:
    return {}


@dataclass(frozen=True, slots=True)
class ItemGroup:
    oid: str
    name: str
    purpose: str = DatasetPurposes.TABULATION
    dataset_name: str | None = None
    description: TranslatedText | None = None
    structure: str | None = None
    leaf: Leaf | None = None
    item_refs: dict[str, ItemRef] = field(default_factory=_empty_item_refs)
    item_ref_order: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        ensure_order_matches(
            self.item_ref_order, self.item_refs, owner=f"ItemGroup {self.oid}"
        )

    @property
    def label(self) -> str | None:
        return self.description.value if self.description else None

    def find_item_ref(self, item_oid: str) -> ItemRef | None:
        for item_ref in self.item_refs.values():
            if item_ref.item_oid == item_oid:
                return item_ref
        return None
