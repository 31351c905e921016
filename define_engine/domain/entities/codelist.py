from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ...constants import AliasContexts
from .metadata import Alias, TranslatedText, ensure_order_matches


class CodeListType(str, Enum):
    ENUMERATED = "enumerated"
    DECODED = "decoded"
    EXTERNAL = "external"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


@dataclass(frozen=True, slots=True)
class EnumeratedItem:
    coded_value: str
    alias: Alias | None = None
    extended_value: str | None = None
    rank: float | None = None

    def to_decoded(self) -> CodeListItem:
        return CodeListItem(
            coded_value=self.coded_value,
            decode=TranslatedText(value=""),
            alias=self.alias,
            extended_value=self.extended_value,
            rank=self.rank,
        )


@dataclass(frozen=True, slots=True)
class CodeListItem:
    coded_value: str
    decode: TranslatedText | None = None
    alias: Alias | None = None
    extended_value: str | None = None
    rank: float | None = None

    def to_enumerated(self) -> EnumeratedItem:
        return EnumeratedItem(
            coded_value=self.coded_value,
            alias=self.alias,
            extended_value=self.extended_value,
            rank=self.rank,
        )


type CodedItem = CodeListItem | EnumeratedItem


@dataclass(frozen=True, slots=True)
class ExternalCodeList:
    dictionary: str | None = None
    version: str | None = None
    ref: str | None = None
    href: str | None = None


def _empty_decoded() -> dict[str, CodeListItem]:
    return {}


def _empty_enumerated() -> dict[str, EnumeratedItem]:
    return {}


@dataclass(frozen=True, slots=True)
class DecodedItems:
    items: dict[str, CodeListItem] = field(default_factory=_empty_decoded)

    @property
    def code_list_type(self) -> CodeListType:
        return CodeListType.DECODED


@dataclass(frozen=True, slots=True)
class EnumeratedItems:
    items: dict[str, EnumeratedItem] = field(default_factory=_empty_enumerated)

    @property
    def code_list_type(self) -> CodeListType:
        return CodeListType.ENUMERATED


@dataclass(frozen=True, slots=True)
class ExternalItems:
    external: ExternalCodeList = field(default_factory=ExternalCodeList)

    @property
    def code_list_type(self) -> CodeListType:
        return CodeListType.EXTERNAL

    @property
    def items(self) -> dict[str, CodedItem]:
        return {}


type ItemCollection = DecodedItems | EnumeratedItems | ExternalItems


def empty_collection(
    code_list_type: CodeListType, external: ExternalCodeList | None = None
) -> ItemCollection:
    match code_list_type:
        case CodeListType.DECODED:
            return DecodedItems()
        case CodeListType.ENUMERATED:
            return EnumeratedItems()
        case CodeListType.EXTERNAL:
            return ExternalItems(external=external or ExternalCodeList())
        case _:
            raise ValueError(f"Unknown codelist type: {code_list_type!r}")


@dataclass(frozen=True, slots=True)
class CodeListSources:
    item_defs: tuple[str, ...] = ()
    analysis_results: tuple[str, ...] = ()

    def count(self) -> int:
        return len(self.item_defs) + len(self.analysis_results)


@dataclass(frozen=True, slots=True)
class CodeList:
    """A codelist whose item collection is selected by its type.

    The populated collection is the ``items`` variant, so the type tag can
    never disagree with the collection. ``item_order`` must list exactly the
    keys of that collection.
    """

    oid: str
    name: str
    items: ItemCollection = field(default_factory=DecodedItems)
    item_order: tuple[str, ...] = ()
    data_type: str = "text"
    linked_code_list_oid: str | None = None
    standard_oid: str | None = None
    cdisc_submission_value: str | None = None
    alias: Alias | None = None
    format_name: str | None = None
    comment_oid: str | None = None
    sources: CodeListSources = field(default_factory=CodeListSources)

    def __post_init__(self) -> None:
        ensure_order_matches(
            self.item_order, self.items.items, owner=f"CodeList {self.oid}"
        )

    @property
    def code_list_type(self) -> CodeListType:
        return self.items.code_list_type

    @property
    def code_list_items(self) -> dict[str, CodeListItem] | None:
        if isinstance(self.items, DecodedItems):
            return self.items.items
        return None

    @property
    def enumerated_items(self) -> dict[str, EnumeratedItem] | None:
        if isinstance(self.items, EnumeratedItems):
            return self.items.items
        return None

    @property
    def external_code_list(self) -> ExternalCodeList | None:
        if isinstance(self.items, ExternalItems):
            return self.items.external
        return None

    @property
    def coded_items(self) -> dict[str, CodedItem]:
        return dict(self.items.items)

    @property
    def nci_code(self) -> str | None:
        if self.alias is not None and self.alias.context == AliasContexts.NCI_CODE:
            return self.alias.name
        return None

    def find_item_oid(self, coded_value: str) -> str | None:
        for item_oid, item in self.items.items.items():
            if item.coded_value == coded_value:
                return item_oid
        return None
