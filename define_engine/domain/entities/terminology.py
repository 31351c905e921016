from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .codelist import CodeList
from .metadata import Alias


@dataclass(frozen=True, slots=True)
class StandardCodeListItem:
    coded_value: str
    alias: Alias | None = None
    decode: str | None = None


def _empty_standard_items() -> tuple[StandardCodeListItem, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class StandardCodeList:
    oid: str
    name: str
    codelist_code: str | None = None
    submission_value: str | None = None
    extensible: bool = True
    items: tuple[StandardCodeListItem, ...] = field(
        default_factory=_empty_standard_items
    )

    def find(self, coded_value: str) -> StandardCodeListItem | None:
        for item in self.items:
            if item.coded_value == coded_value:
                return item
        return None

    def coded_values(self) -> tuple[str, ...]:
        return tuple(item.coded_value for item in self.items)


def _empty_standard_code_lists() -> dict[str, StandardCodeList]:
    return {}


@dataclass(frozen=True, slots=True)
class ControlledTerminology:
    """One controlled terminology package, e.g. SDTM CT 2023-12-15.

    ``code_lists`` is keyed by the NCI codelist code.
    """

    oid: str
    name: str
    version: str | None = None
    code_lists: dict[str, StandardCodeList] = field(
        default_factory=_empty_standard_code_lists
    )


type StandardLookup = Mapping[str, ControlledTerminology]


def resolve_standard_code_list(
    code_list: CodeList, standards: StandardLookup
) -> StandardCodeList | None:
    if code_list.standard_oid is None:
        return None
    nci_code = code_list.nci_code
    if nci_code is None:
        return None
    terminology = standards.get(code_list.standard_oid)
    if terminology is None:
        return None
    return terminology.code_lists.get(nci_code)
