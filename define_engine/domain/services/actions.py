"""Edit actions accepted by the metadata reducer.

Each action kind has its own payload type; ``Action`` is the closed union
of all of them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from ..entities.codelist import CodeListType, ExternalCodeList
from ..entities.metadata import Alias
from ..entities.terminology import StandardCodeList
from .codelist_transitions import CodeListPatch, CodedValuePatch


class ActionKind(str, Enum):
    CODE_LIST_CREATE = "codelist-create"
    CODE_LIST_UPDATE = "codelist-update"
    LINK_SET = "link-set"
    TYPE_SET = "type-set"
    CODE_LIST_DELETE = "codelist-delete"
    CODE_LIST_STANDARD_SET = "codelist-standard-set"
    CODE_LIST_STANDARD_OIDS_SET = "codelist-standard-oids-set"
    CODED_VALUE_CREATE = "coded-value-create"
    CODED_VALUE_UPDATE = "coded-value-update"
    CODED_VALUE_DELETE = "coded-value-delete"
    ITEM_DEF_CODE_LIST_SET = "item-def-codelist-set"
    VARIABLE_REFERENCE_DELETE = "variable-reference-delete"


@dataclass(frozen=True, slots=True)
class CreateCodeList:
    kind: ClassVar[ActionKind] = ActionKind.CODE_LIST_CREATE

    name: str
    code_list_type: CodeListType = CodeListType.DECODED
    data_type: str = "text"
    external: ExternalCodeList | None = None
    # Index in the codelist order; None appends.
    position: int | None = None


@dataclass(frozen=True, slots=True)
class UpdateCodeList:
    kind: ClassVar[ActionKind] = ActionKind.CODE_LIST_UPDATE

    oid: str
    patch: CodeListPatch


@dataclass(frozen=True, slots=True)
class SetLink:
    kind: ClassVar[ActionKind] = ActionKind.LINK_SET

    oid: str
    target_oid: str | None


@dataclass(frozen=True, slots=True)
class SetType:
    kind: ClassVar[ActionKind] = ActionKind.TYPE_SET

    oid: str
    new_type: CodeListType
    external: ExternalCodeList | None = None


@dataclass(frozen=True, slots=True)
class DeleteCodeLists:
    kind: ClassVar[ActionKind] = ActionKind.CODE_LIST_DELETE

    oids: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SetStandard:
    kind: ClassVar[ActionKind] = ActionKind.CODE_LIST_STANDARD_SET

    oid: str
    standard_oid: str | None
    cdisc_submission_value: str | None = None
    alias: Alias | None = None
    standard_code_list: StandardCodeList | None = None


def _empty_standard_updates() -> dict[str, tuple[str | None, str | None]]:
    return {}


def _empty_standard_code_lists() -> dict[str, StandardCodeList | None]:
    return {}


@dataclass(frozen=True, slots=True)
class SetStandardOids:
    kind: ClassVar[ActionKind] = ActionKind.CODE_LIST_STANDARD_OIDS_SET

    # {codelist OID: (standard OID, CDISC submission value)}
    updates: Mapping[str, tuple[str | None, str | None]] = field(
        default_factory=_empty_standard_updates
    )
    # Standard codelists to synchronize against, keyed by codelist OID.
    standard_code_lists: Mapping[str, StandardCodeList | None] = field(
        default_factory=_empty_standard_code_lists
    )


@dataclass(frozen=True, slots=True)
class CreateCodedValue:
    kind: ClassVar[ActionKind] = ActionKind.CODED_VALUE_CREATE

    code_list_oid: str
    coded_value: str
    standard_code_list: StandardCodeList | None = None
    allow_extension: bool = False


@dataclass(frozen=True, slots=True)
class UpdateCodedValue:
    kind: ClassVar[ActionKind] = ActionKind.CODED_VALUE_UPDATE

    code_list_oid: str
    item_oid: str
    patch: CodedValuePatch
    standard_code_list: StandardCodeList | None = None
    allow_extension: bool = False


@dataclass(frozen=True, slots=True)
class DeleteCodedValues:
    kind: ClassVar[ActionKind] = ActionKind.CODED_VALUE_DELETE

    code_list_oid: str
    item_oids: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SetItemDefCodeList:
    kind: ClassVar[ActionKind] = ActionKind.ITEM_DEF_CODE_LIST_SET

    item_def_oid: str
    code_list_oid: str | None


@dataclass(frozen=True, slots=True)
class DeleteVariableReferences:
    kind: ClassVar[ActionKind] = ActionKind.VARIABLE_REFERENCE_DELETE

    item_group_oid: str
    item_ref_oids: tuple[str, ...]


type Action = (
    CreateCodeList
    | UpdateCodeList
    | SetLink
    | SetType
    | DeleteCodeLists
    | SetStandard
    | SetStandardOids
    | CreateCodedValue
    | UpdateCodedValue
    | DeleteCodedValues
    | SetItemDefCodeList
    | DeleteVariableReferences
)
