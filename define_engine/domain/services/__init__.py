"""Domain services.

Pure transitions and computations over metadata versions.
"""

from .actions import (
    Action,
    ActionKind,
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
from .codelist_transitions import (
    UNSET,
    CodedValuePatch,
    CodeListPatch,
    add_code_list,
    add_coded_value,
    delete_code_list_references,
    delete_code_lists,
    delete_coded_values,
    set_link,
    set_standard,
    set_standard_oids,
    set_type,
    update_code_list,
    update_coded_value,
    update_item_def_code_list,
)
from .import_diff import (
    ImportDiff,
    VariableDiff,
    apply_import_diff,
)
from .import_reconciliation import (
    MetadataReconciler,
    ReconcileOptions,
    reconcile,
)
from .oid_allocator import (
    OidType,
    allocate_oid,
)
from .reducer import reduce
from .source_labels import (
    SourceLabels,
    describe_sources,
)
from .standard_sync import (
    apply_new_value_rule,
    synchronize,
    synchronize_item,
)

__all__ = [
    # Actions
    "Action",
    "ActionKind",
    "CreateCodeList",
    "CreateCodedValue",
    "DeleteCodeLists",
    "DeleteCodedValues",
    "DeleteVariableReferences",
    "SetItemDefCodeList",
    "SetLink",
    "SetStandard",
    "SetStandardOids",
    "SetType",
    "UpdateCodeList",
    "UpdateCodedValue",
    "reduce",
    # Codelist transitions
    "UNSET",
    "CodeListPatch",
    "CodedValuePatch",
    "add_code_list",
    "add_coded_value",
    "delete_code_list_references",
    "delete_code_lists",
    "delete_coded_values",
    "set_link",
    "set_standard",
    "set_standard_oids",
    "set_type",
    "update_code_list",
    "update_coded_value",
    "update_item_def_code_list",
    # Import
    "ImportDiff",
    "MetadataReconciler",
    "ReconcileOptions",
    "VariableDiff",
    "apply_import_diff",
    "reconcile",
    # OIDs
    "OidType",
    "allocate_oid",
    # Standards
    "apply_new_value_rule",
    "synchronize",
    "synchronize_item",
    # Sources
    "SourceLabels",
    "describe_sources",
]
