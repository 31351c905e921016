"""Domain entities.

Datasets, variables, codelists, the metadata version snapshot that holds
them, controlled terminology and bulk-import records.
"""

from .codelist import (
    CodeList,
    CodeListItem,
    CodeListSources,
    CodeListType,
    DecodedItems,
    EnumeratedItem,
    EnumeratedItems,
    ExternalCodeList,
    ExternalItems,
    empty_collection,
)
from .import_records import (
    CodedValueRecord,
    CodeListRecord,
    DatasetRecord,
    ImportBatch,
    VariableRecord,
)
from .metadata import (
    Alias,
    ItemDef,
    ItemDefSources,
    ItemGroup,
    ItemRef,
    Leaf,
    Origin,
    TranslatedText,
)
from .study import MetaDataVersion
from .terminology import (
    ControlledTerminology,
    StandardCodeList,
    StandardCodeListItem,
    resolve_standard_code_list,
)

__all__ = [
    # Metadata entities
    "Alias",
    "ItemDef",
    "ItemDefSources",
    "ItemGroup",
    "ItemRef",
    "Leaf",
    "Origin",
    "TranslatedText",
    "MetaDataVersion",
    # Codelists
    "CodeList",
    "CodeListItem",
    "CodeListSources",
    "CodeListType",
    "DecodedItems",
    "EnumeratedItem",
    "EnumeratedItems",
    "ExternalCodeList",
    "ExternalItems",
    "empty_collection",
    # Controlled terminology
    "ControlledTerminology",
    "StandardCodeList",
    "StandardCodeListItem",
    "resolve_standard_code_list",
    # Import records
    "CodedValueRecord",
    "CodeListRecord",
    "DatasetRecord",
    "ImportBatch",
    "VariableRecord",
]
