"""Merge bulk-imported tabular metadata into a metadata version.

Records are matched to existing entities by natural key (dataset name,
variable name within its dataset, codelist name, coded value within its
codelist). Stages run in a fixed order, datasets, variables, codelists and
coded values, because later stages resolve names created by earlier ones.

Reconciliation never touches the metadata version it reads. It returns an
``ImportDiff`` or raises a ``MetadataImportError`` and nothing else, so a
rejected batch leaves no trace.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from rapidfuzz import fuzz, process

from ...constants import AliasContexts, DatasetPurposes, Flags, Models, OriginTypes
from ..entities.codelist import (
    CodeList,
    CodeListItem,
    CodeListType,
    EnumeratedItem,
    ExternalItems,
    empty_collection,
)
from ..entities.metadata import (
    Alias,
    ItemDef,
    ItemDefSources,
    ItemGroup,
    ItemRef,
    Leaf,
    Origin,
    TranslatedText,
)
from ..entities.terminology import resolve_standard_code_list
from ..exceptions import InvalidEnumValueError, InvalidReferenceError
from .codelist_transitions import put_coded_item, set_type
from .import_diff import ImportDiff, VariableDiff
from .oid_allocator import OidType, allocate_oid
from .standard_sync import apply_new_value_rule, synchronize, synchronize_item

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..entities.codelist import CodedItem
    from ..entities.import_records import (
        CodedValueRecord,
        CodeListRecord,
        DatasetRecord,
        ImportBatch,
        VariableRecord,
    )
    from ..entities.study import MetaDataVersion
    from ..entities.terminology import StandardLookup

SUGGESTION_MIN_SCORE = 80.0
_MANDATORY_VALUES = {"yes": Flags.YES, "y": Flags.YES, "no": Flags.NO, "n": Flags.NO}


@dataclass(frozen=True, slots=True)
class ReconcileOptions:
    origin_types: tuple[str, ...] | None = None
    allow_non_extensible_extension: bool = False
    strip_coded_value_whitespace: bool = True


def _closest_name(name: str, candidates: Iterable[str]) -> str | None:
    match = process.extractOne(
        name, list(candidates), scorer=fuzz.ratio, score_cutoff=SUGGESTION_MIN_SCORE
    )
    return match[0] if match else None


def _not_defined(
    kind: str, name: str, candidates: Iterable[str], record: str
) -> InvalidReferenceError:
    message = f"{kind} {name} is not defined."
    closest = _closest_name(name, candidates)
    if closest is not None:
        message += f" Did you mean {closest}?"
    return InvalidReferenceError(message, record=record)


def _group_by[R](records: Iterable[R], key: str) -> dict[str, list[R]]:
    grouped: dict[str, list[R]] = {}
    for record in records:
        grouped.setdefault(getattr(record, key), []).append(record)
    return grouped


def _text(value: str, previous: TranslatedText | None) -> TranslatedText:
    return TranslatedText(value=value, lang=previous.lang if previous else None)


def merge_item_group(item_group: ItemGroup, record: DatasetRecord) -> ItemGroup:
    changes: dict[str, object] = {}
    if record.label is not None and record.label != item_group.label:
        changes["description"] = _text(record.label, item_group.description)
    if record.structure is not None:
        changes["structure"] = record.structure
    if record.file_name is not None:
        leaf_id = item_group.leaf.id if item_group.leaf else f"LF.{item_group.name}"
        changes["leaf"] = Leaf(id=leaf_id, href=record.file_name, title=record.file_name)
    return replace(item_group, **changes) if changes else item_group


def merge_origin(
    origin: Origin | None,
    record: VariableRecord,
    origin_types: tuple[str, ...],
) -> Origin | None:
    if not (record.origin_type or record.origin_source or record.origin_description):
        return origin
    merged = origin or Origin()
    if record.origin_type is not None:
        if origin_types and record.origin_type not in origin_types:
            raise InvalidEnumValueError(
                f'Invalid origin type value "{record.origin_type}", must be one of '
                f"the following values: {', '.join(origin_types)}",
                value=record.origin_type,
                valid_values=origin_types,
                record=record.describe(),
            )
        merged = replace(merged, type=record.origin_type)
    if record.origin_source is not None:
        merged = replace(merged, source=record.origin_source)
    if record.origin_description is not None:
        merged = replace(
            merged, description=_text(record.origin_description, merged.description)
        )
    return merged


def merge_item_def(
    item_def: ItemDef, record: VariableRecord, origin_types: tuple[str, ...]
) -> ItemDef:
    """Overlay the supplied fields of ``record``; absent fields stay as they are."""
    changes: dict[str, object] = {}
    if record.label is not None and record.label != item_def.label:
        changes["description"] = _text(record.label, item_def.description)
    if record.data_type is not None:
        changes["data_type"] = record.data_type
    if record.length is not None:
        changes["length"] = record.length
    if record.fraction_digits is not None:
        changes["fraction_digits"] = record.fraction_digits
    if record.display_format is not None:
        changes["display_format"] = record.display_format
    origin = merge_origin(item_def.origin, record, origin_types)
    if origin != item_def.origin:
        changes["origin"] = origin
    return replace(item_def, **changes) if changes else item_def


def merge_item_ref(item_ref: ItemRef, record: VariableRecord) -> ItemRef:
    changes: dict[str, object] = {}
    if record.mandatory is not None:
        mandatory = _MANDATORY_VALUES.get(record.mandatory.strip().lower())
        if mandatory is None:
            raise InvalidEnumValueError(
                f'Invalid mandatory value "{record.mandatory}", must be one of the '
                f"following values: {Flags.YES}, {Flags.NO}",
                value=record.mandatory,
                valid_values=(Flags.YES, Flags.NO),
                record=record.describe(),
            )
        changes["mandatory"] = mandatory
    if record.key_sequence is not None:
        changes["key_sequence"] = record.key_sequence
    return replace(item_ref, **changes) if changes else item_ref


def _standard_alias(record: CodeListRecord, current: Alias | None) -> Alias | None:
    if record.nci_code is None:
        return current
    return Alias(name=record.nci_code, context=AliasContexts.NCI_CODE)


def merge_code_list(code_list: CodeList, record: CodeListRecord) -> CodeList:
    changes: dict[str, object] = {}
    if record.data_type is not None:
        changes["data_type"] = record.data_type
    if record.format_name is not None:
        changes["format_name"] = record.format_name
    if record.standard_oid is not None:
        changes["standard_oid"] = record.standard_oid
    alias = _standard_alias(record, code_list.alias)
    if alias != code_list.alias:
        changes["alias"] = alias
    return replace(code_list, **changes) if changes else code_list


def merge_coded_item[T: (CodeListItem, EnumeratedItem)](
    item: T, record: CodedValueRecord
) -> T:
    changes: dict[str, object] = {}
    if isinstance(item, CodeListItem) and record.decode is not None:
        changes["decode"] = _text(record.decode, item.decode)
    if record.rank is not None:
        changes["rank"] = record.rank
    return replace(item, **changes) if changes else item


class MetadataReconciler:
    """Computes the create/update diff of one import batch."""

    def __init__(
        self,
        batch: ImportBatch,
        state: MetaDataVersion,
        standards: StandardLookup,
        options: ReconcileOptions | None = None,
    ) -> None:
        super().__init__()
        self._batch = batch
        self._state = state
        self._standards = standards
        self._options = options or ReconcileOptions()
        self._origin_types = (
            self._options.origin_types
            if self._options.origin_types is not None
            else OriginTypes.BY_MODEL.get(state.model, ())
        )
        self._diff = ImportDiff()
        self._new_group_oids: dict[str, str] = {}

    def run(self) -> ImportDiff:
        self._reconcile_datasets()
        self._reconcile_variables()
        code_lists = self._reconcile_code_lists()
        code_lists = self._reconcile_coded_values(code_lists)
        self._collect_code_lists(code_lists)
        return self._diff

    # Datasets

    def _reconcile_datasets(self) -> None:
        state = self._state
        taken = set(state.item_groups)
        purpose = (
            DatasetPurposes.ANALYSIS
            if state.model == Models.ADAM
            else DatasetPurposes.TABULATION
        )
        for record in self._batch.datasets:
            oid = state.find_item_group_oid(record.dataset)
            if oid is not None:
                base = self._diff.updated_item_groups.get(oid, state.item_groups[oid])
                merged = merge_item_group(base, record)
                if merged != state.item_groups[oid]:
                    self._diff.updated_item_groups[oid] = merged
                continue
            oid = self._new_group_oids.get(record.dataset)
            if oid is not None:
                self._diff.new_item_groups[oid] = merge_item_group(
                    self._diff.new_item_groups[oid], record
                )
                continue
            oid = allocate_oid(OidType.ITEM_GROUP, taken, record.dataset)
            taken.add(oid)
            self._new_group_oids[record.dataset] = oid
            file_name = record.file_name or f"{record.dataset.lower()}.xpt"
            self._diff.new_item_groups[oid] = ItemGroup(
                oid=oid,
                name=record.dataset,
                dataset_name=record.dataset,
                purpose=purpose,
                description=(
                    TranslatedText(value=record.label) if record.label else None
                ),
                structure=record.structure,
                leaf=Leaf(
                    id=allocate_oid(OidType.LEAF, (), record.dataset),
                    href=file_name,
                    title=file_name,
                ),
            )

    # Variables

    def _resolve_group_oid(self, record: VariableRecord) -> str:
        oid = self._state.find_item_group_oid(record.dataset)
        if oid is None:
            oid = self._new_group_oids.get(record.dataset)
        if oid is None:
            known = [group.name for group in self._state.item_groups.values()]
            raise _not_defined(
                "Dataset",
                record.dataset,
                [*known, *self._new_group_oids],
                record.describe(),
            )
        return oid

    def _reconcile_variables(self) -> None:
        grouped = _group_by(self._batch.variables, "dataset")
        group_oids = {
            name: self._resolve_group_oid(records[0]) for name, records in grouped.items()
        }
        item_def_oids = set(self._state.item_defs)
        item_ref_oids = {
            oid
            for group in self._state.item_groups.values()
            for oid in group.item_refs
        }
        for name, records in grouped.items():
            group_oid = group_oids[name]
            variable_diff = VariableDiff()
            existing_group = self._state.item_groups.get(group_oid)
            next_order = (
                max(
                    (ref.order_number or 0 for ref in existing_group.item_refs.values()),
                    default=0,
                )
                + 1
                if existing_group
                else 1
            )
            created: dict[str, str] = {}
            for record in records:
                item_def_oid = (
                    self._state.find_item_def_oid(group_oid, record.variable)
                    if existing_group is not None
                    else None
                )
                if item_def_oid is not None and existing_group is not None:
                    self._merge_existing_variable(
                        variable_diff, existing_group, item_def_oid, record
                    )
                    continue
                item_def_oid = created.get(record.variable)
                if item_def_oid is not None:
                    self._merge_new_variable(variable_diff, item_def_oid, record)
                    continue
                hint = f"{name}.{record.variable}"
                item_def_oid = allocate_oid(OidType.ITEM_DEF, item_def_oids, hint)
                item_def_oids.add(item_def_oid)
                item_ref_oid = allocate_oid(OidType.ITEM_REF, item_ref_oids, hint)
                item_ref_oids.add(item_ref_oid)
                created[record.variable] = item_def_oid
                variable_diff.new_item_defs[item_def_oid] = merge_item_def(
                    ItemDef(
                        oid=item_def_oid,
                        name=record.variable,
                        sources=ItemDefSources(item_groups=(group_oid,)),
                    ),
                    record,
                    self._origin_types,
                )
                variable_diff.new_item_refs[item_ref_oid] = merge_item_ref(
                    ItemRef(
                        oid=item_ref_oid, item_oid=item_def_oid, order_number=next_order
                    ),
                    record,
                )
                next_order += 1
            self._diff.variables[group_oid] = variable_diff

    def _merge_existing_variable(
        self,
        variable_diff: VariableDiff,
        item_group: ItemGroup,
        item_def_oid: str,
        record: VariableRecord,
    ) -> None:
        original_def = self._state.item_defs[item_def_oid]
        base_def = variable_diff.updated_item_defs.get(item_def_oid, original_def)
        merged_def = merge_item_def(base_def, record, self._origin_types)
        if merged_def != original_def:
            variable_diff.updated_item_defs[item_def_oid] = merged_def
        else:
            variable_diff.updated_item_defs.pop(item_def_oid, None)
        original_ref = item_group.find_item_ref(item_def_oid)
        if original_ref is None:
            return
        base_ref = variable_diff.updated_item_refs.get(original_ref.oid, original_ref)
        merged_ref = merge_item_ref(base_ref, record)
        if merged_ref != original_ref:
            variable_diff.updated_item_refs[original_ref.oid] = merged_ref
        else:
            variable_diff.updated_item_refs.pop(original_ref.oid, None)

    def _merge_new_variable(
        self, variable_diff: VariableDiff, item_def_oid: str, record: VariableRecord
    ) -> None:
        variable_diff.new_item_defs[item_def_oid] = merge_item_def(
            variable_diff.new_item_defs[item_def_oid], record, self._origin_types
        )
        for item_ref_oid, item_ref in variable_diff.new_item_refs.items():
            if item_ref.item_oid == item_def_oid:
                variable_diff.new_item_refs[item_ref_oid] = merge_item_ref(
                    item_ref, record
                )
                break

    # Codelists

    def _code_list_type(self, record: CodeListRecord) -> CodeListType:
        try:
            return CodeListType((record.code_list_type or "").strip().lower())
        except ValueError:
            valid = CodeListType.values()
            raise InvalidEnumValueError(
                f"All new codelists must have a valid type specified "
                f"({', '.join(valid)}). Value '{record.code_list_type}' is invalid.",
                value=record.code_list_type,
                valid_values=valid,
                record=record.describe(),
            ) from None

    def _find_code_list_oid(
        self, code_lists: dict[str, CodeList], name: str
    ) -> str | None:
        for oid, code_list in code_lists.items():
            if code_list.name == name:
                return oid
        return None

    def _reconcile_code_lists(self) -> dict[str, CodeList]:
        code_lists = dict(self._state.code_lists)
        for record in self._batch.codelists:
            oid = self._find_code_list_oid(code_lists, record.codelist)
            if oid is None:
                code_list_type = self._code_list_type(record)
                oid = allocate_oid(OidType.CODE_LIST, code_lists, record.codelist)
                code_lists[oid] = self._new_code_list(oid, code_list_type, record)
                continue
            current = code_lists[oid]
            if (
                record.code_list_type is not None
                and self._code_list_type(record) is not current.code_list_type
            ):
                code_lists = set_type(code_lists, oid, self._code_list_type(record))
            merged = merge_code_list(code_lists[oid], record)
            if (merged.standard_oid, merged.alias) != (current.standard_oid, current.alias):
                merged = self._with_standard(merged, previous=current)
            code_lists[oid] = merged
        return code_lists

    def _new_code_list(
        self, oid: str, code_list_type: CodeListType, record: CodeListRecord
    ) -> CodeList:
        code_list = CodeList(
            oid=oid,
            name=record.codelist,
            items=empty_collection(code_list_type),
            data_type=record.data_type or "text",
            format_name=record.format_name,
            standard_oid=record.standard_oid,
            alias=_standard_alias(record, None),
        )
        return self._with_standard(code_list)

    def _with_standard(
        self, code_list: CodeList, previous: CodeList | None = None
    ) -> CodeList:
        standard = resolve_standard_code_list(code_list, self._standards)
        if standard is None:
            # Aliases copied from a standard that no longer applies are dropped.
            if (
                previous is not None
                and resolve_standard_code_list(previous, self._standards) is not None
            ):
                return synchronize(code_list, None)
            return code_list
        code_list = replace(
            code_list,
            cdisc_submission_value=standard.submission_value
            or code_list.cdisc_submission_value,
        )
        return synchronize(code_list, standard)

    # Coded values

    def _reconcile_coded_values(
        self, code_lists: dict[str, CodeList]
    ) -> dict[str, CodeList]:
        grouped = _group_by(self._batch.coded_values, "codelist")
        resolved: dict[str, str] = {}
        for name, records in grouped.items():
            oid = self._find_code_list_oid(code_lists, name)
            if oid is None:
                raise _not_defined(
                    "Codelist",
                    name,
                    [code_list.name for code_list in code_lists.values()],
                    records[0].describe(),
                )
            if isinstance(code_lists[oid].items, ExternalItems):
                raise InvalidReferenceError(
                    f"Codelist {name} is external and cannot contain coded values.",
                    record=records[0].describe(),
                )
            resolved[name] = oid
        for name, records in grouped.items():
            oid = resolved[name]
            code_list = code_lists[oid]
            for record in records:
                code_list = self._merge_coded_value(code_list, record)
            code_lists[oid] = code_list
        return code_lists

    def _merge_coded_value(
        self, code_list: CodeList, record: CodedValueRecord
    ) -> CodeList:
        coded_value = record.coded_value
        if self._options.strip_coded_value_whitespace:
            coded_value = coded_value.strip()
        standard = resolve_standard_code_list(code_list, self._standards)
        item_oid = code_list.find_item_oid(coded_value)
        item: CodedItem
        if item_oid is not None:
            item = merge_coded_item(code_list.items.items[item_oid], record)
            if standard is not None:
                item = synchronize_item(item, standard)
            return put_coded_item(code_list, item_oid, item)
        item_oid = allocate_oid(OidType.CODE_LIST_ITEM, code_list.items.items)
        if code_list.code_list_type is CodeListType.DECODED:
            item = CodeListItem(
                coded_value=coded_value,
                decode=TranslatedText(value=record.decode or ""),
                rank=record.rank,
            )
        else:
            item = EnumeratedItem(coded_value=coded_value, rank=record.rank)
        item = apply_new_value_rule(
            item,
            code_list.name,
            standard,
            allow_extension=self._options.allow_non_extensible_extension,
        )
        return put_coded_item(code_list, item_oid, item)

    def _collect_code_lists(self, code_lists: dict[str, CodeList]) -> None:
        existing = self._state.code_lists
        for oid, code_list in code_lists.items():
            if oid not in existing:
                self._diff.new_code_lists[oid] = code_list
            elif code_list != existing[oid]:
                self._diff.updated_code_lists[oid] = code_list


def reconcile(
    batch: ImportBatch,
    state: MetaDataVersion,
    standards: StandardLookup,
    options: ReconcileOptions | None = None,
) -> ImportDiff:
    """Reconcile ``batch`` against ``state`` and return the resulting diff.

    Raises ``InvalidReferenceError``, ``InvalidEnumValueError`` or
    ``NonExtensibleViolationError``; on error no diff is produced.
    """
    return MetadataReconciler(batch, state, standards, options).run()
