from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..entities.codelist import CodeListSources
    from ..entities.metadata import ItemDef
    from ..entities.study import MetaDataVersion


def _empty_labels() -> dict[str, list[str]]:
    return {}


@dataclass(frozen=True, slots=True)
class SourceLabels:
    """Readable names of the entities that reference a codelist."""

    labels: dict[str, list[str]] = field(default_factory=_empty_labels)
    count: int = 0

    @property
    def label_parts(self) -> list[str]:
        headings = {"item_defs": "Variables", "analysis_results": "Analysis Result"}
        return [
            f"{headings[group]}: {', '.join(names)}"
            for group, names in self.labels.items()
        ]

    def __str__(self) -> str:
        return "\n".join(self.label_parts)


def _item_def_labels(item_def: ItemDef, state: MetaDataVersion) -> list[str]:
    parent = (
        state.item_defs.get(item_def.parent_item_def_oid)
        if item_def.parent_item_def_oid
        else None
    )
    owner = parent if parent is not None else item_def
    names = []
    for item_group_oid in owner.sources.item_groups:
        item_group = state.item_groups.get(item_group_oid)
        if item_group is None:
            continue
        if parent is not None:
            names.append(f"{item_group.name}.{parent.name}.{item_def.name}")
        else:
            names.append(f"{item_group.name}.{item_def.name}")
    return names


def describe_sources(sources: CodeListSources, state: MetaDataVersion) -> SourceLabels:
    """Describe a codelist's consumers as ``DS.VAR`` (``DS.PARENT.VAR`` for value level)."""
    labels: dict[str, list[str]] = {}
    item_def_names = [
        name
        for oid in sources.item_defs
        if oid in state.item_defs
        for name in _item_def_labels(state.item_defs[oid], state)
    ]
    if item_def_names:
        labels["item_defs"] = item_def_names
    if sources.analysis_results:
        labels["analysis_results"] = list(sources.analysis_results)
    return SourceLabels(
        labels=labels, count=sum(len(names) for names in labels.values())
    )
