from __future__ import annotations

from typing import TYPE_CHECKING

from ..domain.entities.study import MetaDataVersion
from ..domain.services.actions import DeleteCodeLists
from ..domain.services.import_diff import apply_import_diff
from ..domain.services.reducer import reduce
from ..domain.services.source_labels import describe_sources

if TYPE_CHECKING:
    from ..domain.services.actions import Action
    from ..domain.services.import_diff import ImportDiff
    from .ports.services import LoggerPort


class MetadataStore:
    """Owner of the current metadata version.

    Actions are applied one at a time; each replaces the held version with
    the reducer's result. A failing action leaves the held version as it was.
    """

    def __init__(
        self, state: MetaDataVersion | None = None, logger: LoggerPort | None = None
    ) -> None:
        super().__init__()
        self._state = state if state is not None else MetaDataVersion()
        self.logger = logger

    @property
    def state(self) -> MetaDataVersion:
        return self._state

    def _warn_about_consumers(self, action: DeleteCodeLists) -> None:
        if self.logger is None:
            return
        for oid in action.oids:
            code_list = self._state.code_lists.get(oid)
            if code_list is None or not code_list.sources.count():
                continue
            used_by = describe_sources(code_list.sources, self._state)
            self.logger.warning(
                f"Deleting codelist {code_list.name} still used by {used_by}"
            )

    def dispatch(self, action: Action) -> MetaDataVersion:
        if self.logger is not None:
            self.logger.debug(f"Dispatching {action.kind.value}")
        if isinstance(action, DeleteCodeLists):
            self._warn_about_consumers(action)
        self._state = reduce(self._state, action)
        return self._state

    def apply_import(self, diff: ImportDiff) -> MetaDataVersion:
        if self.logger is not None:
            self.logger.debug("Applying import diff")
        self._state = apply_import_diff(self._state, diff)
        return self._state
