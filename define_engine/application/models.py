from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.entities.import_records import ImportBatch
    from ..domain.entities.study import MetaDataVersion
    from ..domain.services.import_diff import ImportDiff


@dataclass(slots=True)
class ImportMetadataRequest:
    batch: ImportBatch
    state: MetaDataVersion
    allow_non_extensible_extension: bool = False
    strip_coded_value_whitespace: bool = True
    verbose: int = 0


@dataclass(slots=True)
class ImportMetadataResponse:
    """Outcome of one import.

    ``state`` is the merged metadata version on success and the untouched
    input version on failure.
    """

    state: MetaDataVersion
    diff: ImportDiff | None = None
    success: bool = True
    error: str | None = None
    error_record: str | None = None

    @property
    def changed(self) -> bool:
        return self.diff is not None and not self.diff.is_empty()
