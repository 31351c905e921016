"""Define engine package.

An in-memory engine for clinical-trial metadata (datasets, variables,
codelists and coded values):

- Copy-on-write metadata versions with enforced codelist invariants
- Edit actions applied through a pure reducer
- Bulk import reconciliation of tabular metadata
- Synchronization with CDISC controlled terminology
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover
    __version__ = version("define-engine")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

from define_engine.domain.entities.import_records import ImportBatch
from define_engine.domain.entities.study import MetaDataVersion
from define_engine.domain.services.import_diff import apply_import_diff
from define_engine.domain.services.import_reconciliation import reconcile
from define_engine.domain.services.reducer import reduce

__all__ = [
    "__version__",
    "ImportBatch",
    "MetaDataVersion",
    "apply_import_diff",
    "reconcile",
    "reduce",
]
