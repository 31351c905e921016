from __future__ import annotations

from dataclasses import dataclass
import traceback
from typing import TYPE_CHECKING

from ..domain.exceptions import MetadataImportError
from ..domain.services.import_diff import apply_import_diff
from ..domain.services.import_reconciliation import ReconcileOptions, reconcile
from .models import ImportMetadataResponse

if TYPE_CHECKING:
    from ..domain.entities.terminology import StandardLookup
    from .models import ImportMetadataRequest
    from .ports.repositories import StandardRepositoryPort
    from .ports.services import LoggerPort

VERBOSE_TRACEBACK_LEVEL = 2


@dataclass(slots=True)
class MetadataImportDependencies:
    logger: LoggerPort
    standard_repository: StandardRepositoryPort | None = None


class MetadataImportUseCase:
    """Reconcile an import batch and merge it into a metadata version.

    A rejected batch is reported through the response and the logger; the
    metadata version in the response is then the one passed in.
    """

    def __init__(self, dependencies: MetadataImportDependencies) -> None:
        super().__init__()
        self.logger = dependencies.logger
        self._standard_repository = dependencies.standard_repository

    def _standards(self) -> StandardLookup:
        if self._standard_repository is None:
            return {}
        return self._standard_repository.as_lookup()

    def execute(self, request: ImportMetadataRequest) -> ImportMetadataResponse:
        response = ImportMetadataResponse(state=request.state)
        batch = request.batch
        self.logger.log_import_start(
            request.state.model,
            {
                "datasets": len(batch.datasets),
                "variables": len(batch.variables),
                "codelists": len(batch.codelists),
                "coded values": len(batch.coded_values),
            },
        )
        if batch.is_empty():
            self.logger.warning("Import batch is empty; nothing to merge")
        options = ReconcileOptions(
            allow_non_extensible_extension=request.allow_non_extensible_extension,
            strip_coded_value_whitespace=request.strip_coded_value_whitespace,
        )
        try:
            diff = reconcile(batch, request.state, self._standards(), options)
        except MetadataImportError as exc:
            response.success = False
            response.error = str(exc)
            response.error_record = exc.record
            self.logger.error(f"Import rejected: {exc}")
            if request.verbose >= VERBOSE_TRACEBACK_LEVEL:
                self.logger.error(traceback.format_exc())
            self.logger.log_import_summary({}, success=False)
            return response

        summary = diff.summary()
        for collection, (created, updated) in summary.items():
            self.logger.log_stage_result(collection, created, updated)
        response.diff = diff
        response.state = apply_import_diff(request.state, diff)
        self.logger.log_import_summary(summary, success=True)
        return response
