"""Tests for the metadata import use case.

The use case runs against an in-memory metadata version, a stubbed
standard repository and a recording logger.
"""

from unittest.mock import Mock

from define_engine.application.metadata_import_use_case import (
    MetadataImportDependencies,
    MetadataImportUseCase,
)
from define_engine.application.models import ImportMetadataRequest
from define_engine.domain.entities import (
    CodedValueRecord,
    DatasetRecord,
    ImportBatch,
    VariableRecord,
)
from define_engine.infrastructure.logging import NullLogger


class RecordingLogger(NullLogger):
    """Null logger that remembers what it was told."""

    def __init__(self):
        super().__init__()
        self.messages = []

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def log_stage_result(self, collection: str, created: int, updated: int) -> None:
        self.messages.append(("stage", (collection, created, updated)))

    def log_import_summary(self, summary, *, success: bool) -> None:
        self.messages.append(("summary", success))

    def kinds(self):
        return [kind for kind, _ in self.messages]


class TestMetadataImportUseCase:
    """Tests for MetadataImportUseCase."""

    def _create_use_case(self, standards, logger=None):
        repository = Mock()
        repository.as_lookup.return_value = standards
        return MetadataImportUseCase(
            MetadataImportDependencies(
                logger=logger or RecordingLogger(),
                standard_repository=repository,
            )
        )

    def test_successful_import_merges_batch(self, metadata, standards):
        """A valid batch produces the merged metadata version."""
        use_case = self._create_use_case(standards)
        batch = ImportBatch(
            datasets=[DatasetRecord(dataset="AE", label="Adverse Events")],
            variables=[VariableRecord(dataset="AE", variable="AETERM")],
        )

        response = use_case.execute(ImportMetadataRequest(batch=batch, state=metadata))

        assert response.success is True
        assert response.changed
        assert response.state.item_group_order == ("IG.DM", "IG.AE")
        assert "IT.AE.AETERM" in response.state.item_defs

    def test_rejected_batch_leaves_state_unchanged(self, metadata, standards):
        """A non-extensible violation fails the import and keeps the input."""
        logger = RecordingLogger()
        use_case = self._create_use_case(standards, logger)
        batch = ImportBatch(
            coded_values=[CodedValueRecord(codelist="Sex", coded_value="U")]
        )

        response = use_case.execute(ImportMetadataRequest(batch=batch, state=metadata))

        assert response.success is False
        assert response.state is metadata
        assert response.diff is None
        assert "not extensible" in response.error
        assert response.error_record == "Sex.U"
        assert ("summary", False) in logger.messages

    def test_extension_option_is_forwarded(self, metadata, standards):
        """The request's extension flag reaches reconciliation."""
        use_case = self._create_use_case(standards)
        batch = ImportBatch(
            coded_values=[CodedValueRecord(codelist="Sex", coded_value="U")]
        )

        response = use_case.execute(
            ImportMetadataRequest(
                batch=batch, state=metadata, allow_non_extensible_extension=True
            )
        )

        assert response.success is True
        assert response.state.code_lists["CL.SEX"].item_order == ("CI.1", "CI.2", "CI.3")

    def test_stage_results_are_logged(self, metadata, standards):
        """Each collection reports its created and updated counts."""
        logger = RecordingLogger()
        use_case = self._create_use_case(standards, logger)
        batch = ImportBatch(
            variables=[VariableRecord(dataset="DM", variable="AGE", length=8)]
        )

        use_case.execute(ImportMetadataRequest(batch=batch, state=metadata))

        assert ("stage", ("variables", 0, 1)) in logger.messages
        assert logger.kinds()[-1] == "summary"

    def test_empty_batch_warns(self, metadata, standards):
        """An empty batch succeeds with a warning and no changes."""
        logger = RecordingLogger()
        use_case = self._create_use_case(standards, logger)

        response = use_case.execute(
            ImportMetadataRequest(batch=ImportBatch(), state=metadata)
        )

        assert response.success is True
        assert not response.changed
        assert "warning" in logger.kinds()

    def test_works_without_standard_repository(self, metadata):
        """Without standards, codelist values are accepted as entered."""
        use_case = MetadataImportUseCase(MetadataImportDependencies(logger=NullLogger()))
        batch = ImportBatch(
            coded_values=[CodedValueRecord(codelist="Sex", coded_value="U")]
        )

        response = use_case.execute(ImportMetadataRequest(batch=batch, state=metadata))

        assert response.success is True
