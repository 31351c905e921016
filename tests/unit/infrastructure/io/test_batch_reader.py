"""Tests for ImportBatchReader."""

import pytest

from define_engine.infrastructure.io import (
    BatchParseError,
    BatchSourceNotFoundError,
    BatchValidationError,
    ImportBatchReader,
    ImportSources,
    normalize_header,
)


class TestNormalizeHeader:
    """Header normalization."""

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("Coded Value", "coded_value"),
            ("codedValue", "coded_value"),
            ("CODED_VALUE", "coded_value"),
            (" Origin-Type ", "origin_type"),
            ("NCI Code", "nci_code"),
        ],
    )
    def test_variants_map_to_snake_case(self, header, expected):
        """Spacing, casing and separators are normalized."""
        assert normalize_header(header) == expected


class TestImportBatchReader:
    """Tests for reading batch files."""

    @pytest.fixture
    def reader(self):
        return ImportBatchReader()

    def test_reads_all_record_kinds(self, reader, tmp_path):
        """Each source file fills its part of the batch."""
        datasets = tmp_path / "datasets.csv"
        datasets.write_text("Dataset,Label\nDM,Demographics\n")
        variables = tmp_path / "variables.csv"
        variables.write_text(
            "Domain,Variable Name,Type,Length,Mandatory\nDM,AGE,integer,3,No\nDM,SEX,,,\n"
        )
        codelists = tmp_path / "codelists.tsv"
        codelists.write_text("Name\tType\nSex\tdecoded\n")
        coded_values = tmp_path / "coded_values.csv"
        coded_values.write_text("codelist,value,decodedValue\nSex,M,Male\n")

        batch = reader.read(
            ImportSources(
                datasets=datasets,
                variables=variables,
                codelists=codelists,
                coded_values=coded_values,
            )
        )

        assert batch.datasets[0].label == "Demographics"
        age, sex = batch.variables
        assert (age.dataset, age.variable, age.data_type, age.length) == (
            "DM",
            "AGE",
            "integer",
            3,
        )
        assert sex.length is None
        assert sex.mandatory is None
        assert batch.codelists[0].code_list_type == "decoded"
        assert batch.coded_values[0].decode == "Male"

    def test_missing_sources_are_empty(self, reader):
        """Sources that are not given contribute nothing."""
        assert reader.read(ImportSources()).is_empty()

    def test_unknown_columns_are_ignored(self, reader, tmp_path):
        """Extra spreadsheet columns do not fail the import."""
        path = tmp_path / "datasets.csv"
        path.write_text("Dataset,Comment\nAE,ignore me\n")

        batch = reader.read(ImportSources(datasets=path))

        assert batch.datasets[0].dataset == "AE"

    def test_invalid_row_reports_row_number(self, reader, tmp_path):
        """Validation errors name the file and the spreadsheet row."""
        path = tmp_path / "variables.csv"
        path.write_text("Dataset,Variable,Length\nDM,AGE,3\nDM,SEX,long\n")

        with pytest.raises(BatchValidationError) as exc_info:
            reader.read(ImportSources(variables=path))

        assert exc_info.value.row == 3
        assert str(exc_info.value).startswith("variables.csv row 3: length:")

    def test_missing_key_column(self, reader, tmp_path):
        """Records without their natural key are rejected."""
        path = tmp_path / "coded_values.csv"
        path.write_text("Codelist,Decode\nSex,Male\n")

        with pytest.raises(BatchValidationError, match="coded_value"):
            reader.read(ImportSources(coded_values=path))

    def test_missing_file(self, reader, tmp_path):
        """A missing file is reported."""
        with pytest.raises(BatchSourceNotFoundError):
            reader.read_frame(tmp_path / "nope.csv")

    def test_empty_file(self, reader, tmp_path):
        """An empty file cannot be parsed."""
        path = tmp_path / "empty.csv"
        path.write_text("")

        with pytest.raises(BatchParseError, match="empty"):
            reader.read_frame(path)
