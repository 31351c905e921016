"""Read import batches from delimited files.

Each of the four record kinds is read from its own CSV/TSV file. Header
names are normalized so that ``Coded Value``, ``codedValue`` and
``CODED_VALUE`` all map onto the ``coded_value`` field.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import TYPE_CHECKING, ClassVar

import pandas as pd
from pydantic import ValidationError

from ...domain.entities.import_records import (
    CodedValueRecord,
    CodeListRecord,
    DatasetRecord,
    ImportBatch,
    VariableRecord,
)
from .exceptions import BatchParseError, BatchSourceNotFoundError, BatchValidationError

if TYPE_CHECKING:
    from pathlib import Path

    from pydantic import BaseModel

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[^a-z0-9]+")
# Header rows in a spreadsheet export count as row 1.
_FIRST_DATA_ROW = 2


def normalize_header(header: str) -> str:
    snake = _CAMEL_BOUNDARY.sub("_", str(header).strip())
    return _SEPARATORS.sub("_", snake.lower()).strip("_")


@dataclass(slots=True)
class ImportSources:
    datasets: Path | None = None
    variables: Path | None = None
    codelists: Path | None = None
    coded_values: Path | None = None


class ImportBatchReader:
    """Builds an ``ImportBatch`` from up to four delimited files."""

    ALIASES: ClassVar[dict[str, dict[str, str]]] = {
        "datasets": {"domain": "dataset", "dataset_name": "dataset", "name": "dataset"},
        "variables": {
            "domain": "dataset",
            "dataset_name": "dataset",
            "variable_name": "variable",
            "name": "variable",
            "type": "data_type",
            "format": "display_format",
        },
        "codelists": {
            "name": "codelist",
            "code_list": "codelist",
            "codelist_name": "codelist",
            "type": "code_list_type",
            "codelist_type": "code_list_type",
        },
        "coded_values": {
            "code_list": "codelist",
            "codelist_name": "codelist",
            "value": "coded_value",
            "decoded_value": "decode",
        },
    }

    def read(self, sources: ImportSources) -> ImportBatch:
        return ImportBatch(
            datasets=self._read_records(sources.datasets, "datasets", DatasetRecord),
            variables=self._read_records(sources.variables, "variables", VariableRecord),
            codelists=self._read_records(sources.codelists, "codelists", CodeListRecord),
            coded_values=self._read_records(
                sources.coded_values, "coded_values", CodedValueRecord
            ),
        )

    def read_frame(self, path: Path) -> pd.DataFrame:
        if not path.exists():
            raise BatchSourceNotFoundError(f"File not found: {path}")
        if not path.is_file():
            raise BatchSourceNotFoundError(f"Not a file: {path}")
        separator = "\t" if path.suffix.lower() in {".tsv", ".tab"} else ","
        try:
            frame = pd.read_csv(path, sep=separator, dtype=str, keep_default_na=False)
        except pd.errors.EmptyDataError as e:
            raise BatchParseError(f"File is empty: {path}") from e
        except pd.errors.ParserError as e:
            raise BatchParseError(f"Failed to parse {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise BatchParseError(f"Encoding error reading {path}: {e}") from e
        if frame.shape[1] == 0:
            raise BatchParseError(f"File has no columns: {path}")
        return frame

    def _read_records[R: BaseModel](
        self, path: Path | None, kind: str, record_type: type[R]
    ) -> list[R]:
        if path is None:
            return []
        frame = self.read_frame(path)
        aliases = self.ALIASES[kind]
        columns = [normalize_header(column) for column in frame.columns]
        frame.columns = [aliases.get(column, column) for column in columns]
        records: list[R] = []
        for index, row in enumerate(frame.to_dict(orient="records")):
            try:
                records.append(record_type.model_validate(row))
            except ValidationError as e:
                row_number = index + _FIRST_DATA_ROW
                problems = "; ".join(
                    f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                    for error in e.errors()
                )
                raise BatchValidationError(
                    f"{path.name} row {row_number}: {problems}",
                    path=str(path),
                    row=row_number,
                ) from e
        return records
