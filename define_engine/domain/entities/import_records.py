"""Flat records of a bulk metadata import.

Records are keyed by natural names (dataset, variable, codelist, coded
value). A blank or whitespace-only cell means "no value supplied" and is
stored as ``None`` so that merging never overwrites existing values with
emptiness.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _ImportRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def supplied_fields(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)


class DatasetRecord(_ImportRecord):
    dataset: str
    label: str | None = None
    structure: str | None = None
    file_name: str | None = None

    @field_validator("dataset")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

    def describe(self) -> str:
        return f"dataset {self.dataset}"


class VariableRecord(_ImportRecord):
    dataset: str
    variable: str
    label: str | None = None
    data_type: str | None = None
    length: int | None = None
    fraction_digits: int | None = None
    display_format: str | None = None
    mandatory: str | None = None
    key_sequence: int | None = None
    origin_type: str | None = None
    origin_source: str | None = None
    origin_description: str | None = None

    @field_validator("dataset", "variable")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

    def describe(self) -> str:
        return f"variable {self.dataset}.{self.variable}"


class CodeListRecord(_ImportRecord):
    codelist: str
    code_list_type: str | None = None
    data_type: str | None = None
    format_name: str | None = None
    standard_oid: str | None = None
    nci_code: str | None = None

    @field_validator("codelist")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

    def describe(self) -> str:
        return f"codelist {self.codelist}"


class CodedValueRecord(_ImportRecord):
    codelist: str
    coded_value: str
    decode: str | None = None
    rank: float | None = None

    @field_validator("codelist")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

    def describe(self) -> str:
        return f"coded value {self.codelist}.{self.coded_value}"


class ImportBatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    datasets: list[DatasetRecord] = Field(default_factory=list)
    variables: list[VariableRecord] = Field(default_factory=list)
    codelists: list[CodeListRecord] = Field(default_factory=list)
    coded_values: list[CodedValueRecord] = Field(default_factory=list)

    def record_count(self) -> int:
        return (
            len(self.datasets)
            + len(self.variables)
            + len(self.codelists)
            + len(self.coded_values)
        )

    def is_empty(self) -> bool:
        return self.record_count() == 0
