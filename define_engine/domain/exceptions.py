class MetadataImportError(Exception):
    def __init__(self, message: str, *, record: str | None = None) -> None:
        super().__init__(message)
        self.record = record


class InvalidReferenceError(MetadataImportError):
    pass


class InvalidEnumValueError(MetadataImportError):
    def __init__(
        self,
        message: str,
        *,
        value: str | None,
        valid_values: tuple[str, ...],
        record: str | None = None,
    ) -> None:
        super().__init__(message, record=record)
        self.value = value
        self.valid_values = valid_values


class NonExtensibleViolationError(MetadataImportError):
    def __init__(self, code_list_name: str, coded_value: str) -> None:
        super().__init__(
            f"Codelist {code_list_name} is not extensible and value "
            f"'{coded_value}' is not in the codelist.",
            record=f"{code_list_name}.{coded_value}",
        )
        self.code_list_name = code_list_name
        self.coded_value = coded_value


class MetadataStateError(Exception):
    pass


class UnknownOidError(MetadataStateError):
    def __init__(self, collection: str, oid: str) -> None:
        super().__init__(f"{collection} {oid!r} does not exist")
        self.collection = collection
        self.oid = oid


class InvariantViolationError(MetadataStateError):
    pass
