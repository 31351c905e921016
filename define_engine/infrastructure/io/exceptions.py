class DefineEngineInfrastructureError(Exception):
    pass


class BatchSourceError(DefineEngineInfrastructureError):
    pass


class BatchSourceNotFoundError(BatchSourceError):
    pass


class BatchParseError(BatchSourceError):
    pass


class BatchValidationError(BatchSourceError):
    def __init__(self, message: str, *, path: str, row: int) -> None:
        super().__init__(message)
        self.path = path
        self.row = row
