"""Infrastructure I/O layer: reading import batches from files."""

from .batch_reader import ImportBatchReader, ImportSources, normalize_header
from .exceptions import (
    BatchParseError,
    BatchSourceError,
    BatchSourceNotFoundError,
    BatchValidationError,
)

__all__ = [
    "BatchParseError",
    "BatchSourceError",
    "BatchSourceNotFoundError",
    "BatchValidationError",
    "ImportBatchReader",
    "ImportSources",
    "normalize_header",
]
