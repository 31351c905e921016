"""Application layer for the define engine.

Use cases and the metadata store; external dependencies are reached
through the ports in ``application.ports``.
"""

from .models import ImportMetadataRequest, ImportMetadataResponse

# MetadataImportUseCase is imported from its module directly:
#   from define_engine.application.metadata_import_use_case import MetadataImportUseCase

__all__ = [
    "ImportMetadataRequest",
    "ImportMetadataResponse",
]
