from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from ..application.metadata_import_use_case import (
    MetadataImportDependencies,
    MetadataImportUseCase,
)
from ..application.metadata_store import MetadataStore
from ..config import EngineConfig
from .io.batch_reader import ImportBatchReader
from .logging.console_logger import ConsoleLogger
from .logging.null_logger import NullLogger
from .repositories.standard_repository import StandardRepository

if TYPE_CHECKING:
    from ..application.ports.repositories import StandardRepositoryPort
    from ..application.ports.services import LoggerPort
    from ..domain.entities.study import MetaDataVersion


class DependencyContainer:
    pass

    def __init__(
        self,
        config: EngineConfig | None = None,
        verbose: int = 0,
        console: Console | None = None,
        use_null_logger: bool = False,
    ) -> None:
        super().__init__()
        self.config = config or EngineConfig()
        self.verbose = verbose
        self.console = console or Console()
        self.use_null_logger = use_null_logger
        self._logger_instance: LoggerPort | None = None
        self._standard_repository_instance: StandardRepositoryPort | None = None
        self._batch_reader_instance: ImportBatchReader | None = None

    def create_logger(self) -> LoggerPort:
        if self._logger_instance is None:
            if self.use_null_logger:
                self._logger_instance = NullLogger()
            else:
                self._logger_instance = ConsoleLogger(
                    console=self.console, verbosity=self.verbose
                )
        return self._logger_instance

    def create_standard_repository(self) -> StandardRepositoryPort:
        if self._standard_repository_instance is None:
            self._standard_repository_instance = StandardRepository(config=self.config)
        return self._standard_repository_instance

    def create_batch_reader(self) -> ImportBatchReader:
        if self._batch_reader_instance is None:
            self._batch_reader_instance = ImportBatchReader()
        return self._batch_reader_instance

    def create_metadata_import_use_case(self) -> MetadataImportUseCase:
        return MetadataImportUseCase(
            MetadataImportDependencies(
                logger=self.create_logger(),
                standard_repository=self.create_standard_repository(),
            )
        )

    def create_metadata_store(
        self, state: MetaDataVersion | None = None
    ) -> MetadataStore:
        return MetadataStore(state=state, logger=self.create_logger())

    def reset_singletons(self) -> None:
        self._logger_instance = None
        self._standard_repository_instance = None
        self._batch_reader_instance = None


def create_default_container(
    config: EngineConfig | None = None, verbose: int = 0
) -> DependencyContainer:
    return DependencyContainer(config=config, verbose=verbose)
