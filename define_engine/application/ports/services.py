from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping


@runtime_checkable
class LoggerPort(Protocol):
    pass

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...

    def log_import_start(self, model: str, record_counts: Mapping[str, int]) -> None: ...

    def log_stage_result(self, collection: str, created: int, updated: int) -> None: ...

    def log_import_summary(
        self, summary: Mapping[str, tuple[int, int]], *, success: bool
    ) -> None: ...
