from __future__ import annotations

from typing import TYPE_CHECKING, override

from ...application.ports.services import LoggerPort

if TYPE_CHECKING:
    from collections.abc import Mapping


class NullLogger(LoggerPort):
    pass

    @override
    def info(self, message: str) -> None:
        return

    @override
    def success(self, message: str) -> None:
        return

    @override
    def warning(self, message: str) -> None:
        return

    @override
    def error(self, message: str) -> None:
        return

    @override
    def debug(self, message: str) -> None:
        return

    @override
    def verbose(self, message: str) -> None:
        return

    @override
    def log_import_start(self, model: str, record_counts: Mapping[str, int]) -> None:
        return None

    @override
    def log_stage_result(self, collection: str, created: int, updated: int) -> None:
        return None

    @override
    def log_import_summary(
        self, summary: Mapping[str, tuple[int, int]], *, success: bool
    ) -> None:
        return None
