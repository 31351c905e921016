from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING, override

from rich.console import Console
from rich.markup import escape

from ...application.ports.services import LoggerPort

if TYPE_CHECKING:
    from collections.abc import Mapping


class LogLevel(IntEnum):
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


@dataclass(slots=True)
class LogContext:
    model: str = ""
    stage: str = ""
    start_time: datetime = field(default_factory=datetime.now)

    def elapsed_ms(self) -> float:
        return (datetime.now() - self.start_time).total_seconds() * 1000


def _empty_stats() -> dict[str, int]:
    return {
        "records_read": 0,
        "entities_created": 0,
        "entities_updated": 0,
        "warnings": 0,
        "errors": 0,
    }


class ConsoleLogger(LoggerPort):
    pass

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        super().__init__()
        self.console = console or Console()
        self.verbosity = verbosity
        self._context: LogContext | None = None
        self._stats = _empty_stats()

    def set_context(self, **kwargs: str) -> None:
        if self._context is None:
            self._context = LogContext()
        for key, value in kwargs.items():
            if hasattr(self._context, key):
                setattr(self._context, key, value)

    def clear_context(self) -> None:
        self._context = None

    @override
    def info(self, message: str, *, level: int = LogLevel.NORMAL) -> None:
        if self.verbosity >= level:
            prefix = self._get_prefix()
            self.console.print(f"{prefix}{message}")

    @override
    def verbose(self, message: str) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            prefix = self._get_prefix()
            self.console.print(f"[dim]{prefix}{message}[/dim]")

    @override
    def debug(self, message: str) -> None:
        if self.verbosity >= LogLevel.DEBUG:
            prefix = self._get_prefix()
            self.console.print(f"[dim cyan]{prefix}{message}[/dim cyan]")

    @override
    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    @override
    def warning(self, message: str) -> None:
        self._stats["warnings"] += 1
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    @override
    def error(self, message: str) -> None:
        self._stats["errors"] += 1
        self.console.print(f"[red]✗[/red] {message}")

    @override
    def log_import_start(self, model: str, record_counts: Mapping[str, int]) -> None:
        self.set_context(model=model)
        total = sum(record_counts.values())
        self._stats["records_read"] += total
        self.console.print(f"[bold]Importing {total:,} records into {model} metadata[/bold]")
        for collection, count in record_counts.items():
            if count:
                self.verbose(f"  {collection}: {count:,}")

    @override
    def log_stage_result(self, collection: str, created: int, updated: int) -> None:
        self.set_context(stage=collection)
        self._stats["entities_created"] += created
        self._stats["entities_updated"] += updated
        if created or updated:
            self.verbose(f"  {collection}: {created} created, {updated} updated")
        else:
            self.debug(f"  {collection}: unchanged")

    @override
    def log_import_summary(
        self, summary: Mapping[str, tuple[int, int]], *, success: bool
    ) -> None:
        if not success:
            self.console.print("[bold red]Import rejected; metadata unchanged[/bold red]")
            return
        created = sum(counts[0] for counts in summary.values())
        updated = sum(counts[1] for counts in summary.values())
        self.success(f"Import complete: {created} created, {updated} updated")
        if self.verbosity >= LogLevel.DEBUG and self._context is not None:
            self.debug(f"Elapsed: {self._context.elapsed_ms():.1f} ms")

    def get_stats(self) -> dict[str, int]:
        return self._stats.copy()

    def reset_stats(self) -> None:
        self._stats = _empty_stats()

    def _get_prefix(self) -> str:
        if self._context is None or self.verbosity < LogLevel.DEBUG:
            return ""
        parts = [part for part in (self._context.model, self._context.stage) if part]
        return escape(f"[{':'.join(parts)}] ") if parts else ""
