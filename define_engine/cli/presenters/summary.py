from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console

    from ...domain.entities.study import MetaDataVersion


@dataclass(frozen=True, slots=True)
class ImportSummaryRequest:
    summary: Mapping[str, tuple[int, int]]
    state: MetaDataVersion
    success: bool
    error: str | None = None


class ImportSummaryPresenter:
    pass

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console

    def present(self, request: ImportSummaryRequest) -> None:
        self.console.print()
        if not request.success:
            self.console.print(f"[bold red]✗ Import failed:[/bold red] {request.error}")
            return
        self.console.print(self._build_summary_table(request.summary))
        self.console.print()
        state = request.state
        self.console.print(
            f"[bold]Metadata ({state.model}):[/bold] "
            f"{len(state.item_groups)} datasets, {len(state.item_defs)} variables, "
            f"{len(state.code_lists)} codelists"
        )

    def _build_summary_table(self, summary: Mapping[str, tuple[int, int]]) -> Table:
        table = Table(
            title="📊 Metadata Import Summary",
            show_header=True,
            header_style="bold cyan",
            border_style="bright_blue",
            title_style="bold magenta",
        )
        table.add_column("Collection", style="cyan", no_wrap=True)
        table.add_column("Created", justify="right", style="green", no_wrap=True)
        table.add_column("Updated", justify="right", style="yellow", no_wrap=True)
        total_created = 0
        total_updated = 0
        for collection, (created, updated) in summary.items():
            total_created += created
            total_updated += updated
            table.add_row(collection.capitalize(), f"{created:,}", f"{updated:,}")
        table.add_section()
        table.add_row(
            "[bold]Total[/bold]",
            f"[bold green]{total_created:,}[/bold green]",
            f"[bold yellow]{total_updated:,}[/bold yellow]",
        )
        return table
