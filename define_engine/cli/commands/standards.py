from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ...config import ConfigLoader
from ...infrastructure.repositories.standard_repository import StandardRepository

console = Console()


@click.command()
@click.option(
    "--ct-dir",
    "ct_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory with controlled terminology CSV files",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a define_engine.toml config file (default: ./define_engine.toml)",
)
def list_standards_command(ct_dir: Path | None, config_file: Path | None) -> None:
    """List the controlled terminology packages available for imports."""
    config = ConfigLoader.load(config_file=config_file)
    repository = StandardRepository(config=config, ct_dir=ct_dir)
    standards = repository.list_standards()
    if not standards:
        console.print(
            f"[yellow]⚠[/yellow] No controlled terminology found in {repository.ct_dir}"
        )
        return
    table = Table(title="Controlled Terminology")
    table.add_column("OID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Codelists", justify="right")
    table.add_column("Non-extensible", justify="right")
    for standard in standards:
        non_extensible = sum(
            1 for code_list in standard.code_lists.values() if not code_list.extensible
        )
        table.add_row(
            standard.oid,
            standard.name,
            standard.version or "",
            str(len(standard.code_lists)),
            str(non_extensible),
        )
    console.print(table)
