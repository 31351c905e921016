"""Import command - merge tabular metadata into a new metadata version.

A thin adapter between click and ``MetadataImportUseCase``: it reads the
batch files, builds the request, runs the use case and presents the result.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import cast

import click
from rich.console import Console

from ...application.models import ImportMetadataRequest
from ...config import ConfigLoader
from ...constants import Models
from ...domain.entities.study import MetaDataVersion
from ...infrastructure.container import DependencyContainer
from ...infrastructure.io.batch_reader import ImportSources
from ...infrastructure.io.exceptions import BatchSourceError
from ..presenters.summary import ImportSummaryPresenter, ImportSummaryRequest

console = Console()

_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


@dataclass(frozen=True)
class ImportCommandOptions:
    datasets: Path | None
    variables: Path | None
    codelists: Path | None
    coded_values: Path | None
    model: str | None
    ct_dir: Path | None
    config_file: Path | None
    verbose: int

    @classmethod
    def from_kwargs(cls, options: dict[str, object]) -> ImportCommandOptions:
        return cls(
            datasets=cast("Path | None", options.get("datasets")),
            variables=cast("Path | None", options.get("variables")),
            codelists=cast("Path | None", options.get("codelists")),
            coded_values=cast("Path | None", options.get("coded_values")),
            model=cast("str | None", options.get("model")),
            ct_dir=cast("Path | None", options.get("ct_dir")),
            config_file=cast("Path | None", options.get("config_file")),
            verbose=cast("int", options.get("verbose", 0)),
        )

    def sources(self) -> ImportSources:
        return ImportSources(
            datasets=self.datasets,
            variables=self.variables,
            codelists=self.codelists,
            coded_values=self.coded_values,
        )


@click.command()
@click.option("--datasets", type=_FILE, help="CSV/TSV file with dataset records")
@click.option("--variables", type=_FILE, help="CSV/TSV file with variable records")
@click.option("--codelists", type=_FILE, help="CSV/TSV file with codelist records")
@click.option(
    "--coded-values", "coded_values", type=_FILE, help="CSV/TSV file with coded values"
)
@click.option(
    "--model",
    type=click.Choice(list(Models.SUPPORTED)),
    help="Metadata model (default: from config, else SDTM)",
)
@click.option(
    "--ct-dir",
    "ct_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory with controlled terminology CSV files",
)
@click.option(
    "--config",
    "config_file",
    type=_FILE,
    help="Path to a define_engine.toml config file (default: ./define_engine.toml)",
)
@click.option(
    "-v", "--verbose", count=True, help="Increase verbosity level (e.g., -v, -vv)"
)
def import_command(**options: object) -> None:
    """Import datasets, variables, codelists and coded values.

    The records are reconciled into an empty metadata version. Any invalid
    record rejects the whole batch.

    Examples:

    \b
        define-engine import --datasets ds.csv --variables vars.csv
    \b
        define-engine import --codelists cl.csv --coded-values cv.csv --ct-dir ct/
    """
    command_options = ImportCommandOptions.from_kwargs(dict(options))

    config = ConfigLoader.load(config_file=command_options.config_file)
    if command_options.model is not None:
        config = replace(config, model=command_options.model)
    if command_options.ct_dir is not None:
        config = replace(config, ct_dir=command_options.ct_dir)

    container = DependencyContainer(
        config=config, verbose=command_options.verbose, console=console
    )
    try:
        batch = container.create_batch_reader().read(command_options.sources())
    except BatchSourceError as exc:
        raise click.ClickException(str(exc)) from exc

    use_case = container.create_metadata_import_use_case()
    response = use_case.execute(
        ImportMetadataRequest(
            batch=batch,
            state=MetaDataVersion(model=config.model),
            allow_non_extensible_extension=config.allow_non_extensible_extension,
            strip_coded_value_whitespace=config.strip_coded_value_whitespace,
            verbose=command_options.verbose,
        )
    )

    ImportSummaryPresenter(console).present(
        ImportSummaryRequest(
            summary=response.diff.summary() if response.diff is not None else {},
            state=response.state,
            success=response.success,
            error=response.error,
        )
    )
    if not response.success:
        raise click.ClickException(response.error or "Import failed")
