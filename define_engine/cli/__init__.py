import click

from .commands.import_batch import import_command
from .commands.standards import list_standards_command


@click.group()
def app() -> None:
    pass


app.add_command(import_command, name="import")
app.add_command(list_standards_command, name="standards")
__all__ = ["app"]
