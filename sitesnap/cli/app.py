"""Typer application entry point for the sitesnap CLI."""

import typer

from sitesnap.cli.commands import archive as archive_command
from sitesnap.cli.commands import history as history_command
from sitesnap.cli.commands import pages as pages_command

app = typer.Typer(no_args_is_help=True, name="sitesnap")

app.command(name="archive", help="Archive a website into a new snapshot")(
    archive_command.archive_command
)
app.command(name="history", help="Show the snapshot log of an archived host")(
    history_command.history_command
)
app.command(name="pages", help="List the pages saved in a snapshot")(
    pages_command.pages_command
)


if __name__ == "__main__":
    app()
