import typer

from .commands import (
    export as export_cmd,
    inspect as inspect_cmd,
    validate as validate_cmd,
)

app = typer.Typer(help="metashare CLI")

app.add_typer(export_cmd.app, name="export")
app.add_typer(inspect_cmd.app, name="inspect")
app.add_typer(validate_cmd.app, name="validate")


if __name__ == "__main__":
    app()
