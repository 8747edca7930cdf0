from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ....domain.errors import PackageStoreError
from ...adapters.file_package_store import FilePackageStore
from ...config.environment import get_config_path
from ...config.settings import Settings

app = typer.Typer(help="Inspect saved packages")
console = Console()


@app.command()
def package(
    group_uuid: str = typer.Argument(..., help="Package group uuid"),
    version: int | None = typer.Option(None, help="Package version (latest if omitted)"),
    packages_dir: Path | None = typer.Option(None, help="Directory for saved packages (overrides configuration)"),
    config_path: str | None = typer.Option(None, help="Path to metashare.toml configuration file"),
    show_header: bool = typer.Option(False, "--show-header", help="Print the serialized header"),
) -> None:
    """
    Show the manifest of a saved package: selected items, related items and chunks.
    """
    settings = Settings.from_toml(config_path or get_config_path())
    store = FilePackageStore(packages_dir or settings.paths.packages_dir)

    try:
        manifest = store.load_manifest(group_uuid, version)
        serialized = store.load(group_uuid, version)
    except PackageStoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    summary = Table(title=f"Package {manifest.get('name', group_uuid)}", show_header=True, header_style="bold magenta")
    summary.add_column("Field", style="cyan")
    summary.add_column("Value", style="white")
    summary.add_row("Group uuid", str(manifest.get("group_uuid")))
    summary.add_row("Version", str(manifest.get("version")))
    summary.add_row("Description", str(manifest.get("description", "")))
    summary.add_row("Owner", str(manifest.get("owner") or "N/A"))
    summary.add_row("Created", str(manifest.get("date_created")))
    summary.add_row("Items", str(len(manifest.get("items", []))))
    summary.add_row("Related items", str(len(manifest.get("related_items", []))))
    summary.add_row("Chunks", str(serialized.chunk_count))
    console.print(summary)

    # Count related items per type
    type_counts: dict[str, list[int]] = {}
    for entry in manifest.get("items", []):
        type_counts.setdefault(entry["type"], [0, 0])[0] += 1
    for entry in manifest.get("related_items", []):
        type_counts.setdefault(entry["type"], [0, 0])[1] += 1

    if type_counts:
        types_table = Table(title="Items by type", show_header=True, header_style="bold magenta")
        types_table.add_column("Type", style="cyan")
        types_table.add_column("Selected", justify="right")
        types_table.add_column("Related", justify="right")
        for type_name in sorted(type_counts):
            selected, related = type_counts[type_name]
            types_table.add_row(type_name, str(selected), str(related))
        console.print(types_table)

    if show_header:
        console.print(Panel(serialized.header, title="Header", border_style="blue"))
