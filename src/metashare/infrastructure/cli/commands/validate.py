"""Validate configuration and metadata catalogs before exporting."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ....application.services.chunker import SUBPACKAGE_SIZE, chunk
from ....domain.errors import CatalogError
from ...adapters.json_catalog_repository import JsonCatalogRepository
from ...adapters.metadata_validator import RuleBasedValidator
from ...config.environment import get_config_path
from ...config.settings import Settings

app = typer.Typer(help="Validate configuration and catalogs")
console = Console()
logger = logging.getLogger(__name__)


@app.command()
def catalog(
    catalog_path: Path | None = typer.Option(None, "--catalog", help="Metadata catalog JSON (overrides configuration)"),
    config_path: str | None = typer.Option(None, help="Path to metashare.toml configuration file"),
    limit: int = typer.Option(50, help="Maximum number of failures to display"),
) -> None:
    """
    Validate every record of a metadata catalog with the export rules.

    Checks:
    - Catalog structure (known types, unique uuids, resolvable references)
    - Record rules (names, retire reasons, concept datatypes and classes, form versions)

    Exits with status 1 if any record fails.
    """
    try:
        settings = Settings.from_toml(config_path or get_config_path())
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    path = catalog_path or settings.paths.catalog
    try:
        repository = JsonCatalogRepository.from_file(path)
    except CatalogError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    validator = RuleBasedValidator()
    failures: list[tuple[str, str, str]] = []
    for batch in chunk(repository.items(), SUBPACKAGE_SIZE):
        for item in batch:
            obj = repository.get_by_uuid(item.type, item.uuid)
            result = validator.validate(obj)
            if not result.ok:
                failures.extend((item.type, item.uuid, error) for error in result.errors)
        # Hold at most one batch of materialized records
        repository.clear_session()

    if not failures:
        console.print(f"[green]✓ All {len(repository)} records in {path} passed validation[/green]")
        return

    table = Table(title="Validation Failures", show_header=True, header_style="bold magenta")
    table.add_column("Type", style="cyan")
    table.add_column("UUID", style="white")
    table.add_column("Error", style="red")
    for type_name, uuid, error in failures[:limit]:
        table.add_row(type_name, uuid, error)
    console.print(table)
    if len(failures) > limit:
        console.print(f"[yellow]... and {len(failures) - limit} more failures[/yellow]")

    console.print(f"\n[red]✗ {len(failures)} validation errors in {path}[/red]")
    raise typer.Exit(1)


@app.command()
def config(
    config_path: str | None = typer.Option(None, help="Path to metashare.toml configuration file"),
) -> None:
    """Show the effective configuration (TOML merged with environment overrides)."""
    path = config_path or get_config_path()
    try:
        settings = Settings.from_toml(path)
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Configuration ({path})", show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("export.chunk_size", str(settings.export.chunk_size))
    table.add_row("export.add_local_mappings", str(settings.export.add_local_mappings))
    table.add_row("export.persist", str(settings.export.persist))
    table.add_row("local_source.name", settings.local_source.name)
    table.add_row("local_source.uuid", settings.local_source.uuid)
    table.add_row("paths.catalog", str(settings.paths.catalog))
    table.add_row("paths.packages_dir", str(settings.paths.packages_dir))
    console.print(table)
