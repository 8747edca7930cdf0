import json
import logging
import uuid
from pathlib import Path

import typer
from pydantic import ValidationError

from ....application.dto.export import ExportRequest
from ....application.services.enrichment_hook import EnrichmentHook
from ....application.use_cases.export_package import export_package
from ....domain.errors import CatalogError, ExportFailed, ExportTaskError
from ...adapters.file_package_store import FilePackageStore
from ...adapters.json_catalog_repository import JsonCatalogRepository
from ...adapters.local_mapping_enricher import LocalMappingEnricher
from ...adapters.metadata_validator import RuleBasedValidator
from ...adapters.rich_progress_reporter import RichProgressReporterAdapter
from ...adapters.task_export_log import TaskExportLog
from ...adapters.xml_serializer import XmlMetadataSerializer
from ...config.environment import get_config_path
from ...config.settings import Settings
from ...logging import configure_logging, set_correlation_id

app = typer.Typer(help="Export metadata packages")
logger = logging.getLogger(__name__)


def _read_items_file(path: Path) -> list:
    """Read a JSON list of {type, uuid} objects or 'Type:uuid' strings."""
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("items", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of items")
    return data


@app.command()
def run(
    name: str = typer.Option(..., help="Package name"),
    description: str = typer.Option(..., help="Package description"),
    item: list[str] | None = typer.Option(None, "--item", "-i", help="Item to export as Type:uuid (repeatable)"),
    items_file: Path | None = typer.Option(None, help="JSON file listing items to export"),
    owner: str | None = typer.Option(None, help="Package owner"),
    group_uuid: str | None = typer.Option(None, help="Existing package group (new group if omitted)"),
    version: int = typer.Option(1, help="Package version within the group"),
    catalog: Path | None = typer.Option(None, help="Metadata catalog JSON (overrides configuration)"),
    packages_dir: Path | None = typer.Option(None, help="Directory for saved packages (overrides configuration)"),
    persist: bool | None = typer.Option(None, "--persist/--no-persist", help="Save the package after export"),
    add_local_mappings: bool | None = typer.Option(
        None,
        "--add-local-mappings/--no-local-mappings",
        help="Attach local concept mappings (overrides configuration)",
    ),
    chunk_size: int | None = typer.Option(None, help="Explicit items per subpackage (overrides configuration)"),
    config_path: str | None = typer.Option(None, help="Path to metashare.toml configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show per-record log messages"),
) -> None:
    """
    Export selected metadata items, and everything they reference, as a package.

    Items are taken from --item options and/or --items-file. Related items are
    discovered automatically; user accounts are never included.
    """
    configure_logging(logging.INFO, verbose=verbose)

    correlation_id = str(uuid.uuid4())
    set_correlation_id(correlation_id)

    try:
        settings = Settings.from_toml(config_path or get_config_path())
    except Exception as e:
        typer.echo(f"Error loading configuration: {e}", err=True)
        raise typer.Exit(1)

    selections: list = list(item or [])
    if items_file is not None:
        try:
            selections.extend(_read_items_file(items_file))
        except (OSError, ValueError) as e:
            typer.echo(f"Error reading items file: {e}", err=True)
            raise typer.Exit(1)

    should_persist = settings.export.persist if persist is None else persist
    try:
        request = ExportRequest(
            name=name,
            description=description,
            owner=owner,
            group_uuid=group_uuid,
            version=version,
            items=selections,
            persist=should_persist,
        )
    except ValidationError as e:
        typer.echo(f"Error: invalid export request: {e}", err=True)
        raise typer.Exit(1)

    catalog_path = catalog or settings.paths.catalog
    try:
        repository = JsonCatalogRepository.from_file(catalog_path)
    except CatalogError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    export_log = TaskExportLog()
    enrich = settings.export.add_local_mappings if add_local_mappings is None else add_local_mappings
    enrichment_hook = EnrichmentHook(
        enabled=enrich,
        service=LocalMappingEnricher.from_settings(settings.local_source) if enrich else None,
        export_log=export_log,
    )
    package_store = FilePackageStore(packages_dir or settings.paths.packages_dir) if should_persist else None
    progress_reporter = RichProgressReporterAdapter()

    try:
        result = export_package(
            request=request,
            repository=repository,
            validator=RuleBasedValidator(),
            serializer=XmlMetadataSerializer(),
            export_log=export_log,
            enrichment_hook=enrichment_hook,
            package_store=package_store,
            progress_reporter=progress_reporter,
            chunk_size=chunk_size or settings.export.chunk_size,
            correlation_id=correlation_id,
        )
    except ExportTaskError as e:
        progress_reporter.cleanup()
        typer.echo(f"Error: {e}", err=True)
        for entry in export_log.entries:
            if "failed" in entry.message:
                typer.echo(f"  - {entry.message}", err=True)
        if isinstance(e, ExportFailed) and e.cause is not None:
            typer.echo(f"  Cause: {type(e.cause).__name__}: {e.cause}", err=True)
        raise typer.Exit(1)

    progress_reporter.cleanup()
    progress_reporter.display_summary(
        group_uuid=result.group_uuid,
        items_exported=result.items_exported,
        related_items=result.related_items,
        chunks_written=result.chunks_written,
        duration_seconds=result.duration_seconds,
        errors=[entry.message for entry in export_log.errors],
    )
    if result.persisted and package_store is not None:
        path = package_store.get_package_path(result.group_uuid, result.version)
        typer.echo(f"Package saved to {path}")
    else:
        typer.echo("Package exported (not saved)")
