from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Sequence

from ...infrastructure.logging import get_correlation_id
from ...domain.errors import ExportFailed, ExportTaskError, ItemsFailedValidation, PackageValidationError
from ...domain.models.item import Item
from ...domain.models.metadata import MetadataObject
from ...domain.models.package import ExportedPackage, SerializedPackage, wrap_with_prologue
from ...domain.models.validation import ValidationFailure
from ...domain.services.validation_aggregator import ValidationAggregator
from ..dto.export import ExportRequest, ExportResult
from ..ports.export_log import ExportLogPort
from ..ports.metadata_repository import MetadataRepositoryPort
from ..ports.package_store import PackageStorePort
from ..ports.progress_reporter import ProgressContext, ProgressReporterPort
from ..ports.serializer import MetadataSerializerPort
from ..ports.validator import ValidatorPort
from ..services.chunker import SUBPACKAGE_SIZE, chunk, chunk_bounds
from ..services.enrichment_hook import EnrichmentHook
from ..services.reference_walker import ReferenceGraphWalker

logger = logging.getLogger(__name__)

MISSING_UUID = "<no uuid>"


class ExportState(str, Enum):
    """Lifecycle of one export run."""

    CREATED = "created"
    DESCRIPTOR_VALIDATED = "descriptor_validated"
    RESOLVING = "resolving"
    ENRICHING = "enriching"
    SERIALIZING = "serializing"
    ASSEMBLED = "assembled"
    FAILED = "failed"


class PackageAssembler:
    """
    Drives one export: validate descriptor → resolve → enrich → serialize → assemble.

    The explicit items are processed in chunks of ``chunk_size``. For every
    chunk the records are loaded and validated (best effort), related records
    are discovered, accumulated validation failures abort the run, the
    enrichment hook runs, and the chunk's records are serialized. Only one
    chunk of resolved records is held at a time.

    An assembler instance processes exactly one package end to end.
    """

    def __init__(
        self,
        repository: MetadataRepositoryPort,
        validator: ValidatorPort,
        serializer: MetadataSerializerPort,
        export_log: ExportLogPort,
        enrichment_hook: EnrichmentHook | None = None,
        package_store: PackageStorePort | None = None,
        progress_reporter: ProgressReporterPort | None = None,
        chunk_size: int = SUBPACKAGE_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self.repository = repository
        self.validator = validator
        self.serializer = serializer
        self.export_log = export_log
        self.enrichment_hook = enrichment_hook or EnrichmentHook(enabled=False)
        self.package_store = package_store
        self.progress_reporter = progress_reporter
        self.chunk_size = chunk_size
        self.aggregator = ValidationAggregator()
        self.state = ExportState.CREATED

    def assemble(self, package: ExportedPackage, persist: bool = False) -> SerializedPackage:
        """
        Export ``package`` and attach the resulting artifact to it.

        Args:
            package: Descriptor with the explicitly selected items
            persist: Save the package through the package store when done

        Returns:
            SerializedPackage with the header and one body per chunk

        Raises:
            PackageValidationError: Descriptor failed validation (nothing was loaded)
            ItemsFailedValidation: Items of a chunk failed validation
            ExportFailed: Any other failure, with the original exception as cause
        """
        if self.state is not ExportState.CREATED:
            raise RuntimeError(f"Assembler already used (state={self.state.value})")
        if persist and self.package_store is None:
            raise ValueError("persist=True requires a package store")

        try:
            self.export_log.log("Export started")

            result = self.validator.validate(package)
            if not result.ok:
                raise PackageValidationError(result.reason or "unknown error")
            self.state = ExportState.DESCRIPTOR_VALIDATED

            package.related_items.clear()
            self.aggregator.clear()

            bodies = self._export_chunks(package)

            self.export_log.log("Serializing header")
            header = wrap_with_prologue(self.serializer.serialize(package))

            serialized = SerializedPackage(header=header, metadata=tuple(bodies))
            package.serialized_package = serialized

            if persist and self.package_store is not None:
                self.export_log.log("Saving package")
                self.package_store.save(package)

            self.state = ExportState.ASSEMBLED
            self.export_log.log(f"Export completed. Package group {package.group_uuid}")
            return serialized
        except ExportTaskError as e:
            self._fail(package)
            logger.error(f"Export of package '{package.name}' failed: {e}")
            raise
        except Exception as e:
            self._fail(package)
            logger.error(f"Export of package '{package.name}' failed", exc_info=True)
            raise ExportFailed(e) from e

    def _fail(self, package: ExportedPackage) -> None:
        # A failed run leaves no artifact, even if persistence was the failing step
        self.state = ExportState.FAILED
        package.serialized_package = None

    def _export_chunks(self, package: ExportedPackage) -> list[str]:
        items = list(package.items)
        walker = ReferenceGraphWalker(package, self._validate_best_effort, explicit_items=set(items))
        bounds = list(chunk_bounds(len(items), self.chunk_size))

        progress: ProgressContext | None = None
        if self.progress_reporter is not None:
            progress = self.progress_reporter.start_export(
                total_chunks=len(bounds),
                description=f"Exporting {package.name}",
            )

        bodies: list[str] = []
        for chunk_items, (start, end) in zip(chunk(items, self.chunk_size), bounds):
            self.export_log.log(f"Exporting subpackage [items from {start} to {end} of {len(items)}]")
            bodies.append(self._export_chunk(chunk_items, walker))
            if progress is not None:
                progress.update(len(bodies))

        if progress is not None:
            progress.finish()
        return bodies

    def _export_chunk(self, chunk_items: Sequence[Item], walker: ReferenceGraphWalker) -> str:
        self.state = ExportState.RESOLVING
        self.export_log.log("Preparing items to export")
        explicit_objects: list[MetadataObject] = []
        for item in chunk_items:
            obj = self.repository.get_by_uuid(item.type, item.uuid)
            self._validate_best_effort(obj)
            explicit_objects.append(obj)

        self.export_log.log("Resolving related items")
        for obj in explicit_objects:
            walker.resolve_related(obj)

        if self.aggregator.has_failures():
            raise ItemsFailedValidation(self.aggregator.failures)

        self.state = ExportState.ENRICHING
        self.enrichment_hook.enrich(explicit_objects)

        self.state = ExportState.SERIALIZING
        self.export_log.log("Serializing items")
        body = wrap_with_prologue(self.serializer.serialize(explicit_objects))

        # Release this chunk's records before loading the next one
        explicit_objects.clear()
        self.repository.clear_session()
        return body

    def _validate_best_effort(self, obj: MetadataObject) -> None:
        """Validate a record, recording (never raising) any failure."""
        try:
            result = self.validator.validate(obj)
        except Exception as e:
            failure = ValidationFailure(subject=_subject_of(obj), reason=str(e) or type(e).__name__, cause=e)
        else:
            if result.ok:
                return
            failure = ValidationFailure(subject=_subject_of(obj), reason=result.reason or "invalid")

        item = failure.subject
        self.aggregator.record(failure)
        self.export_log.log(f"{item.type} [{item.uuid}] failed validation: {failure.reason}", failure.cause)


def _subject_of(obj: MetadataObject) -> Item:
    """Item naming a failing record; records without a uuid get a placeholder."""
    return Item(type=obj.item_type, uuid=obj.uuid or MISSING_UUID)


def export_package(
    request: ExportRequest,
    repository: MetadataRepositoryPort,
    validator: ValidatorPort,
    serializer: MetadataSerializerPort,
    export_log: ExportLogPort,
    enrichment_hook: EnrichmentHook | None = None,
    package_store: PackageStorePort | None = None,
    progress_reporter: ProgressReporterPort | None = None,
    chunk_size: int = SUBPACKAGE_SIZE,
    correlation_id: str | None = None,
) -> ExportResult:
    """
    Orchestrate a package export from a request: build descriptor → assemble → persist.

    Args:
        request: ExportRequest with package name, description and selected items
        repository: MetadataRepositoryPort for loading records
        validator: ValidatorPort for descriptor and record validation
        serializer: MetadataSerializerPort for header and chunk bodies
        export_log: ExportLogPort receiving progress and failure entries
        enrichment_hook: Optional EnrichmentHook (disabled when omitted)
        package_store: Optional PackageStorePort (required when request.persist)
        progress_reporter: Optional progress reporter for chunk-level progress
        chunk_size: Maximum explicit items per chunk
        correlation_id: Optional correlation ID (generated if not provided)

    Returns:
        ExportResult with counts, persistence flag and duration

    Raises:
        PackageValidationError, ItemsFailedValidation, ExportFailed
    """
    start_time = time.time()
    correlation_id = correlation_id or get_correlation_id()

    package = ExportedPackage(
        name=request.name,
        description=request.description,
        owner=request.owner,
        version=request.version,
    )
    if request.group_uuid:
        package.group_uuid = request.group_uuid
    for selection in request.items:
        package.add_item(selection.to_item())

    logger.info(
        f"Starting export of package '{package.name}' with {len(package.items)} items",
        extra={"correlation_id": correlation_id, "group_uuid": package.group_uuid},
    )

    persist = request.persist and package_store is not None
    if request.persist and package_store is None:
        logger.warning(
            "Persistence requested but no package store configured; package will not be saved",
            extra={"correlation_id": correlation_id},
        )

    assembler = PackageAssembler(
        repository=repository,
        validator=validator,
        serializer=serializer,
        export_log=export_log,
        enrichment_hook=enrichment_hook,
        package_store=package_store,
        progress_reporter=progress_reporter,
        chunk_size=chunk_size,
    )
    serialized = assembler.assemble(package, persist=persist)

    duration = time.time() - start_time
    logger.info(
        f"Export completed: {len(package.items)} items, {len(package.related_items)} related, "
        f"{serialized.chunk_count} chunks in {duration:.2f}s",
        extra={"correlation_id": correlation_id, "group_uuid": package.group_uuid},
    )

    return ExportResult(
        group_uuid=package.group_uuid,
        version=package.version,
        items_exported=len(package.items),
        related_items=len(package.related_items),
        chunks_written=serialized.chunk_count,
        persisted=persist,
        duration_seconds=duration,
        correlation_id=correlation_id,
    )
