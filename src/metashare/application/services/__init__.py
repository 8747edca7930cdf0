"""Application services for orchestrating domain logic."""

from .chunker import SUBPACKAGE_SIZE, chunk, chunk_bounds
from .enrichment_hook import EnrichmentHook
from .reference_walker import ReferenceGraphWalker

__all__ = ["SUBPACKAGE_SIZE", "chunk", "chunk_bounds", "EnrichmentHook", "ReferenceGraphWalker"]
