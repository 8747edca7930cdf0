"""Discover metadata records reachable by reference from explicitly selected records."""

from __future__ import annotations

import logging
from typing import Any, Callable, Collection, Iterable, Iterator

from ...domain.models.item import Item
from ...domain.models.metadata import MetadataObject, is_exportable
from ...domain.models.package import ExportedPackage

logger = logging.getLogger(__name__)

_COLLECTION_TYPES = (list, tuple, set, frozenset)


def _candidates(values: Iterable[Any]) -> Iterator[Any]:
    """Flatten reference values: each collection contributes its elements."""
    for value in values:
        if isinstance(value, _COLLECTION_TYPES):
            yield from value
        else:
            yield value


class ReferenceGraphWalker:
    """
    Adds every exportable record reachable from a root to the package's related items.

    A record qualifies when it is a non-principal MetadataObject whose item is
    neither explicitly selected nor already related. Records without a uuid are
    only passed to ``on_discovered`` so validation can report them. Qualifying records are
    added to ``package.related_items``, passed to ``on_discovered`` (best-effort
    validation, must not raise), and then walked in turn. Records are only
    read; the walk uses an explicit work list so deep graphs do not exhaust
    the call stack, and cycles terminate because membership is checked before
    a record is queued.
    """

    def __init__(
        self,
        package: ExportedPackage,
        on_discovered: Callable[[MetadataObject], None],
        explicit_items: Collection[Item] | None = None,
    ) -> None:
        """
        Initialize walker for one export run.

        Args:
            package: Package whose ``related_items`` set receives discovered items
            on_discovered: Callback invoked once per newly discovered record
            explicit_items: Membership view of the selected items (defaults to a
                set built from ``package.items``)
        """
        self.package = package
        self.on_discovered = on_discovered
        self.explicit_items = set(package.items) if explicit_items is None else explicit_items

    def resolve_related(self, root: MetadataObject) -> int:
        """
        Walk the reference graph below ``root``.

        Returns:
            Number of items newly added to the package's related items
        """
        related = self.package.related_items
        discovered = 0
        pending: list[MetadataObject] = [root]
        while pending:
            current = pending.pop()
            for candidate in _candidates(current.references()):
                if not is_exportable(candidate):
                    continue
                if not candidate.uuid:
                    # Cannot be packaged or deduplicated; validation reports it
                    self.on_discovered(candidate)
                    continue
                item = Item.value_of(candidate)
                if item in self.explicit_items or item in related:
                    continue
                related.add(item)
                discovered += 1
                self.on_discovered(candidate)
                pending.append(candidate)
        if discovered:
            logger.debug(f"Discovered {discovered} related items below {Item.value_of(root)}")
        return discovered
