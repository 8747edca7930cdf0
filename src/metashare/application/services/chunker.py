"""Split the explicit item list into bounded-size subpackages."""

from __future__ import annotations

from typing import Iterator, Sequence, TypeVar

T = TypeVar("T")

# Bounds the number of resolved records held (and serialized) at once
SUBPACKAGE_SIZE = 1000


def chunk_bounds(total: int, size: int = SUBPACKAGE_SIZE) -> Iterator[tuple[int, int]]:
    """
    Yield ``(start, end)`` slice bounds covering ``range(total)`` in steps of ``size``.

    Raises:
        ValueError: If size < 1 or total < 0
    """
    if size < 1:
        raise ValueError(f"chunk size must be >= 1, got {size}")
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")
    for start in range(0, total, size):
        yield start, min(start + size, total)


def chunk(items: Sequence[T], size: int = SUBPACKAGE_SIZE) -> list[list[T]]:
    """
    Split items into contiguous sub-lists of at most ``size`` elements.

    Concatenating the result reproduces ``items`` in order; the number of
    sub-lists is ``ceil(len(items) / size)`` (zero for an empty input).

    Args:
        items: Ordered items to split
        size: Maximum sub-list length

    Returns:
        List of sub-lists

    Raises:
        ValueError: If size < 1
    """
    return [list(items[start:end]) for start, end in chunk_bounds(len(items), size)]
