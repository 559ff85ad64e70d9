"""
Sparse Level Map
Per-level storage of the nodes that differ from that level's default node.

A missing key means the subtree at that position is entirely default.
"""
from __future__ import annotations

from typing import Iterator, Mapping


class SparseLevelMap:
    """
    Mapping from index (within one tree level) to node value.

    Dict-backed; keys() and items() are returned in ascending index order so
    that iteration, and therefore tree construction, is deterministic.
    """

    __slots__ = ("_nodes",)

    def __init__(self, nodes: Mapping[int, bytes] | None = None) -> None:
        self._nodes: dict[int, bytes] = dict(nodes) if nodes else {}

    def get(self, index: int) -> bytes | None:
        return self._nodes.get(index)

    def set(self, index: int, value: bytes) -> None:
        """Store value at index, overwriting any previous value."""
        self._nodes[index] = value

    def contains(self, index: int) -> bool:
        return index in self._nodes

    def keys(self) -> list[int]:
        """Indices present at this level, ascending."""
        return sorted(self._nodes)

    def items(self) -> list[tuple[int, bytes]]:
        """(index, value) pairs, ascending by index."""
        return [(index, self._nodes[index]) for index in self.keys()]

    def only_item(self) -> tuple[int, bytes]:
        """
        Return the single entry of a one-node level (the root level).

        Raises:
            ValueError: If the level does not hold exactly one node
        """
        if len(self._nodes) != 1:
            raise ValueError(
                f"Expected exactly one node at this level, found {len(self._nodes)}"
            )
        return next(iter(self._nodes.items()))

    def __contains__(self, index: object) -> bool:
        return index in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[int]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return f"SparseLevelMap(size={len(self._nodes)})"


__all__ = ["SparseLevelMap"]
