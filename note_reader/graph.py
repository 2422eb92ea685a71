"""Object graph over the keyed-archive node table."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

from .exceptions import DanglingReferenceError, InvalidNoteError
from .nodes import Node, NodeKind
from .path import ByIndex, ByKey, Step, resolve, resolve_value, steps

LOGGER = logging.getLogger(__name__)

# Found by reverse engineering
GENERAL_INFO_INDEX = 1
LAYOUT_INFO_INDEX = 2

# One reference per graph edge has been observed; allow one spare hop.
MAX_REFERENCE_HOPS = 2

PathLike = Union[Sequence[Step], Sequence[Union[int, str]]]


def _as_path(path: PathLike) -> tuple:
    if all(isinstance(step, (ByIndex, ByKey)) for step in path):
        return tuple(path)
    return steps(*path)


class ObjectGraph:
    """Read-only view over the flat ``$objects`` table.

    The table is the single source of truth for reference resolution; every
    reference is an index into it and is bounds-checked on use.
    """

    def __init__(self, table: Node) -> None:
        if table.kind is not NodeKind.ARRAY:
            raise InvalidNoteError(f"Node table must be an array, found {table.describe()}")
        self._table = table

    @classmethod
    def from_root(cls, root: Node) -> "ObjectGraph":
        if root.kind is not NodeKind.MAP:
            raise InvalidNoteError(f"Session root must be a map, found {root.describe()}")
        table = root.lookup("$objects")
        if table is None:
            raise InvalidNoteError("Session root has no $objects table")
        if table.kind is not NodeKind.ARRAY:
            raise InvalidNoteError(f"Invalid $objects type: {table.describe()}")
        if len(table) <= LAYOUT_INFO_INDEX:
            raise InvalidNoteError(
                f"Node table too short ({len(table)} entries) for document metadata"
            )
        LOGGER.debug("Loaded node table with %d entries", len(table))
        return cls(table)

    @property
    def table(self) -> Node:
        return self._table

    def __len__(self) -> int:
        return len(self._table)

    def get(self, index: int) -> Optional[Node]:
        return self._table.item(index)

    def __getitem__(self, index: int) -> Node:
        node = self.get(index)
        if node is None:
            raise DanglingReferenceError(
                f"Reference {index} outside node table of {len(self)} entries"
            )
        return node

    def deref(self, node: Node, *, path: str = "", position: Optional[int] = None) -> Node:
        """Follow ``node`` if it is a reference, bounded by ``MAX_REFERENCE_HOPS``."""

        hops = 0
        while node.is_ref:
            if hops >= MAX_REFERENCE_HOPS:
                raise DanglingReferenceError(
                    f"Reference chain longer than {MAX_REFERENCE_HOPS} hops at {path or '<start>'}",
                    path=path,
                    position=position,
                )
            target = self.get(node.value)
            if target is None:
                raise DanglingReferenceError(
                    f"Reference {node.value} outside node table of {len(self)} entries"
                    f" at {path or '<start>'}",
                    path=path,
                    position=position,
                )
            node = target
            hops += 1
        return node

    # ------------------------------------------------------------------
    # Path helpers
    # ------------------------------------------------------------------
    def resolve(self, path: PathLike, start: Optional[Node] = None) -> Node:
        """Resolve ``path`` from ``start`` (default: the node table itself)."""

        return resolve(self, self._table if start is None else start, _as_path(path))

    def value(self, path: PathLike, expect: NodeKind, start: Optional[Node] = None) -> Any:
        return resolve_value(
            self, self._table if start is None else start, _as_path(path), expect
        )

    def class_name(self, node: Node) -> Optional[str]:
        """Return the ``$classname`` of a keyed-archive object, if it has one."""

        node = self.deref(node)
        class_ref = node.lookup("$class")
        if class_ref is None:
            return None
        class_node = self.deref(class_ref)
        name = class_node.lookup("$classname")
        if name is None or name.kind not in (NodeKind.STRING, NodeKind.KEY):
            return None
        return str(name.value)


__all__ = [
    "GENERAL_INFO_INDEX",
    "LAYOUT_INFO_INDEX",
    "MAX_REFERENCE_HOPS",
    "ObjectGraph",
]
