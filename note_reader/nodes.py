"""Typed node tree produced from the deserialized session property list."""

from __future__ import annotations

import plistlib
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, FrozenSet, Iterator, Optional, Tuple

from .exceptions import InvalidNoteError


class NodeKind(Enum):
    BOOL = "bool"
    UINT = "uint"
    REAL = "real"
    STRING = "string"
    DATA = "data"
    DATE = "date"
    ARRAY = "array"
    MAP = "map"
    REF = "ref"
    KEY = "key"


@dataclass(frozen=True)
class Node:
    """A single decoded value.

    ``value`` holds a plain Python value for leaves, a tuple of nodes for
    arrays, a tuple of ``(key, value)`` node pairs for maps and the table
    index for references.
    """

    kind: NodeKind
    value: Any

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def ref(cls, index: int) -> "Node":
        return cls(NodeKind.REF, int(index))

    @classmethod
    def string(cls, text: str) -> "Node":
        return cls(NodeKind.STRING, text)

    @classmethod
    def array(cls, *items: "Node") -> "Node":
        return cls(NodeKind.ARRAY, tuple(items))

    @classmethod
    def map(cls, *pairs: Tuple[str, "Node"]) -> "Node":
        return cls(
            NodeKind.MAP,
            tuple((cls(NodeKind.KEY, key), value) for key, value in pairs),
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def is_ref(self) -> bool:
        return self.kind is NodeKind.REF

    def __len__(self) -> int:
        if self.kind in (NodeKind.ARRAY, NodeKind.MAP, NodeKind.DATA, NodeKind.STRING):
            return len(self.value)
        return 0

    def item(self, index: int) -> Optional["Node"]:
        if self.kind is not NodeKind.ARRAY:
            return None
        if 0 <= index < len(self.value):
            return self.value[index]
        return None

    def lookup(self, key: str) -> Optional["Node"]:
        if self.kind is not NodeKind.MAP:
            return None
        for key_node, value in self.value:
            if key_node.kind in (NodeKind.KEY, NodeKind.STRING) and key_node.value == key:
                return value
        return None

    def keys(self) -> Iterator[str]:
        if self.kind is not NodeKind.MAP:
            return iter(())
        return (str(key_node.value) for key_node, _ in self.value)

    def describe(self) -> str:
        if self.kind is NodeKind.ARRAY:
            return f"<array len={len(self.value)}>"
        if self.kind is NodeKind.MAP:
            return f"<map keys={len(self.value)}>"
        if self.kind is NodeKind.DATA:
            return f"<data len={len(self.value)}>"
        if self.kind is NodeKind.REF:
            return f"<ref {self.value}>"
        return f"<{self.kind.value} {self.value!r}>"


def node_from_plist(obj: Any, _active: FrozenSet[int] = frozenset()) -> Node:
    """Convert ``plistlib`` output into a :class:`Node` tree.

    A container that contains itself is rejected with :class:`InvalidNoteError`.
    """

    # bool is a subclass of int
    if isinstance(obj, bool):
        return Node(NodeKind.BOOL, obj)
    if isinstance(obj, plistlib.UID):
        return Node.ref(obj.data)
    if isinstance(obj, int):
        return Node(NodeKind.UINT, obj)
    if isinstance(obj, float):
        return Node(NodeKind.REAL, obj)
    if isinstance(obj, str):
        return Node(NodeKind.STRING, obj)
    if isinstance(obj, (bytes, bytearray)):
        return Node(NodeKind.DATA, bytes(obj))
    if isinstance(obj, datetime):
        return Node(NodeKind.DATE, obj)
    if isinstance(obj, (list, tuple, dict)):
        if id(obj) in _active:
            raise InvalidNoteError("Property list container refers to itself")
        _active = _active | {id(obj)}
    if isinstance(obj, (list, tuple)):
        return Node(NodeKind.ARRAY, tuple(node_from_plist(item, _active) for item in obj))
    if isinstance(obj, dict):
        return Node(
            NodeKind.MAP,
            tuple(
                (Node(NodeKind.KEY, str(key)), node_from_plist(value, _active))
                for key, value in obj.items()
            ),
        )
    raise InvalidNoteError(f"Unsupported property list value: {type(obj).__name__}")


__all__ = ["Node", "NodeKind", "node_from_plist"]
