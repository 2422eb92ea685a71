"""Type-directed navigation through the object graph.

Every reverse-engineered field access goes through :func:`resolve`. A path is
an ordered tuple of steps; each step either indexes into an array or looks up
a key in a map. References met along the way are dereferenced against the
node table before the step is applied, and a reference left at the end of
the path is dereferenced once more before it is returned.

Failures never index out of bounds; they raise a :class:`NavigationError`
subclass whose message names the failing step and its position so that new
format variants can be diagnosed from the log alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence, Tuple, Union

from .exceptions import MissingFieldError, TypeMismatchError
from .nodes import Node, NodeKind

if TYPE_CHECKING:  # pragma: no cover
    from .graph import ObjectGraph


@dataclass(frozen=True)
class ByIndex:
    index: int

    def __str__(self) -> str:
        return f"[{self.index}]"


@dataclass(frozen=True)
class ByKey:
    key: str

    def __str__(self) -> str:
        return repr(self.key)


Step = Union[ByIndex, ByKey]
Path = Tuple[Step, ...]


def steps(*parts: Union[int, str, ByIndex, ByKey]) -> Path:
    """Build a path: integers index arrays, strings look up map keys."""

    built = []
    for part in parts:
        if isinstance(part, (ByIndex, ByKey)):
            built.append(part)
        elif isinstance(part, bool):
            raise TypeError("Boolean is not a valid path step")
        elif isinstance(part, int):
            built.append(ByIndex(part))
        elif isinstance(part, str):
            built.append(ByKey(part))
        else:
            raise TypeError(f"Unsupported path step: {part!r}")
    return tuple(built)


def format_path(path: Sequence[Step]) -> str:
    return "/".join(str(step) for step in path) or "<start>"


def _apply(current: Node, step: Step) -> Union[Node, None, str]:
    if isinstance(step, ByIndex):
        if current.kind is not NodeKind.ARRAY:
            return f"cannot index {current.describe()}"
        found = current.item(step.index)
        if found is None:
            return f"index out of range (length {len(current)})"
        return found
    if current.kind is not NodeKind.MAP:
        return f"cannot look up key in {current.describe()}"
    found = current.lookup(step.key)
    if found is None:
        return "key not present in map"
    return found


def resolve(graph: "ObjectGraph", start: Node, path: Sequence[Step]) -> Node:
    """Walk ``path`` from ``start`` and return the node it reaches."""

    total = len(path)
    current = start
    for position, step in enumerate(path, start=1):
        current = graph.deref(current, path=format_path(path), position=position)
        result = _apply(current, step)
        if isinstance(result, str):
            raise MissingFieldError(
                f"step {position} of {total} ({step}) in {format_path(path)}: {result}",
                path=format_path(path),
                position=position,
            )
        current = result
    return graph.deref(current, path=format_path(path), position=total)


def expect_kind(node: Node, expect: NodeKind, path: Sequence[Step] = ()) -> Any:
    """Return ``node.value`` if ``node`` is of kind ``expect``."""

    accepted = (NodeKind.STRING, NodeKind.KEY) if expect is NodeKind.STRING else (expect,)
    if node.kind not in accepted:
        raise TypeMismatchError(
            f"expected {expect.value} at {format_path(path)}, found {node.describe()}",
            path=format_path(path),
            position=len(path),
        )
    return node.value


def resolve_value(
    graph: "ObjectGraph",
    start: Node,
    path: Sequence[Step],
    expect: NodeKind,
) -> Any:
    """Resolve ``path`` and extract a leaf value of kind ``expect``."""

    return expect_kind(resolve(graph, start, path), expect, path)


__all__ = [
    "ByIndex",
    "ByKey",
    "Path",
    "Step",
    "expect_kind",
    "format_path",
    "resolve",
    "resolve_value",
    "steps",
]
