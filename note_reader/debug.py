"""Trace output for reverse engineering new document variants.

The dump never follows references; a ``<uid>`` line names the table index
so the target can be dumped separately.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from .nodes import Node, NodeKind

LOGGER = logging.getLogger(__name__)

INDENT = 4


def dump_lines(node: Node, max_depth: int = 6, depth: int = 0) -> Iterator[str]:
    pad = " " * (depth * INDENT)
    kind = node.kind

    if kind is NodeKind.ARRAY:
        if depth >= max_depth:
            yield f"{pad}<array length=\"{len(node)}\">...</array>"
            return
        yield f"{pad}<array>"
        for index, item in enumerate(node.value):
            yield f"{pad}{' ' * INDENT}<array_item id=\"{index}\">"
            yield from dump_lines(item, max_depth, depth + 2)
            yield f"{pad}{' ' * INDENT}</array_item>"
        yield f"{pad}</array>"
    elif kind is NodeKind.MAP:
        if depth >= max_depth:
            yield f"{pad}<dict length=\"{len(node)}\">...</dict>"
            return
        yield f"{pad}<dict>"
        for index, (key, value) in enumerate(node.value):
            yield f"{pad}{' ' * INDENT}<dict_item key=\"{key.value}\" id=\"{index}\">"
            yield from dump_lines(value, max_depth, depth + 2)
            yield f"{pad}{' ' * INDENT}</dict_item>"
        yield f"{pad}</dict>"
    elif kind is NodeKind.DATA:
        yield f"{pad}<data length=\"{len(node.value)}\">...</data>"
    elif kind is NodeKind.REF:
        yield f"{pad}<uid>{node.value}</uid>"
    elif kind is NodeKind.BOOL:
        yield f"{pad}<bool>{'true' if node.value else 'false'}</bool>"
    elif kind is NodeKind.DATE:
        yield f"{pad}<date>{node.value.isoformat()}</date>"
    else:
        yield f"{pad}<{kind.value}>{node.value}</{kind.value}>"


def log_node(
    node: Node,
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
    max_depth: int = 6,
) -> None:
    logger = logger or LOGGER
    if not logger.isEnabledFor(level):
        return
    for line in dump_lines(node, max_depth=max_depth):
        logger.log(level, "%s", line)


__all__ = ["dump_lines", "log_node"]
