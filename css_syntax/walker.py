"""Depth-first traversal of value definition syntax trees with enter/leave callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .ast_nodes import LEAF_NODES, BooleanExpr, Function, Group, Multiplier, Node
from .errors import UnknownNodeTypeError

Callback = Callable[[Node, Any], None]


def _noop(node: Node, context: Any) -> None:
    pass


@dataclass
class WalkOptions:
    """Callbacks fired before (enter) and after (leave) a node's children."""
    enter: Callback = _noop
    leave: Callback = _noop


def walk(node: Node, options: WalkOptions, context: Any = None) -> None:
    """Visit ``node`` and its descendants in source order.

    ``context`` is handed unchanged to every callback; callers keep their
    accumulated state there. Exceptions raised by a callback propagate.
    """
    options.enter(node, context)

    if isinstance(node, Group):
        for term in node.terms:
            walk(term, options, context)
    elif isinstance(node, (Multiplier, BooleanExpr)):
        walk(node.term, options, context)
    elif isinstance(node, Function):
        if node.args is not None:
            walk(node.args, options, context)
    elif not isinstance(node, LEAF_NODES):
        raise UnknownNodeTypeError(node)

    options.leave(node, context)
