"""Dependency ordering for declared types and constants."""

from __future__ import annotations

from typing import Dict, Iterator, List, Protocol, Sequence, Tuple, TypeVar

from .errors import CyclicDependencyError, DuplicateNameError, InvalidArgumentError
from .logging import get_logger

_UNVISITED, _VISITING, _DONE = 0, 1, 2

logger = get_logger("ordering")


class DependencyNode(Protocol):
    name: str
    depends_on: Sequence[str]


NodeT = TypeVar("NodeT", bound=DependencyNode)


def topological_order(
    dependencies: Sequence[Sequence[int]],
    labels: Sequence[str] | None = None,
) -> List[int]:
    """Order node indices so every dependency precedes the nodes that need it.

    ``dependencies[i]`` lists the indices node ``i`` depends on. Nodes are
    visited depth first in index order and dependencies in their listed
    order, so nodes without a relative constraint keep their original order.
    Raises :class:`CyclicDependencyError` naming the nodes of the first cycle
    met; no partial order is returned.
    """
    count = len(dependencies)
    names = list(labels) if labels is not None else [str(index) for index in range(count)]
    state = [_UNVISITED] * count
    order: List[int] = []

    for root in range(count):
        if state[root] != _UNVISITED:
            continue
        state[root] = _VISITING
        stack: List[Tuple[int, Iterator[int]]] = [(root, iter(dependencies[root]))]
        while stack:
            node, pending = stack[-1]
            for dependency in pending:
                if not 0 <= dependency < count:
                    raise InvalidArgumentError(
                        f"{names[node]} depends on an unknown node index ({dependency})"
                    )
                if state[dependency] == _DONE:
                    continue
                if state[dependency] == _VISITING:
                    path = [entry for entry, _ in stack]
                    cycle = path[path.index(dependency):] + [dependency]
                    raise CyclicDependencyError([names[index] for index in cycle])
                state[dependency] = _VISITING
                stack.append((dependency, iter(dependencies[dependency])))
                break
            else:
                stack.pop()
                state[node] = _DONE
                order.append(node)

    return order


def order_declarations(nodes: Sequence[NodeT]) -> List[NodeT]:
    """Return ``nodes`` reordered so each one follows everything it depends on.

    Dependencies are resolved by name (case-insensitively, as VHDL
    identifiers are) against the nodes given; naming anything else is an
    :class:`InvalidArgumentError`.
    """
    index_by_name: Dict[str, int] = {}
    for index, node in enumerate(nodes):
        key = node.name.lower()
        if key in index_by_name:
            raise DuplicateNameError(f"Two declarations share the name {node.name!r}")
        index_by_name[key] = index

    dependencies: List[List[int]] = []
    for node in nodes:
        resolved: List[int] = []
        for name in node.depends_on:
            index = index_by_name.get(name.lower())
            if index is None:
                raise InvalidArgumentError(
                    f"Declaration {node.name!r} depends on {name!r}, which is not declared in the module"
                )
            resolved.append(index)
        dependencies.append(resolved)

    order = topological_order(dependencies, [node.name for node in nodes])
    logger.debug("Ordered %d declarations: %s", len(order), ", ".join(nodes[i].name for i in order))
    return [nodes[index] for index in order]


__all__ = ["DependencyNode", "order_declarations", "topological_order"]
