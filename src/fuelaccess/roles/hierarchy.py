"""Role hierarchy tree for display."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Sequence

from .models import Role


@dataclass
class HierarchyNode:
    role: Role
    level: int = 0
    children: list[HierarchyNode] = field(default_factory=list)

    def walk(self) -> Iterator[HierarchyNode]:
        """Yield this node and its descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


def build_role_hierarchy(roles: Sequence[Role]) -> list[HierarchyNode]:
    """Build a forest of roles rooted at those without a parent.

    Children keep input order. A role is placed at most once: a visited set
    shared across the whole forest drops revisits, so cyclic parent links
    cannot recurse forever. Roles that sit only on a cycle have no root
    and are absent from the result.

    Example::

        tree = build_role_hierarchy(roles)
        for node in flatten_hierarchy(tree):
            print("  " * node.level + node.role.name)
    """
    children_of: dict[str, list[Role]] = {}
    for role in roles:
        if role.parent_role_id:
            children_of.setdefault(role.parent_role_id, []).append(role)

    visited: set[str] = set()

    def build_node(role: Role, level: int) -> Optional[HierarchyNode]:
        if role.id in visited:
            return None
        visited.add(role.id)
        node = HierarchyNode(role=role, level=level)
        for child in children_of.get(role.id, ()):
            child_node = build_node(child, level + 1)
            if child_node is not None:
                node.children.append(child_node)
        return node

    forest: list[HierarchyNode] = []
    for root in (r for r in roles if not r.parent_role_id):
        node = build_node(root, 0)
        if node is not None:
            forest.append(node)
    return forest


def flatten_hierarchy(nodes: Iterable[HierarchyNode]) -> list[HierarchyNode]:
    """Depth-first list of every node, for indented rendering."""
    return [n for root in nodes for n in root.walk()]


__all__ = [
    "HierarchyNode",
    "build_role_hierarchy",
    "flatten_hierarchy",
]
