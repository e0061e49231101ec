"""Containment tree built from ``parent_id`` back-references."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import networkx as nx
from loguru import logger

from ..model import UNIVERSE_PARENT, MapNode

# Synthetic root node name
ROOT_NODE = "__root__"


def resolve_parents(nodes: Iterable[MapNode]) -> dict[str, str | None]:
    """Map each node id to a usable parent id (or None for roots).

    Dangling parents, self-parents, the legacy ``"Universe"`` parent and links
    that close a cycle are dropped, turning the node into a root.

    Args:
        nodes: Nodes in host order.

    Returns:
        Dictionary mapping node id to parent id, in node order.
    """
    nodes = list(nodes)
    known = {node.id for node in nodes}
    parent_of: dict[str, str | None] = {}

    for node in nodes:
        parent_id = node.parent_id
        if not parent_id or parent_id == UNIVERSE_PARENT:
            parent_of[node.id] = None
        elif parent_id == node.id or parent_id not in known:
            logger.warning("Node {} has dangling parent {}; treating it as a root", node.id, parent_id)
            parent_of[node.id] = None
        else:
            parent_of[node.id] = parent_id

    # Break cycles at the first member encountered
    for node_id in parent_of:
        seen = {node_id}
        current = parent_of[node_id]
        while current is not None:
            if current in seen:
                if current == node_id:
                    logger.warning("Node {} is part of a parent cycle; treating it as a root", node_id)
                    parent_of[node_id] = None
                break
            seen.add(current)
            current = parent_of[current]

    return parent_of


class Hierarchy:
    """Read-only view of the containment tree.

    The tree is a networkx DiGraph rooted at ``ROOT_NODE`` with edges from
    parent to child. Children keep the host's node order, which keeps every
    traversal deterministic.
    """

    def __init__(self, parent_of: dict[str, str | None]):
        self.parent_of = parent_of
        self.tree = nx.DiGraph()
        self.tree.add_node(ROOT_NODE)
        for node_id in parent_of:
            self.tree.add_node(node_id)
        for node_id, parent_id in parent_of.items():
            self.tree.add_edge(parent_id if parent_id is not None else ROOT_NODE, node_id)

    @classmethod
    def from_nodes(cls, nodes: Iterable[MapNode]) -> Hierarchy:
        return cls(resolve_parents(nodes))

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.parent_of

    def parent(self, node_id: str) -> str | None:
        return self.parent_of.get(node_id)

    def children(self, node_id: str) -> list[str]:
        if node_id not in self.tree:
            return []
        return list(self.tree.successors(node_id))

    def roots(self) -> list[str]:
        return self.children(ROOT_NODE)

    def ancestors(self, node_id: str) -> list[str]:
        """Parent chain from the immediate parent up to the root."""
        chain: list[str] = []
        current = self.parent_of.get(node_id)
        while current is not None:
            chain.append(current)
            current = self.parent_of.get(current)
        return chain

    def descendants(self, node_id: str) -> set[str]:
        if node_id not in self.tree:
            return set()
        return nx.descendants(self.tree, node_id)

    def is_ancestor(self, ancestor_id: str, node_id: str) -> bool:
        return ancestor_id in self.ancestors(node_id)

    def depth(self, node_id: str) -> int:
        """Number of ancestors; roots have depth 0."""
        return len(self.ancestors(node_id))

    def post_order(self) -> Iterator[str]:
        """Children before parents, excluding the synthetic root."""
        for node_id in nx.dfs_postorder_nodes(self.tree, ROOT_NODE):
            if node_id != ROOT_NODE:
                yield node_id

    def pre_order(self) -> Iterator[str]:
        """Parents before children, excluding the synthetic root."""
        for node_id in nx.dfs_preorder_nodes(self.tree, ROOT_NODE):
            if node_id != ROOT_NODE:
                yield node_id
