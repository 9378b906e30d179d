"""Ancestor provider protocol and an in-memory content tree."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .codec import parse_flag
from .exceptions import ConfigurationError, UnknownNode
from .nodes import NodeRef

AncestorProvider = Callable[[int], Sequence["NodeRef | None"]]


@dataclass
class MemoryTree:
    """Content tree held in memory, usable as an ancestor provider."""

    nodes: dict[int, NodeRef] = field(default_factory=dict)

    def add(
        self,
        node_id: int,
        *,
        parent: int | None = None,
        template: str = "basic-page",
        hidden: bool = False,
        unpublished: bool = False,
    ) -> NodeRef:
        node = NodeRef(
            id=node_id,
            template=template,
            hidden=hidden,
            unpublished=unpublished,
            parent_id=parent,
        )
        self.nodes[node_id] = node
        return node

    def get(self, node_id: int) -> NodeRef:
        try:
            return self.nodes[node_id]
        except KeyError as exc:
            raise UnknownNode(node_id) from exc

    def ancestors(self, node_id: int) -> list[NodeRef | None]:
        """Return the ancestor chain of ``node_id``, root first.

        Parents that are referenced but missing from the tree show up as
        ``None`` so callers can skip them.
        """
        chain: list[NodeRef | None] = []
        seen = {node_id}
        parent_id = self.get(node_id).parent_id
        while parent_id is not None and parent_id not in seen:
            seen.add(parent_id)
            parent = self.nodes.get(parent_id)
            chain.append(parent)
            if parent is None:
                break
            parent_id = parent.parent_id
        chain.reverse()
        return chain

    def __call__(self, node_id: int) -> list[NodeRef | None]:
        return self.ancestors(node_id)

    def __iter__(self) -> Iterator[NodeRef]:
        return iter(self.nodes.values())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MemoryTree":
        """Build a tree from ``{"nodes": {"<id>": {"parent": ..., ...}}}``."""
        raw_nodes = data.get("nodes")
        if not isinstance(raw_nodes, Mapping):
            raise ConfigurationError("Tree document needs a 'nodes' mapping")
        tree = cls()
        for key, raw in raw_nodes.items():
            try:
                node_id = int(key)
                parent = raw.get("parent")
                tree.add(
                    node_id,
                    parent=int(parent) if parent is not None else None,
                    template=str(raw.get("template", "basic-page")),
                    hidden=parse_flag(raw.get("hidden"), "hidden"),
                    unpublished=parse_flag(raw.get("unpublished"), "unpublished"),
                )
            except (AttributeError, TypeError, ValueError) as exc:
                raise ConfigurationError(f"Invalid tree node {key!r}") from exc
        return tree


__all__ = ["AncestorProvider", "MemoryTree"]
