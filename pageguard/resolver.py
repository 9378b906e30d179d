"""Protection resolution for a node and its ancestor chain."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass

from .config import GlobalConfig, SiteLayout
from .exceptions import UnknownNode
from .nodes import NodeRef
from .policies import ProtectionRule, Session
from .providers import AncestorProvider

logger = logging.getLogger(__name__)

DEFAULT_SITE = SiteLayout()


@dataclass(frozen=True)
class Verdict:
    """Outcome of resolving a single request; never cached."""

    protecting_id: int | None = None
    prohibited: bool = False

    @property
    def protected(self) -> bool:
        return self.protecting_id is not None


UNPROTECTED = Verdict()


def ancestor_chain(provider: AncestorProvider, node_id: int) -> list[NodeRef | None]:
    """Ask ``provider`` for the root-first chain, treating unknown nodes as rootless."""
    try:
        return list(provider(node_id))
    except UnknownNode:
        logger.warning("Node %d unknown to ancestor provider; resolving without ancestors", node_id)
        return []


def _candidates(node: NodeRef, ancestors: Sequence[NodeRef | None]) -> Iterator[NodeRef]:
    # Ancestors arrive root first; walk them nearest first so the first
    # governing match is also the closest one.
    yield node
    for ancestor in reversed(ancestors):
        if ancestor is not None:
            yield ancestor


def _hidden_match(candidate: NodeRef, config: GlobalConfig, site: SiteLayout) -> bool:
    return config.protect_hidden and candidate.hidden and candidate.id != site.not_found_id


def governing_node(
    node: NodeRef,
    ancestors: Sequence[NodeRef | None],
    rules: Mapping[int, ProtectionRule],
    config: GlobalConfig,
    *,
    site: SiteLayout = DEFAULT_SITE,
) -> int | None:
    """Return the id of the node whose rule or status protects ``node``."""
    if node.is_admin(site.admin_template):
        return None
    for candidate in _candidates(node, ancestors):
        rule = rules.get(candidate.id)
        hidden = _hidden_match(candidate, config, site)
        if rule is None and not hidden:
            continue
        if candidate.id == node.id:
            return candidate.id
        if rule is not None and rule.protect_children:
            return candidate.id
        if hidden and config.protect_children_of_hidden:
            return candidate.id
    return None


def resolve(
    node: NodeRef,
    ancestors: Sequence[NodeRef | None],
    rules: Mapping[int, ProtectionRule],
    config: GlobalConfig,
    session: Session | None = None,
    *,
    site: SiteLayout = DEFAULT_SITE,
) -> Verdict:
    """Compute the protection verdict for ``node``.

    ``ancestors`` is the root-first chain of the node's parents; ``None``
    entries stand for nodes the tree could not load and are skipped. Admin
    template nodes always resolve unprotected. ``prohibited`` is only set for
    an authenticated ``session`` whose roles miss every role the governing
    rule allows.
    """
    protecting_id = governing_node(node, ancestors, rules, config, site=site)
    if protecting_id is None:
        return UNPROTECTED
    logger.debug("Node %d governed by node %d", node.id, protecting_id)
    session = session or Session()
    rule = rules.get(protecting_id)
    prohibited = session.authenticated and rule is not None and not rule.admits(session.roles)
    return Verdict(protecting_id=protecting_id, prohibited=prohibited)


def releases_unpublished(
    node: NodeRef,
    ancestors: Sequence[NodeRef | None],
    rules: Mapping[int, ProtectionRule],
    config: GlobalConfig,
) -> bool:
    """Whether an unpublished node should be served through the login gate.

    Without this the host treats unpublished pages as missing. Only nodes
    with their own rule are released.
    """
    if not config.protect_unpublished:
        return False
    affected = node.unpublished
    if not affected and config.protect_children_of_unpublished:
        affected = any(parent is not None and parent.unpublished for parent in ancestors)
    return affected and node.id in rules


__all__ = [
    "Verdict",
    "UNPROTECTED",
    "ancestor_chain",
    "governing_node",
    "resolve",
    "releases_unpublished",
]
