"""Request-time entry point combining resolution and message lookup."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from .adapters import SettingsStore
from .config import SiteLayout
from .messages import LABELS, MESSAGE, PROHIBITED_MESSAGE, resolve_label, resolve_message
from .nodes import NodeRef
from .policies import Session
from .providers import AncestorProvider
from .resolver import UNPROTECTED, Verdict, ancestor_chain, releases_unpublished, resolve

logger = logging.getLogger(__name__)

GateAction = Literal["render", "login", "prohibited", "not_found"]


@dataclass(frozen=True)
class GateDecision:
    """What the host should do with the request."""

    action: GateAction
    verdict: Verdict = UNPROTECTED
    message: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    login_template: str = ""

    @property
    def allowed(self) -> bool:
        return self.action == "render"


class PageGuard:
    """Decide per request whether a node renders, challenges or refuses.

    Each call loads one settings snapshot and one ancestor chain; nothing is
    cached between calls so rule edits and role changes apply immediately.
    """

    def __init__(
        self,
        store: SettingsStore,
        ancestors: AncestorProvider,
        *,
        site: SiteLayout | None = None,
    ) -> None:
        self.store = store
        self.ancestors = ancestors
        self.site = site or SiteLayout()

    def verdict(self, node: NodeRef, session: Session | None = None) -> Verdict:
        snapshot = self.store.load()
        chain = ancestor_chain(self.ancestors, node.id)
        return resolve(node, chain, snapshot.rules, snapshot.config, session, site=self.site)

    def check(
        self,
        node: NodeRef,
        session: Session | None = None,
        locale: str = "",
    ) -> GateDecision:
        session = session or Session.guest()
        snapshot = self.store.load()
        config = snapshot.config
        unpublished = node.unpublished and not node.is_admin(self.site.admin_template)
        if not snapshot.rules and not config.has_status_protection:
            # Nothing is protected; the tree is not consulted.
            return GateDecision(action="not_found" if unpublished else "render")
        chain = ancestor_chain(self.ancestors, node.id)
        if unpublished:
            if not releases_unpublished(node, chain, snapshot.rules, config):
                return GateDecision(action="not_found")
        verdict = resolve(node, chain, snapshot.rules, config, session, site=self.site)
        if not verdict.protected:
            return GateDecision(action="render", verdict=verdict)
        if session.authenticated:
            if not verdict.prohibited:
                return GateDecision(action="render", verdict=verdict)
            logger.debug("Node %d prohibited for roles %s", node.id, sorted(session.roles))
            message = resolve_message(
                verdict.protecting_id, PROHIBITED_MESSAGE, locale, snapshot.rules, config
            )
            return GateDecision(
                action="prohibited",
                verdict=verdict,
                message=message,
                login_template=config.login_template,
            )
        message = resolve_message(verdict.protecting_id, MESSAGE, locale, snapshot.rules, config)
        return GateDecision(
            action="login",
            verdict=verdict,
            message=message,
            labels={name: resolve_label(name, locale, config) for name in LABELS},
            login_template=config.login_template,
        )


__all__ = ["GateAction", "GateDecision", "PageGuard"]
