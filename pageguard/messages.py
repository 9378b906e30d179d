"""Localized message lookup with per-node and site-wide fallbacks."""

from __future__ import annotations

from collections.abc import Mapping

from .config import GlobalConfig
from .policies import LocalizedText, ProtectionRule

MESSAGE = "message"
PROHIBITED_MESSAGE = "prohibited_message"
LABELS = ("username_placeholder", "password_placeholder", "login_button_text")


def _node_text(rule: ProtectionRule | None, field: str) -> LocalizedText | None:
    if rule is None:
        return None
    if field == MESSAGE:
        return rule.message_override
    return rule.prohibited_message


def resolve_message(
    protecting_id: int | None,
    field: str,
    locale: str,
    rules: Mapping[int, ProtectionRule],
    config: GlobalConfig,
) -> str:
    """Return the raw text to show for ``field``.

    Lookup order, first non-empty wins: the governing node's override for
    ``locale``, the site default for ``locale``, the node's override for the
    default locale, then the site default. ``locale`` is ``""`` for the
    default locale, which skips the first two steps.
    """
    if field not in (MESSAGE, PROHIBITED_MESSAGE):
        raise ValueError(f"Unknown message field: {field}")
    node_text = _node_text(rules.get(protecting_id) if protecting_id is not None else None, field)
    site_text: LocalizedText = getattr(config, field)
    candidates: list[str] = []
    if locale:
        if node_text is not None:
            candidates.append(node_text.get(locale))
        candidates.append(site_text.get(locale))
    if node_text is not None:
        candidates.append(node_text.default)
    candidates.append(site_text.default)
    for text in candidates:
        if text:
            return text
    return ""


def resolve_label(name: str, locale: str, config: GlobalConfig) -> str:
    if name not in LABELS:
        raise ValueError(f"Unknown login label: {name}")
    text: LocalizedText = getattr(config, name)
    return text.get(locale) or text.default


__all__ = ["MESSAGE", "PROHIBITED_MESSAGE", "LABELS", "resolve_message", "resolve_label"]
