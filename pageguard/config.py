"""Site-wide configuration values threaded through every resolver call."""

from __future__ import annotations

from dataclasses import dataclass, field

from .policies import LocalizedText

DEFAULT_MESSAGE = "This page is protected. You must log in to view it."
DEFAULT_PROHIBITED_MESSAGE = "You do not have permission to view this page."
DEFAULT_USERNAME_PLACEHOLDER = "Username"
DEFAULT_PASSWORD_PLACEHOLDER = "Password"
DEFAULT_LOGIN_BUTTON_TEXT = "Login"

# Config fields that carry localized text, paired with their stored key.
LOCALIZED_FIELDS = {
    "message": "message",
    "prohibited_message": "prohibited_message",
    "username_placeholder": "usernamePlaceholder",
    "password_placeholder": "passwordPlaceholder",
    "login_button_text": "loginButtonText",
}

TOGGLE_FIELDS = {
    "protect_hidden": "protectHidden",
    "protect_children_of_hidden": "protectChildrenOfHidden",
    "protect_unpublished": "protectUnpublished",
    "protect_children_of_unpublished": "protectChildrenOfUnpublished",
}


@dataclass(frozen=True)
class GlobalConfig:
    """Site-wide protection toggles and default texts."""

    protect_hidden: bool = False
    protect_children_of_hidden: bool = False
    protect_unpublished: bool = False
    protect_children_of_unpublished: bool = False
    message: LocalizedText = field(default_factory=lambda: LocalizedText(DEFAULT_MESSAGE))
    prohibited_message: LocalizedText = field(
        default_factory=lambda: LocalizedText(DEFAULT_PROHIBITED_MESSAGE)
    )
    username_placeholder: LocalizedText = field(
        default_factory=lambda: LocalizedText(DEFAULT_USERNAME_PLACEHOLDER)
    )
    password_placeholder: LocalizedText = field(
        default_factory=lambda: LocalizedText(DEFAULT_PASSWORD_PLACEHOLDER)
    )
    login_button_text: LocalizedText = field(
        default_factory=lambda: LocalizedText(DEFAULT_LOGIN_BUTTON_TEXT)
    )
    login_template: str = ""
    locales: tuple[str, ...] = ()

    @property
    def has_status_protection(self) -> bool:
        return self.protect_hidden or self.protect_unpublished


@dataclass(frozen=True)
class SiteLayout:
    """Well-known node ids and templates of the host content tree."""

    root_id: int = 1
    admin_root_id: int = 2
    trash_id: int = 7
    not_found_id: int = 27
    admin_template: str = "admin"


__all__ = [
    "DEFAULT_MESSAGE",
    "DEFAULT_PROHIBITED_MESSAGE",
    "LOCALIZED_FIELDS",
    "TOGGLE_FIELDS",
    "GlobalConfig",
    "SiteLayout",
]
