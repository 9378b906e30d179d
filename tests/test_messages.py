import pytest

from pageguard import GlobalConfig, LocalizedText, ProtectionRule
from pageguard.messages import resolve_label, resolve_message


def test_locale_falls_back_to_site_locale_text():
    rules = {5: ProtectionRule(message_override=LocalizedText("", {"3": ""}))}
    config = GlobalConfig(message=LocalizedText("Please log in", {"3": "Bitte einloggen"}))
    assert resolve_message(5, "message", "3", rules, config) == "Bitte einloggen"


def test_node_locale_override_wins():
    rules = {5: ProtectionRule(message_override=LocalizedText("Members only", {"3": "Nur Mitglieder"}))}
    config = GlobalConfig(message=LocalizedText("Please log in", {"3": "Bitte einloggen"}))
    assert resolve_message(5, "message", "3", rules, config) == "Nur Mitglieder"


def test_node_default_used_before_site_default():
    rules = {5: ProtectionRule(message_override=LocalizedText("Members only"))}
    config = GlobalConfig(message=LocalizedText("Please log in"))
    assert resolve_message(5, "message", "3", rules, config) == "Members only"
    assert resolve_message(5, "message", "", rules, config) == "Members only"


def test_site_default_is_last_resort():
    config = GlobalConfig(message=LocalizedText("Please log in"))
    assert resolve_message(5, "message", "3", {}, config) == "Please log in"
    assert resolve_message(None, "message", "", {}, config) == "Please log in"


def test_default_locale_skips_translations():
    rules = {5: ProtectionRule(message_override=LocalizedText("", {"3": "Nur Mitglieder"}))}
    config = GlobalConfig(message=LocalizedText("Please log in", {"3": "Bitte einloggen"}))
    assert resolve_message(5, "message", "", rules, config) == "Please log in"


def test_prohibited_message_chain():
    rules = {
        5: ProtectionRule(
            message_override=LocalizedText("ignored"),
            prohibited_message=LocalizedText("Editors only", {"3": ""}),
        )
    }
    config = GlobalConfig(prohibited_message=LocalizedText("No access", {"3": "Kein Zugriff"}))
    assert resolve_message(5, "prohibited_message", "3", rules, config) == "Kein Zugriff"
    assert resolve_message(5, "prohibited_message", "", rules, config) == "Editors only"


def test_line_breaks_are_returned_raw():
    rules = {5: ProtectionRule(message_override=LocalizedText("Line one\nLine two"))}
    assert resolve_message(5, "message", "", rules, GlobalConfig()) == "Line one\nLine two"


def test_unknown_field_rejected():
    with pytest.raises(ValueError):
        resolve_message(5, "title", "", {}, GlobalConfig())


def test_login_labels_fall_back_to_default_text():
    config = GlobalConfig(username_placeholder=LocalizedText("Username", {"3": "Benutzername"}))
    assert resolve_label("username_placeholder", "3", config) == "Benutzername"
    assert resolve_label("password_placeholder", "3", config) == "Password"
    assert resolve_label("login_button_text", "", config) == "Login"
