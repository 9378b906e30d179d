import pytest

from pageguard import ConfigurationError, LocalizedText, ProtectionRule
from pageguard.codec import (
    config_from_document,
    rule_to_record,
    snapshot_from_document,
    snapshot_to_document,
)

STORED = {
    "protectHidden": 1,
    "protectChildrenOfHidden": 0,
    "protectUnpublished": "1",
    "protectChildrenOfUnpublished": False,
    "message": "Please log in",
    "message__1012": "Bitte einloggen",
    "prohibited_message": "No access",
    "usernamePlaceholder": "Username",
    "usernamePlaceholder__1012": "Benutzername",
    "logincss": "button { color: red; }",
    "locales": [1012],
    "protectedPages": {
        "5": {
            "children": "1",
            "roles": ["editor", "author"],
            "message_override": "Members only",
            "message_override__1012": "Nur Mitglieder",
            "prohibited_message": "Editors only",
            "prohibited_message__1012": "",
        },
        "9": {"children": None, "roles": None},
    },
}


def test_document_parses_into_typed_snapshot():
    snapshot = snapshot_from_document(STORED)
    config = snapshot.config
    assert config.protect_hidden
    assert not config.protect_children_of_hidden
    assert config.protect_unpublished
    assert config.message == LocalizedText("Please log in", {"1012": "Bitte einloggen"})
    assert config.username_placeholder.get("1012") == "Benutzername"
    assert config.login_button_text.default == "Login"
    assert config.locales == ("1012",)

    rule = snapshot.rules[5]
    assert rule.protect_children
    assert rule.roles == frozenset({"editor", "author"})
    assert rule.message_override.get("1012") == "Nur Mitglieder"
    assert rule.prohibited_message == LocalizedText("Editors only", {"1012": ""})
    assert snapshot.rules[9] == ProtectionRule()


def test_document_keeps_flat_locale_keys():
    document = snapshot_to_document(snapshot_from_document(STORED))
    assert document["message__1012"] == "Bitte einloggen"
    page = document["protectedPages"]["5"]
    assert page["message_override__1012"] == "Nur Mitglieder"
    assert page["roles"] == ["author", "editor"]
    assert page["children"] == 1
    assert snapshot_from_document(document).rules == snapshot_from_document(STORED).rules


def test_rule_record_without_roles():
    record = rule_to_record(ProtectionRule(protect_children=True))
    assert record == {
        "children": 1,
        "roles": None,
        "message_override": "",
        "prohibited_message": "",
    }


@pytest.mark.parametrize(
    "document",
    [
        ["not", "a", "mapping"],
        {"protectedPages": ["5"]},
        {"protectedPages": {"home": {}}},
        {"protectedPages": {"5": "yes"}},
        {"protectedPages": {"5": {"roles": "editor"}}},
        {"protectHidden": "maybe"},
        {"message": 42},
        {"_version": "3"},
    ],
)
def test_damaged_documents_raise_configuration_error(document):
    with pytest.raises(ConfigurationError):
        snapshot_from_document(document)


def test_empty_document_gives_defaults():
    config = config_from_document({})
    assert not config.protect_hidden
    assert config.message.default.startswith("This page is protected")
    assert config.prohibited_message.default == "You do not have permission to view this page."
