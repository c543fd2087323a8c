"""Tests for SMS auto-reply rules."""

import pytest

from callrelay.relay.sms_rules import (
    DEFAULT_RULES,
    FAREWELL_REPLY,
    GREETING_REPLY,
    HELP_REPLY,
    ReplyRule,
    contains_any,
    generate_sms_reply,
)


@pytest.mark.parametrize("body", ["hello", "Hi there", "HELLO, help me", "this is it"])
def test_greeting_rule(body: str) -> None:
    assert generate_sms_reply(body) == GREETING_REPLY


def test_help_is_case_insensitive() -> None:
    assert generate_sms_reply("HELP please") == HELP_REPLY


def test_bye_matches_as_substring() -> None:
    assert generate_sms_reply("goodbye friend") == FAREWELL_REPLY


def test_greeting_wins_over_farewell() -> None:
    assert generate_sms_reply("hi and bye") == GREETING_REPLY


def test_echo_fallback_preserves_original_text() -> None:
    assert generate_sms_reply("xyz123") == 'Thank you for your message. I received: "xyz123"'
    assert generate_sms_reply("Order 42") == 'Thank you for your message. I received: "Order 42"'


def test_empty_body_echoes() -> None:
    assert generate_sms_reply("") == 'Thank you for your message. I received: ""'


def test_rule_order_is_greeting_help_farewell() -> None:
    assert [rule.name for rule in DEFAULT_RULES] == ["greeting", "help", "farewell"]


def test_custom_rules_first_match_wins() -> None:
    rules = (
        ReplyRule("stop", contains_any("stop"), "Unsubscribed."),
        ReplyRule("catch-all", lambda text: True, "Noted."),
    )

    assert generate_sms_reply("STOP now", rules) == "Unsubscribed."
    assert generate_sms_reply("anything", rules) == "Noted."
