"""
Keyword rules for SMS auto-replies.

Rules are evaluated in order against the lower-cased message body; the
first rule whose predicate matches supplies the reply. Matching is plain
substring containment, so "this" matches the "hi" greeting rule.
"""

from dataclasses import dataclass
from typing import Callable

GREETING_REPLY = "Hello! How can I help you today?"
HELP_REPLY = "I can help you with calls and messages. What do you need?"
FAREWELL_REPLY = "Goodbye! Have a great day!"


@dataclass(frozen=True)
class ReplyRule:
    """A named (predicate, reply) pair."""

    name: str
    matches: Callable[[str], bool]
    reply: str


def contains_any(*keywords: str) -> Callable[[str], bool]:
    def _predicate(text: str) -> bool:
        return any(keyword in text for keyword in keywords)

    return _predicate


DEFAULT_RULES: tuple[ReplyRule, ...] = (
    ReplyRule("greeting", contains_any("hello", "hi"), GREETING_REPLY),
    ReplyRule("help", contains_any("help"), HELP_REPLY),
    ReplyRule("farewell", contains_any("bye"), FAREWELL_REPLY),
)


def echo_reply(message: str) -> str:
    return f'Thank you for your message. I received: "{message}"'


def generate_sms_reply(message: str, rules: tuple[ReplyRule, ...] = DEFAULT_RULES) -> str:
    """Pick the auto-reply for an inbound SMS body.

    Falls back to echoing the original (not lower-cased) text when no rule
    matches.
    """
    lowered = message.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.reply
    return echo_reply(message)
