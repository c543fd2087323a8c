"""
TwiML document builders.

Minimal builders for the verbs the relay emits: <Say> and <Play> for voice,
<Message> for messaging. Text and attribute values are XML-escaped.
"""

TWIML_MEDIA_TYPE = "text/xml"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


def xml_escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _element(tag: str, text: str, attrs: dict[str, str] | None = None) -> str:
    rendered = "".join(
        f' {key}="{xml_escape(value)}"' for key, value in (attrs or {}).items()
    )
    return f"<{tag}{rendered}>{xml_escape(text)}</{tag}>"


class _TwimlResponse:
    def __init__(self) -> None:
        self._verbs: list[str] = []

    def to_xml(self) -> str:
        return f"{XML_DECLARATION}<Response>{''.join(self._verbs)}</Response>"

    def __str__(self) -> str:
        return self.to_xml()


class VoiceResponse(_TwimlResponse):
    """TwiML for voice calls."""

    def say(self, text: str, voice: str | None = None, language: str | None = None) -> "VoiceResponse":
        attrs: dict[str, str] = {}
        if voice:
            attrs["voice"] = voice
        if language:
            attrs["language"] = language
        self._verbs.append(_element("Say", text, attrs))
        return self

    def play(self, url: str) -> "VoiceResponse":
        self._verbs.append(_element("Play", url))
        return self


class MessagingResponse(_TwimlResponse):
    """TwiML for inbound messages."""

    def message(self, body: str) -> "MessagingResponse":
        self._verbs.append(_element("Message", body))
        return self
