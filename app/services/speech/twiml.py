"""TwiML documents returned to Twilio on every voice webhook."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from app.core.config import settings


class DocumentKind(str, Enum):
    CONTINUE = "continue"
    TERMINATE = "terminate"


class ProtocolDocument(BaseModel):
    """What the call should do next.

    ``continue`` plays ``audio_url`` and listens for the caller again;
    ``terminate`` speaks ``say_text`` and hangs up.
    """

    kind: DocumentKind
    audio_url: Optional[str] = None
    say_text: Optional[str] = None

    @classmethod
    def play_and_gather(cls, audio_url: str) -> "ProtocolDocument":
        return cls(kind=DocumentKind.CONTINUE, audio_url=audio_url)

    @classmethod
    def say_and_hangup(cls, text: str) -> "ProtocolDocument":
        return cls(kind=DocumentKind.TERMINATE, say_text=text)


def escape_xml(text: str) -> str:
    """Escape XML special characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def generate_twiml_play_with_gather(
    audio_url: str,
    action_url: str,
    timeout: Optional[int] = None,
    language: Optional[str] = None,
) -> str:
    """
    Generate TwiML that plays a clip and then gathers the caller's speech.

    If the caller stays silent the call is redirected to ``action_url``
    without a speech result.
    """
    audio = escape_xml(audio_url)
    action = escape_xml(action_url)
    timeout = settings.gather_timeout_seconds if timeout is None else timeout
    language = escape_xml(language or settings.say_language)

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<Response>
    <Play>{audio}</Play>
    <Gather input="speech dtmf" action="{action}" method="POST" timeout="{timeout}" speechTimeout="auto" language="{language}"/>
    <Redirect method="POST">{action}</Redirect>
</Response>"""


def generate_twiml_say_and_hangup(
    text: str,
    language: Optional[str] = None,
    voice: Optional[str] = None,
) -> str:
    """Generate TwiML that speaks ``text`` with Twilio's own voice and ends the call."""
    say = escape_xml(text)
    language = escape_xml(language or settings.say_language)
    voice = escape_xml(voice or settings.say_voice)

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<Response>
    <Say language="{language}" voice="{voice}">{say}</Say>
    <Hangup/>
</Response>"""


def render_document(document: ProtocolDocument, action_url: str) -> str:
    """Serialize a protocol document to TwiML."""
    if document.kind == DocumentKind.CONTINUE and document.audio_url:
        return generate_twiml_play_with_gather(document.audio_url, action_url)
    return generate_twiml_say_and_hangup(document.say_text or settings.apology_text)
