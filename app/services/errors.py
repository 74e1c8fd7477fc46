"""Errors raised by the call-handling services.

Gateway and storage errors are caught by the turn controller and turned into
spoken fallbacks; none of them is ever reported to Twilio directly.
"""
from typing import Optional


class VoiceAgentError(Exception):
    """Base class for voice agent errors."""

    default_detail: str = "Voice agent error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class UnknownSessionError(VoiceAgentError):
    """A turn was appended to a call that was never registered."""

    default_detail = "Unknown call session"

    def __init__(self, call_id: str):
        super().__init__(f"Unknown call session: {call_id}")
        self.call_id = call_id


class GenerationError(VoiceAgentError):
    """The language model did not produce a reply."""

    default_detail = "Reply generation failed"


class SynthesisError(VoiceAgentError):
    """Text-to-speech did not produce audio."""

    default_detail = "Speech synthesis failed"


class StorageError(VoiceAgentError):
    """A synthesized clip could not be written."""

    default_detail = "Audio artifact could not be stored"
