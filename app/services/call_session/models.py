"""Call session models."""
import asyncio
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class Speaker(str, Enum):
    """Who produced a turn, named after the chat API roles."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Turn(BaseModel):
    """One utterance in a call's conversation."""

    model_config = ConfigDict(frozen=True)

    speaker: Speaker
    text: str = ""

    def as_message(self) -> Dict[str, str]:
        """Chat completion message for this turn."""
        return {"role": self.speaker.value, "content": self.text}


class CallSession:
    """Conversation state for one ongoing call.

    History is only grown through the session registry; the first turn is
    always the persona instruction.
    """

    def __init__(self, call_id: str, persona_prompt: str):
        self.call_id = call_id
        self._history: List[Turn] = [Turn(speaker=Speaker.SYSTEM, text=persona_prompt)]
        self.last_audio_url: Optional[str] = None
        # Consecutive events without caller input since the caller last spoke
        self.silent_events = 0
        self.created_at = datetime.utcnow()
        self.updated_at = self.created_at
        # Held for a whole turn so events for one call are handled in order
        self.turn_lock = asyncio.Lock()

    @property
    def history(self) -> Tuple[Turn, ...]:
        """Ordered turns, persona instruction first."""
        return tuple(self._history)

    def _append(self, turn: Turn) -> None:
        self._history.append(turn)
        if turn.speaker == Speaker.USER:
            self.silent_events = 0
        self.updated_at = datetime.utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation for the debug endpoint."""
        return {
            "call_id": self.call_id,
            "history": [turn.as_message() for turn in self._history],
            "last_audio_url": self.last_audio_url,
            "silent_events": self.silent_events,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
