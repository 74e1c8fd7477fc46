"""Process-wide registry of call sessions."""
import logging
import threading
from typing import Dict, Optional, Tuple

from app.services.call_session.models import CallSession, Turn
from app.services.errors import UnknownSessionError

logger = logging.getLogger(__name__)


class CallSessionRegistry:
    """Maps Twilio call identifiers to their conversation state.

    Sessions live until the process exits or the call is discarded. Every
    mutation of the mapping goes through ``lock``, so two first events for the
    same new call can never create two sessions.
    """

    def __init__(self, persona_prompt: str, lock: Optional[threading.Lock] = None):
        self.persona_prompt = persona_prompt
        self._lock = lock or threading.Lock()
        self._sessions: Dict[str, CallSession] = {}

    def get_or_create(self, call_id: str) -> CallSession:
        """Return the session for ``call_id``, creating it on first sight."""
        session, _ = self.get_or_create_with_status(call_id)
        return session

    def get_or_create_with_status(self, call_id: str) -> Tuple[CallSession, bool]:
        """Like ``get_or_create``, also telling whether this call created it.

        Exactly one caller ever sees ``True`` for a given session.
        """
        with self._lock:
            session = self._sessions.get(call_id)
            if session is not None:
                return session, False
            session = CallSession(call_id=call_id, persona_prompt=self.persona_prompt)
            self._sessions[call_id] = session
        logger.info(f"[SESSION REGISTRY] Created session - CallSid: {call_id}")
        return session, True

    def record_silence(self, call_id: str) -> int:
        """Count an event without caller input; returns the current streak."""
        with self._lock:
            session = self._sessions.get(call_id)
            if session is None:
                raise UnknownSessionError(call_id)
            session.silent_events += 1
            return session.silent_events

    def get(self, call_id: str) -> Optional[CallSession]:
        with self._lock:
            return self._sessions.get(call_id)

    def append(self, call_id: str, turn: Turn) -> CallSession:
        """Append a turn to an existing session's history."""
        with self._lock:
            session = self._sessions.get(call_id)
            if session is None:
                raise UnknownSessionError(call_id)
            session._append(turn)
            logger.debug(
                f"[SESSION REGISTRY] Appended {turn.speaker.value} turn "
                f"(history length: {len(session.history)}) - CallSid: {call_id}"
            )
            return session

    def set_last_audio(self, call_id: str, audio_url: str) -> None:
        with self._lock:
            session = self._sessions.get(call_id)
            if session is None:
                raise UnknownSessionError(call_id)
            session.last_audio_url = audio_url

    def discard(self, call_id: str) -> bool:
        """Forget a finished call. Returns False if it was not registered."""
        with self._lock:
            removed = self._sessions.pop(call_id, None) is not None
        if removed:
            logger.info(f"[SESSION REGISTRY] Discarded session - CallSid: {call_id}")
        return removed

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, call_id: str) -> bool:
        with self._lock:
            return call_id in self._sessions
