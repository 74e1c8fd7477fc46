"""Turn controller: drives one call from webhook to webhook."""
import logging
from typing import Optional

from app.core.config import settings
from app.services.agent.reply import ReplyGenerator
from app.services.audio.store import AudioArtifactStore
from app.services.call_session.models import CallSession, Speaker, Turn
from app.services.call_session.registry import CallSessionRegistry
from app.services.errors import GenerationError, StorageError, SynthesisError, UnknownSessionError
from app.services.speech.tts import TextToSpeechService
from app.services.speech.twiml import ProtocolDocument

logger = logging.getLogger(__name__)


class TurnController:
    """Orchestrates one conversational turn per inbound voice event.

    Holds no state of its own between events; everything about a call lives
    in the session registry.
    """

    def __init__(
        self,
        registry: CallSessionRegistry,
        reply_generator: ReplyGenerator,
        tts_service: TextToSpeechService,
        audio_store: AudioArtifactStore,
        greeting_text: Optional[str] = None,
        fallback_reply_text: Optional[str] = None,
        apology_text: Optional[str] = None,
        silence_goodbye_text: Optional[str] = None,
        max_silent_events: Optional[int] = None,
    ):
        self.registry = registry
        self.reply_generator = reply_generator
        self.tts_service = tts_service
        self.audio_store = audio_store
        self.greeting_text = greeting_text or settings.greeting_text
        self.fallback_reply_text = fallback_reply_text or settings.fallback_reply_text
        self.apology_text = apology_text or settings.apology_text
        self.silence_goodbye_text = silence_goodbye_text or settings.silence_goodbye_text
        self.max_silent_events = (
            settings.max_silent_events if max_silent_events is None else max_silent_events
        )

    async def handle_inbound(
        self, call_id: str, caller_utterance: Optional[str] = None
    ) -> ProtocolDocument:
        """
        Process one voice webhook for a call.

        Args:
            call_id: Twilio call SID
            caller_utterance: Recognized speech, None when Twilio sent none.
                An empty string is recorded as a (silent) caller turn.

        Returns:
            Document that either plays the reply and gathers again, or
            hangs up with a spoken apology or goodbye
        """
        session, created = self.registry.get_or_create_with_status(call_id)

        async with session.turn_lock:
            try:
                if caller_utterance is None and created:
                    logger.info(f"[TURN] Greeting caller - CallSid: {call_id}")
                    return await self._speak(session, self.greeting_text)

                if caller_utterance is None:
                    silent_events = self.registry.record_silence(call_id)
                    if silent_events > self.max_silent_events:
                        logger.info(
                            f"[TURN] No input for {silent_events} events, hanging up - CallSid: {call_id}"
                        )
                        return ProtocolDocument.say_and_hangup(self.silence_goodbye_text)
                    logger.info(f"[TURN] No speech received ({silent_events}) - CallSid: {call_id}")
                else:
                    self.registry.append(call_id, Turn(speaker=Speaker.USER, text=caller_utterance))

                reply_text = await self._generate_reply(session)
                return await self._speak(session, reply_text)
            except UnknownSessionError:
                # Session discarded mid-turn, e.g. by a call status callback
                logger.warning(f"[TURN] Session ended during turn - CallSid: {call_id}")
                return ProtocolDocument.say_and_hangup(self.apology_text)

    async def _generate_reply(self, session: CallSession) -> str:
        try:
            reply_text = await self.reply_generator.generate(session.history)
        except GenerationError as e:
            # The fallback is not recorded: history only holds replies the model produced
            logger.warning(
                f"[TURN] Reply generation failed, using fallback - CallSid: {session.call_id}, "
                f"Error: {e.detail}"
            )
            return self.fallback_reply_text

        self.registry.append(session.call_id, Turn(speaker=Speaker.ASSISTANT, text=reply_text))
        return reply_text

    async def _speak(self, session: CallSession, text: str) -> ProtocolDocument:
        try:
            audio = await self.tts_service.synthesize_speech(text)
            artifact = await self.audio_store.store(audio)
        except (SynthesisError, StorageError) as e:
            logger.error(
                f"[TURN] Could not produce audio, ending call - CallSid: {session.call_id}, "
                f"Error: {type(e).__name__}: {e.detail}"
            )
            return ProtocolDocument.say_and_hangup(self.apology_text)

        self.registry.set_last_audio(session.call_id, artifact.public_url)
        logger.info(
            f"[TURN] Reply ready - CallSid: {session.call_id}, Artifact: {artifact.id}, "
            f"History length: {len(session.history)}"
        )
        return ProtocolDocument.play_and_gather(artifact.public_url)
