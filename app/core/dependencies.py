"""FastAPI dependencies."""
from functools import lru_cache

from app.core.config import settings
from app.services.agent.reply import ReplyGenerator
from app.services.audio.store import AudioArtifactStore
from app.services.call_session.controller import TurnController
from app.services.call_session.registry import CallSessionRegistry
from app.services.speech.tts import TextToSpeechService


@lru_cache(maxsize=1)
def get_session_registry() -> CallSessionRegistry:
    """Get the process-wide call session registry."""
    return CallSessionRegistry(persona_prompt=settings.persona_prompt)


@lru_cache(maxsize=1)
def get_audio_store() -> AudioArtifactStore:
    """Get audio artifact store instance."""
    return AudioArtifactStore(directory=settings.audio_dir, base_url=settings.public_base_url)


@lru_cache(maxsize=1)
def get_reply_generator() -> ReplyGenerator:
    """Get reply generator instance."""
    return ReplyGenerator()


@lru_cache(maxsize=1)
def get_tts_service() -> TextToSpeechService:
    """Get text-to-speech service instance."""
    return TextToSpeechService()


def get_turn_controller() -> TurnController:
    """Get turn controller wired to the shared services."""
    return TurnController(
        registry=get_session_registry(),
        reply_generator=get_reply_generator(),
        tts_service=get_tts_service(),
        audio_store=get_audio_store(),
    )
