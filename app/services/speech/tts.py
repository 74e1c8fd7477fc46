"""Text-to-speech service."""
import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel

from app.core.config import settings
from app.services.errors import SynthesisError

logger = logging.getLogger(__name__)


class VoiceProfile(BaseModel):
    """Fixed voice used for every call."""

    model: str
    voice: str
    response_format: str = "mp3"

    @classmethod
    def from_settings(cls) -> "VoiceProfile":
        return cls(
            model=settings.tts_model,
            voice=settings.tts_voice,
            response_format=settings.tts_response_format,
        )


class TextToSpeechService:
    """Service for converting text to speech."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        voice_profile: Optional[VoiceProfile] = None,
    ):
        self.client = client or AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout_seconds,
            max_retries=0,
        )
        self.voice_profile = voice_profile or VoiceProfile.from_settings()

    async def synthesize_speech(self, text: str, voice_profile: Optional[VoiceProfile] = None) -> bytes:
        """
        Synthesize speech from text using OpenAI TTS.

        Args:
            text: Text to convert to speech
            voice_profile: Overrides the configured voice

        Returns:
            Audio bytes (MP3 format by default)

        Raises:
            SynthesisError: On backend error, timeout or empty audio
        """
        profile = voice_profile or self.voice_profile
        try:
            response = await self.client.audio.speech.create(
                model=profile.model,
                voice=profile.voice,
                input=text,
                response_format=profile.response_format,
            )
        except OpenAIError as e:
            raise SynthesisError(f"TTS synthesis failed: {type(e).__name__}: {str(e)}") from e

        audio = response.content
        if not audio:
            raise SynthesisError("TTS synthesis returned no audio")

        logger.debug(f"[TTS] Synthesized {len(audio)} bytes - Voice: {profile.voice}")
        return audio
