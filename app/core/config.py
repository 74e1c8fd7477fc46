"""Application configuration."""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PERSONA_PROMPT = """
Sei "Assistente Baffone", l'assistente vocale del Ristorante Al Nuovo Baffone (Via Roma 27, Frosinone).
Parli sempre in italiano, con tono cortese, accogliente e professionale. Le tue risposte sono brevi,
perche' verranno lette al telefono.
Obiettivi: accogliere il cliente, rispondere su orari, menu e servizi, e raccogliere prenotazioni.
Se il cliente vuole prenotare, chiedi nome, numero di persone, data e orario.
Non inventare informazioni; se non sei sicura, proponi di verificare con lo staff.
""".strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenAI
    openai_api_key: str
    openai_timeout_seconds: float = 20.0
    chat_model: str = "gpt-4o-mini"
    chat_temperature: float = 0.2
    chat_max_tokens: int = 250
    tts_model: str = "gpt-4o-mini-tts"
    tts_voice: str = "nova"
    tts_response_format: str = "mp3"

    # Restaurant persona
    restaurant_name: str = "Ristorante Al Nuovo Baffone"
    persona_prompt: str = DEFAULT_PERSONA_PROMPT
    greeting_text: str = (
        "Buongiorno, grazie per aver chiamato il Ristorante Al Nuovo Baffone. "
        "Come posso aiutarla oggi?"
    )
    fallback_reply_text: str = "Mi dispiace, non ho compreso. Puo' ripetere?"
    silence_goodbye_text: str = "Non ho ricevuto risposta. Arrivederci."
    max_silent_events: int = 2
    apology_text: str = "Si e' verificato un errore. Riprovare piu' tardi."

    # Twilio markup
    say_language: str = "it-IT"
    say_voice: str = "Polly.Carla"
    gather_timeout_seconds: int = 5

    # Audio artifacts
    audio_dir: str = "public/audio"

    # Server
    base_url: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    enable_session_debug: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def public_base_url(self) -> str:
        """Externally reachable base address, without trailing slash."""
        if self.base_url:
            return self.base_url.rstrip("/")
        return f"http://localhost:{self.port}"


settings = Settings()
