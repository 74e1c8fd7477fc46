"""Shared test fixtures and configuration."""
import os
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("BASE_URL", "https://voice.example.com")
os.environ.setdefault("RESTAURANT_NAME", "Test Restaurant")

from app.main import app
from app.core.dependencies import get_audio_store, get_session_registry, get_turn_controller
from app.services.agent.reply import ReplyGenerator
from app.services.audio.store import AudioArtifactStore
from app.services.call_session.controller import TurnController
from app.services.call_session.registry import CallSessionRegistry
from app.services.speech.tts import TextToSpeechService, VoiceProfile


TEST_BASE_URL = "https://voice.example.com"
TEST_PERSONA = "Sei l'assistente di prova del ristorante."
TEST_GREETING = "Buongiorno, come posso aiutarla?"
TEST_FALLBACK = "Mi dispiace, non ho compreso. Puo' ripetere?"
TEST_GOODBYE = "Non ho ricevuto risposta. Arrivederci."
TEST_APOLOGY = "Si e' verificato un errore. Riprovare piu' tardi."
FAKE_MP3 = b"ID3\x03\x00\x00\x00fake-mp3-frames"


@pytest.fixture
def registry():
    """Fresh call session registry."""
    return CallSessionRegistry(persona_prompt=TEST_PERSONA)


@pytest.fixture
def audio_store(tmp_path):
    """Audio store writing into a temporary directory."""
    store = AudioArtifactStore(directory=str(tmp_path / "audio"), base_url=TEST_BASE_URL)
    store.ensure_directory()
    return store


@pytest.fixture
def reply_generator():
    """Reply generator whose backend always answers."""
    generator = Mock(spec=ReplyGenerator)
    generator.generate = AsyncMock(return_value="Certo! Per quante persone?")
    return generator


@pytest.fixture
def tts_service():
    """TTS service returning a fixed clip."""
    service = Mock(spec=TextToSpeechService)
    service.synthesize_speech = AsyncMock(return_value=FAKE_MP3)
    return service


@pytest.fixture
def controller(registry, reply_generator, tts_service, audio_store):
    """Turn controller wired to fakes."""
    return TurnController(
        registry=registry,
        reply_generator=reply_generator,
        tts_service=tts_service,
        audio_store=audio_store,
        greeting_text=TEST_GREETING,
        fallback_reply_text=TEST_FALLBACK,
        silence_goodbye_text=TEST_GOODBYE,
        max_silent_events=2,
        apology_text=TEST_APOLOGY,
    )


@pytest.fixture
def test_client(controller, registry, audio_store):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_turn_controller] = lambda: controller
    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_audio_store] = lambda: audio_store

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()


@pytest.fixture
def mock_openai():
    """Mock OpenAI API client."""
    mock_client = Mock()
    mock_completion = Mock()
    mock_completion.choices = [Mock(message=Mock(content="Siamo aperti dalle 12 alle 15."))]
    mock_client.chat.completions.create = AsyncMock(return_value=mock_completion)
    mock_client.audio.speech.create = AsyncMock(return_value=Mock(content=FAKE_MP3))
    return mock_client


@pytest.fixture
def voice_profile():
    return VoiceProfile(model="gpt-4o-mini-tts", voice="nova", response_format="mp3")


# Pytest configuration
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test"
    )
