"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import settings
from app.core.dependencies import get_audio_store
from app.core.logging import setup_logging
from app.api import audio, health, sessions
from app.api.webhooks import voice


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    get_audio_store().ensure_directory()
    yield


app = FastAPI(
    title="Assistente Baffone",
    description="AI voice assistant answering phone calls for a restaurant",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(voice.router, tags=["webhooks"])
app.include_router(audio.router, tags=["audio"])
app.include_router(sessions.router, tags=["debug"])


@app.get("/")
async def root():
    """Liveness banner."""
    return {
        "message": f"Assistente {settings.restaurant_name} attivo e pronto a rispondere alle chiamate",
        "version": "0.1.0",
    }
