"""Health check endpoint."""
import logging

from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_audio_store, get_session_registry
from app.services.audio.store import AudioArtifactStore
from app.services.call_session.registry import CallSessionRegistry

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(
    request: Request,
    registry: CallSessionRegistry = Depends(get_session_registry),
    store: AudioArtifactStore = Depends(get_audio_store),
):
    """Report liveness, active calls and whether clips can be served."""
    logger.debug(
        f"[HEALTH] Health check requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    return {
        "status": "healthy",
        "active_calls": len(registry),
        "audio_dir_ready": store.directory.is_dir(),
    }
