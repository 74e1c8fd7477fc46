"""Serves synthesized audio clips to Twilio."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from app.core.dependencies import get_audio_store
from app.services.audio.store import AudioArtifactStore

router = APIRouter()
logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "opus": "audio/ogg",
    "aac": "audio/aac",
    "flac": "audio/flac",
}


@router.get("/audio/{artifact_id}")
async def get_audio(
    artifact_id: str,
    store: AudioArtifactStore = Depends(get_audio_store),
):
    """Return a stored clip."""
    path = store.path_for(artifact_id)
    if path is None:
        logger.warning(f"[AUDIO] Unknown artifact requested: {artifact_id}")
        raise HTTPException(status_code=404, detail="Audio not found")

    return FileResponse(path, media_type=MEDIA_TYPES.get(store.extension, "application/octet-stream"))
