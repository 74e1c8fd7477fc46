"""Debug view of in-memory call sessions."""
from fastapi import APIRouter, Depends, HTTPException

from app.core.config import settings
from app.core.dependencies import get_session_registry
from app.services.call_session.registry import CallSessionRegistry

router = APIRouter()


@router.get("/session/{call_id}")
async def get_session(
    call_id: str,
    registry: CallSessionRegistry = Depends(get_session_registry),
):
    """Return a call's conversation state, or null if the call is unknown."""
    if not settings.enable_session_debug:
        raise HTTPException(status_code=404, detail="Not Found")

    session = registry.get(call_id)
    return session.to_dict() if session else None
