"""Twilio voice webhook endpoints."""
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import Response
from starlette.datastructures import FormData

from app.core.config import settings
from app.core.dependencies import get_session_registry, get_turn_controller
from app.services.call_session.controller import TurnController
from app.services.call_session.registry import CallSessionRegistry
from app.services.speech.twiml import ProtocolDocument, render_document

router = APIRouter()
logger = logging.getLogger(__name__)

TERMINAL_CALL_STATUSES = {"completed", "failed", "busy", "no-answer", "canceled"}


def get_base_url(request: Request) -> str:
    """
    Get the base URL for constructing absolute URLs.

    Uses BASE_URL environment variable if set, otherwise constructs from request.
    """
    if settings.base_url:
        return settings.base_url.rstrip("/")
    return str(request.base_url).rstrip("/")


def twiml_response(twiml: str) -> Response:
    return Response(content=twiml, media_type="application/xml")


def get_caller_utterance(form: FormData) -> Optional[str]:
    """
    Extract what the caller said from a webhook form.

    A present but empty SpeechResult is an (empty) utterance; a missing one
    means no input. Keypad digits count as input when there is no speech.
    """
    if "SpeechResult" in form:
        return str(form["SpeechResult"]).strip()
    digits = str(form.get("Digits") or "").strip()
    if digits:
        return digits
    return None


@router.post("/voice")
async def handle_voice(
    request: Request,
    controller: TurnController = Depends(get_turn_controller),
):
    """
    Handle every voice webhook from Twilio.

    Called once when the call comes in and again after each <Gather>.
    Always answers with TwiML, whatever goes wrong.
    """
    form = await request.form()
    call_sid = str(form.get("CallSid") or "").strip()
    if not call_sid:
        call_sid = str(uuid.uuid4())
        logger.warning(f"[VOICE] Webhook without CallSid, using generated id - CallSid: {call_sid}")

    utterance = get_caller_utterance(form)
    logger.info(
        f"[VOICE] Received webhook - CallSid: {call_sid}, "
        f"SpeechResult length: {len(utterance) if utterance is not None else 'none'}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )
    if utterance:
        logger.debug(
            f"[VOICE] Speech text: '{utterance[:200]}{'...' if len(utterance) > 200 else ''}' - CallSid: {call_sid}"
        )

    action_url = f"{get_base_url(request)}/voice"
    try:
        document = await controller.handle_inbound(call_sid, utterance)
    except Exception as e:
        logger.error(
            f"[VOICE] Error processing webhook - CallSid: {call_sid}, "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )
        document = ProtocolDocument.say_and_hangup(settings.apology_text)

    twiml = render_document(document, action_url)
    logger.info(
        f"[VOICE] Responding - CallSid: {call_sid}, Document: {document.kind.value}, "
        f"TwiML length: {len(twiml)} bytes"
    )
    return twiml_response(twiml)


@router.post("/voice/status")
async def handle_call_status(
    request: Request,
    CallSid: str = Form(...),
    CallStatus: str = Form(...),
    registry: CallSessionRegistry = Depends(get_session_registry),
):
    """
    Handle call status updates from Twilio.

    A finished call's session is dropped from memory.
    """
    logger.info(
        f"[CALL STATUS] Received status update - CallSid: {CallSid}, "
        f"CallStatus: {CallStatus}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    if CallStatus in TERMINAL_CALL_STATUSES:
        registry.discard(CallSid)
    else:
        logger.debug(
            f"[CALL STATUS] No action needed - CallSid: {CallSid}, CallStatus: {CallStatus}"
        )

    # Always OK so Twilio does not retry
    return Response(content="OK", media_type="text/plain")
