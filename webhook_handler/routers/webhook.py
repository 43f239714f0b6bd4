"""
Webhook router - authenticates X-Hub-Signature-256 deliveries and triggers the configured script.
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from webhook_handler.config import get_config
from webhook_handler.logging import get_logger
from webhook_handler.state import app_state
from webhook_handler.services.actions import ActionLaunchError
from webhook_handler.services.security import (
    SIGNATURE_HEADER,
    SignatureError,
    extract_signature,
    verify_signature,
)
from webhook_handler.services.stats import stats_collector

logger = get_logger(__name__)

router = APIRouter(tags=["webhook"])

_OUTCOME_BY_STATUS = {
    400: "bad_request",
    401: "unauthorized",
    413: "payload_too_large",
    500: "server_error",
}


async def read_limited_body(request: Request, max_body_size: int) -> bytes:
    """
    Read the request body, stopping as soon as it grows past max_body_size.

    Chunked deliveries carry no Content-Length, so the limit is applied to
    the running total rather than after buffering the whole body.

    Raises:
        HTTPException: 413 if the body is larger than max_body_size
    """
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_body_size:
            raise HTTPException(status_code=413, detail="Request body too large")
    return bytes(body)


async def validate_webhook_request(request: Request) -> bytes:
    """
    Validate the configuration, body size and X-Hub-Signature-256 of a delivery.

    Args:
        request: The incoming FastAPI request

    Returns:
        The raw request body bytes if validation succeeds

    Raises:
        HTTPException: 500 if secret or script is not configured, 413 if body too large,
                       400 if the signature header is missing, 401 if the signature is invalid
    """
    if app_state.settings is None or app_state.launcher is None:
        logger.error("Webhook secret or script not configured")
        raise HTTPException(status_code=500, detail="Internal server error")

    max_body_size = get_config().webhook_max_body_size

    # Check Content-Length header first to reject oversized requests early
    content_length = request.headers.get("content-length")
    if content_length:
        try:
            if int(content_length) > max_body_size:
                raise HTTPException(status_code=413, detail="Request body too large")
        except ValueError:
            pass  # Invalid content-length header, will check actual body size

    signature = extract_signature(request.headers)
    if signature is None:
        raise HTTPException(status_code=400, detail=f"Missing {SIGNATURE_HEADER} header")

    body = await read_limited_body(request, max_body_size)
    request.state.body_size = len(body)

    try:
        verify_signature(app_state.settings.secret, body, signature)
    except SignatureError as e:
        # The failure kind stays in the server log; the caller only sees 401
        logger.warning(f"Signature rejected ({type(e).__name__}): {e}")
        raise HTTPException(status_code=401, detail="Invalid signature")

    return body


@router.get("/", response_class=PlainTextResponse)
async def listen() -> str:
    """Landing text for humans who wander in."""
    return (
        "Urm, hi?\n"
        "How did you get here?\n"
        "This is an api for computers 'n' stuff, not for humans :P"
    )


@router.post(
    "/",
    responses={
        200: {"description": "Signature valid and script launched"},
        400: {"description": "Missing X-Hub-Signature-256 header"},
        401: {"description": "Invalid signature"},
        413: {"description": "Request body too large"},
        500: {"description": "Internal server error (config missing or script could not be launched)"},
    }
)
async def webhook(request: Request) -> dict:
    """
    Receive a signed webhook delivery and trigger the configured script.

    **Headers:**
    - `X-Hub-Signature-256` (required): `sha256=` followed by the hex HMAC-SHA256 of the body

    **Request Body:** JSON or arbitrary text, hashed exactly as received

    **Flow:**
    1. Check configuration and body size
    2. Validate the HMAC signature
    3. Launch the script without waiting for it
    """
    try:
        body = await validate_webhook_request(request)
    except HTTPException as e:
        # Bodies rejected before being fully read count as zero bytes
        await stats_collector.record_delivery(
            _OUTCOME_BY_STATUS[e.status_code],
            incoming_bytes=getattr(request.state, "body_size", 0),
        )
        raise

    try:
        app_state.launcher.launch()
    except ActionLaunchError as e:
        logger.error(f"Could not launch script: {e}")
        await stats_collector.record_delivery("server_error", incoming_bytes=len(body))
        raise HTTPException(status_code=500, detail="Internal server error")

    await stats_collector.record_delivery("triggered", incoming_bytes=len(body))
    return {"status": "triggered"}
