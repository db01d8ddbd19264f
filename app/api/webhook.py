"""
app/api/webhook.py

Purpose: SMS webhook endpoint

- Receives incoming messages from Twilio (form data)
- Normalizes them into InboundMessage
- Passes control to the flow dispatcher
- Returns the reply as TwiML
"""

from fastapi import APIRouter, Form
from fastapi.responses import Response
from typing import Optional

from app.core.logging import get_logger
from app.flow.dispatcher import dispatch_message
from app.schemas.webhook import parse_twilio_message, twiml_response

logger = get_logger(__name__)
router = APIRouter()


@router.post("/webhook")
async def webhook_handler(
    From: str = Form(...),
    Body: Optional[str] = Form(None),
    MessageSid: Optional[str] = Form(None),
    NumMedia: Optional[int] = Form(None),
    MediaContentType0: Optional[str] = Form(None),
    MediaUrl0: Optional[str] = Form(None),
):
    """
    Twilio SMS webhook.

    Every message gets exactly one TwiML reply. Failures inside the
    dispatcher are turned into a generic apology there.
    """
    logger.info(f"📱 Twilio webhook received from {From}")

    message = parse_twilio_message(
        from_number=From,
        body=Body,
        message_sid=MessageSid,
        num_media=NumMedia,
        media_content_type=MediaContentType0,
        media_url=MediaUrl0,
    )

    reply = await dispatch_message(message)

    return Response(content=twiml_response(reply), media_type="application/xml")


@router.get("/webhook")
async def webhook_verification():
    """
    Webhook verification endpoint (for platforms that require GET verification)
    """
    return {"status": "ok", "message": "Webhook endpoint is active"}
