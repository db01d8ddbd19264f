"""
app/schemas/webhook.py

Purpose: SMS webhook payload schemas and parsers

- Validates incoming Twilio messages
- Normalizes them into InboundMessage
- Builds the TwiML reply envelope
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone
from xml.sax.saxutils import escape

from utils.vcard_utils import is_vcard_content_type


class Attachment(BaseModel):
    """
    Metadata of the media attached to an inbound message.
    Only the first attachment is described; `count` says how many there were.
    """
    count: int = Field(..., ge=0, description="Number of attachments (NumMedia)")
    content_type: Optional[str] = Field(None, description="MIME type of the first attachment")
    url: Optional[str] = Field(None, description="Download URL of the first attachment")

    @property
    def is_vcard(self) -> bool:
        """Exactly one attachment, and it is a contact card."""
        return self.count == 1 and bool(self.url) and is_vcard_content_type(self.content_type)


class InboundMessage(BaseModel):
    """
    Normalized message format for internal processing
    """
    sender: str = Field(..., description="Sender phone number in E.164 format")
    body: str = Field("", description="Message text content")
    message_id: Optional[str] = Field(None, description="Unique message identifier")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    attachment: Optional[Attachment] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "sender": "+12065550100",
                "body": "group John, Alice",
                "message_id": "SM1234567890",
            }
        }
    }


def parse_twilio_message(
    from_number: str,
    body: Optional[str] = None,
    message_sid: Optional[str] = None,
    num_media: Optional[int] = None,
    media_content_type: Optional[str] = None,
    media_url: Optional[str] = None,
) -> InboundMessage:
    """
    Parses a Twilio SMS webhook payload

    Twilio format (form data):
    - From: +12065550100
    - Body: message text
    - MessageSid: SM...
    - NumMedia: number of attachments
    - MediaContentType0 / MediaUrl0: first attachment
    """
    attachment = None
    if num_media:
        attachment = Attachment(count=num_media, content_type=media_content_type, url=media_url)

    return InboundMessage(
        sender=from_number.strip(),
        body=body or "",
        message_id=message_sid,
        attachment=attachment,
    )


def twiml_response(message: str) -> str:
    """
    Wraps a reply in a TwiML <Message>. An empty reply sends nothing.
    """
    if not message:
        return "<?xml version=\"1.0\" encoding=\"UTF-8\"?><Response></Response>"

    return (
        "<?xml version=\"1.0\" encoding=\"UTF-8\"?>"
        f"<Response><Message>{escape(message)}</Message></Response>"
    )
