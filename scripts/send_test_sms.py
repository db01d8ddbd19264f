"""
Simulates Twilio posting inbound SMS to a running server.

Usage:
    python scripts/send_test_sms.py "name Alice" --from +12065550100
    python scripts/send_test_sms.py --media-url https://example.com/contact.vcf
"""

import argparse
import asyncio
import sys
from pathlib import Path

import httpx

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import settings


async def send(args):
    """Posts what Twilio would send (form data, not JSON!)"""

    url = f"{args.host}{settings.API_PREFIX}/webhook"

    data = {
        "From": args.sender,
        "Body": args.body,
        "MessageSid": "SM_TEST",
        "NumMedia": "0",
    }
    if args.media_url:
        data.update({
            "NumMedia": "1",
            "MediaContentType0": "text/vcard",
            "MediaUrl0": args.media_url,
        })

    print(f"🧪 Posting to {url}")
    print(f"📤 {data}\n")

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(url, data=data, timeout=10.0)

        print(f"✅ Status: {response.status_code}")
        print(f"📥 Response: {response.text}")

    except httpx.HTTPError as e:
        print(f"❌ Error: {e}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Send a fake inbound SMS to the webhook")
    parser.add_argument("body", nargs="?", default="h", help="message text")
    parser.add_argument("--from", dest="sender", default="+12065550100", help="sender number")
    parser.add_argument("--host", default="http://localhost:8000")
    parser.add_argument("--media-url", help="URL of a vCard to attach")
    asyncio.run(send(parser.parse_args()))
