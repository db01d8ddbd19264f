"""
utils/time_utils.py

Purpose: Time and expiry helpers

- Naive UTC timestamps for database columns
- Pending action expiry cutoff
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """
    Current UTC time without tzinfo, matching what the database stores.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def expiry_cutoff(ttl_seconds: int, now: Optional[datetime] = None) -> datetime:
    """
    Returns the creation time before which a pending action is expired.
    """
    return (now or utcnow()) - timedelta(seconds=ttl_seconds)
