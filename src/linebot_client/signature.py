"""Webhook signature verification."""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Optional


def validate_signature(channel_secret: str, body: bytes, signature: Optional[str]) -> bool:
    """Return True when ``signature`` is the base64 HMAC-SHA256 of ``body``.

    The raw request body must be used as received; re-serialized JSON will
    not match.
    """
    received = (signature or "").strip()
    if not channel_secret or not received:
        return False

    digest = hmac.new(channel_secret.encode("utf-8"), body, hashlib.sha256).digest()
    return hmac.compare_digest(base64.b64encode(digest).decode("ascii"), received)
