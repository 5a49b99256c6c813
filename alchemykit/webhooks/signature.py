"""Inbound webhook helpers: HMAC signature check and event parsing."""

from __future__ import annotations

import hashlib
import hmac
import json

from alchemykit.models import decode_model
from alchemykit.utils.exceptions import DecodeError
from alchemykit.webhooks.models import AddressActivityEvent, WebhookEvent

SIGNATURE_HEADER = "X-Alchemy-Signature"


def compute_signature(body: bytes | str, signing_key: str) -> str:
    if isinstance(body, str):
        body = body.encode("utf-8")
    return hmac.new(signing_key.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_signature(body: bytes | str, signature: str, signing_key: str) -> bool:
    """
    Check ``signature`` (the X-Alchemy-Signature header) against the raw body.

    Pass the body exactly as received; re-serialized JSON will not match.
    """
    if not signature or not signing_key:
        return False
    expected = compute_signature(body, signing_key)
    return hmac.compare_digest(expected, signature.strip().lower())


def parse_webhook_event(body: bytes | str) -> WebhookEvent:
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise DecodeError(f"failed to parse webhook event: {e}") from e
    return decode_model(WebhookEvent, data, "webhook event")


def parse_address_activity_event(event: WebhookEvent) -> AddressActivityEvent:
    return decode_model(AddressActivityEvent, event.event, "address activity event")
