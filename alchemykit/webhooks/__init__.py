"""Webhook management and inbound event helpers."""

from alchemykit.webhooks.client import DASHBOARD_API_URL, WebhookClient
from alchemykit.webhooks.models import (
    AddressActivity,
    AddressActivityEvent,
    CreateWebhookParams,
    NFTWebhookFilter,
    UpdateNFTFiltersParams,
    UpdateWebhookParams,
    Webhook,
    WebhookEvent,
    WebhookNetwork,
    WebhookType,
    WebhookVersion,
)
from alchemykit.webhooks.signature import (
    SIGNATURE_HEADER,
    compute_signature,
    parse_address_activity_event,
    parse_webhook_event,
    verify_signature,
)

__all__ = [
    "DASHBOARD_API_URL",
    "WebhookClient",
    "AddressActivity",
    "AddressActivityEvent",
    "CreateWebhookParams",
    "NFTWebhookFilter",
    "UpdateNFTFiltersParams",
    "UpdateWebhookParams",
    "Webhook",
    "WebhookEvent",
    "WebhookNetwork",
    "WebhookType",
    "WebhookVersion",
    "SIGNATURE_HEADER",
    "compute_signature",
    "parse_address_activity_event",
    "parse_webhook_event",
    "verify_signature",
]
