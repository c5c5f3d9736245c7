"""Inbound webhook stub used to demonstrate asynchronous notifications."""
from typing import Any

from openbank.logging import get_logger
from openbank.schemas import WebhookAck
from openbank import metrics

logger = get_logger(__name__)

WEBHOOK_CODE = "TRANSACTIONS_READY"


def record_webhook(payload: Any) -> WebhookAck:
    """
    Log a TRANSACTIONS_READY notification and acknowledge it.

    The payload is accepted as-is and has no business effect; only its
    top-level keys are logged.
    """
    keys = sorted(payload) if isinstance(payload, dict) else []

    metrics.record_webhook(WEBHOOK_CODE)
    logger.info("webhook_received", webhook_code=WEBHOOK_CODE, payload_keys=keys)

    return WebhookAck()
