import logging
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import requests

from config import WEBHOOK_TIMEOUT_SECONDS
from errors import DeliveryFailed, InvalidDestination
from utils import is_http_url

logger = logging.getLogger(__name__)


def _redact(url: str) -> str:
    # Webhook paths are secrets; only the host is safe to log
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}/..."


def validate_webhook_url(webhook_url: Optional[str]) -> str:
    if not webhook_url or not webhook_url.strip():
        raise InvalidDestination("Please provide a webhook URL")
    if not is_http_url(webhook_url):
        raise InvalidDestination(f"Invalid webhook URL: {webhook_url!r}")
    return webhook_url.strip()


def build_payload(summary_text: str, todo_count: int, date_label: Optional[str] = None) -> Dict[str, Any]:
    """Slack incoming-webhook message body"""
    header = f"*Todo Summary* ({todo_count} pending)"
    if date_label:
        header = f"*Todo Summary for {date_label}* ({todo_count} pending)"
    return {"text": f"{header}\n\n{summary_text}"}


def post_summary(
    webhook_url: str,
    payload: Dict[str, Any],
    session: Optional[requests.Session] = None,
    timeout: float = WEBHOOK_TIMEOUT_SECONDS,
) -> None:
    """
    Deliver one message to the webhook.

    Exactly one POST is made. Any non-2xx answer or transport error raises
    DeliveryFailed; there is no retry.
    """
    url = validate_webhook_url(webhook_url)
    http = session or requests

    logger.info("📨 Posting summary to %s", _redact(url))
    try:
        r = http.post(url, json=payload, timeout=timeout)
    except requests.RequestException as e:
        logger.error("❌ Webhook request failed: %s", e.__class__.__name__)
        raise DeliveryFailed(f"Failed to send summary: {e.__class__.__name__}") from e

    if not 200 <= r.status_code < 300:
        logger.error("❌ Webhook answered %s", r.status_code)
        raise DeliveryFailed(
            f"Failed to send summary: webhook responded with {r.status_code}",
            status_code=r.status_code,
        )

    logger.info("✅ Summary delivered")
