import logging

import httpx

from safelinks import config

logger = logging.getLogger("safelinks.notify")


def report_filed(code: str, short_url: str, reason: str, webhook_url: str | None = None) -> None:
    """Tell operators about a new report. Runs after the response; never raises."""
    webhook_url = webhook_url or config.REPORT_WEBHOOK_URL
    if not webhook_url:
        logger.info("No report webhook configured, skipping notification for %s", code)
        return

    payload = {
        "event": "report_filed",
        "code": code,
        "short_url": short_url,
        "reason": reason,
    }
    try:
        response = httpx.post(webhook_url, json=payload, timeout=config.NOTIFY_TIMEOUT)
        response.raise_for_status()
    except httpx.HTTPError:
        logger.exception("Failed to notify operators about report on %s", code)
    else:
        logger.info("Operators notified about report on %s", code)
