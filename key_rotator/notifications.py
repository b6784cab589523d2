"""
key_rotator/notifications.py — Slack notifications for rotation outcomes.

In production: set SLACK_WEBHOOK_URL.
Without it the payload is only logged.
"""
import json
import logging

import requests

log = logging.getLogger(__name__)


def build_payload(message: str) -> dict:
    return {
        "text": f"*IAM Key Rotator*: {message}",
        "username": "key-rotator",
        "icon_emoji": ":key:",
    }


def send_slack_notification(message: str, webhook_url: str = "") -> None:
    """Post to Slack; failures are logged and never abort the caller."""
    payload = build_payload(message)

    if webhook_url:
        try:
            requests.post(webhook_url, json=payload, timeout=5).raise_for_status()
        except requests.RequestException as e:
            log.warning(f"Slack notification failed (non-fatal): {e}")
    else:
        log.info(f"[SLACK MOCK] Would send: {json.dumps(payload)}")
