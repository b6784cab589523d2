"""
key_rotator/audit.py — Structured audit events for rotation runs.

One JSON object per line. Events never contain secret material; key ids
are recorded in full because IAM and CloudTrail already expose them.
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

ACTOR = "key-rotator"


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_event(action: str, user_name: str, result: str, metadata: dict | None = None) -> dict:
    return {
        "timestamp": utcnow(),
        "action": action,
        "actor": ACTOR,
        "resource": f"iam/users/{user_name}/access-keys",
        "result": result,
        "metadata": metadata or {},
    }


def write_audit_event(event: dict[str, Any], path: Path) -> None:
    """Append a structured JSON audit event to the audit log."""
    if "timestamp" not in event:
        event["timestamp"] = utcnow()

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a") as f:
        f.write(json.dumps(event) + "\n")
    log.debug(f"Audit: {event['action']} ({event['result']})")
