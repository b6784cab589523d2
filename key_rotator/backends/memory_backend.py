"""
key_rotator/backends/memory_backend.py — In-process IAM backend.

This is the LOCAL DEMO backend. It keeps keys in a dict and enforces the
same 2-key cap as AWS IAM, so the rotator's self-heal path behaves the
same way it does against the real service. Nothing is persisted.
"""
import logging
import secrets
import threading
from datetime import datetime, timezone

from key_rotator.backends import MAX_KEYS_PER_USER, IAMBackend
from key_rotator.errors import KeyLimitExceededError, KeyNotFoundError
from key_rotator.models import AccessKey, KeyStatus, KeySummary

log = logging.getLogger(__name__)


def generate_key_id() -> str:
    return "AKIA" + secrets.token_hex(8).upper()


class InMemoryIAMBackend(IAMBackend):
    """Dict-backed IAM backend. Safe to call from the rotator's delete threads."""

    def __init__(self, max_keys: int = MAX_KEYS_PER_USER) -> None:
        self.max_keys = max_keys
        # user → key id → summary
        self._keys: dict[str, dict[str, KeySummary]] = {}
        self._lock = threading.Lock()

    def add_key(self, user_name: str, status: KeyStatus = KeyStatus.ACTIVE) -> KeySummary:
        """Seed a key directly, bypassing the cap (for setting up test scenarios)."""
        summary = KeySummary(
            key_id=generate_key_id(),
            user_name=user_name,
            status=status,
            create_date=datetime.now(timezone.utc),
        )
        with self._lock:
            self._keys.setdefault(user_name, {})[summary.key_id] = summary
        return summary

    def list_keys(self, user_name: str) -> list[KeySummary]:
        with self._lock:
            return list(self._keys.get(user_name, {}).values())

    def create_key(self, user_name: str) -> AccessKey:
        with self._lock:
            user_keys = self._keys.setdefault(user_name, {})
            if len(user_keys) >= self.max_keys:
                raise KeyLimitExceededError(
                    f"Cannot exceed quota for AccessKeysPerUser: {self.max_keys}"
                )
            key = AccessKey(
                key_id=generate_key_id(),
                user_name=user_name,
                secret=secrets.token_urlsafe(30),
            )
            user_keys[key.key_id] = KeySummary(
                key_id=key.key_id,
                user_name=user_name,
                status=key.status,
                create_date=datetime.now(timezone.utc),
            )
        log.debug(f"[memory] created {key.key_id} for {user_name}")
        return key

    def delete_key(self, user_name: str, key_id: str) -> None:
        with self._lock:
            user_keys = self._keys.get(user_name, {})
            if key_id not in user_keys:
                raise KeyNotFoundError(f"The Access Key with id {key_id} cannot be found.")
            del user_keys[key_id]
        log.debug(f"[memory] deleted {key_id} for {user_name}")
