"""
Shared pytest fixtures for key rotation tests.
"""

import pytest

from key_rotator.backends.memory_backend import InMemoryIAMBackend
from key_rotator.models import AccessKey

USER = "TestUser"


class RecordingBackend(InMemoryIAMBackend):
    """In-memory IAM backend that records calls and can be told to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, ...]] = []
        # operation name → exception to raise
        self.failures: dict[str, Exception] = {}

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.failures:
            raise self.failures[operation]

    def list_keys(self, user_name):
        self.calls.append(("list", user_name))
        self._maybe_fail("list")
        return super().list_keys(user_name)

    def create_key(self, user_name):
        self.calls.append(("create", user_name))
        self._maybe_fail("create")
        return super().create_key(user_name)

    def delete_key(self, user_name, key_id):
        self.calls.append(("delete", user_name, key_id))
        self._maybe_fail("delete")
        super().delete_key(user_name, key_id)

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)

    def key_ids(self, user_name: str = USER) -> set[str]:
        return {k.key_id for k in self.list_keys(user_name)}


class RecordingHandler:
    """New-key handler that remembers every key it was given."""

    def __init__(self, error: Exception | None = None, result=None) -> None:
        self.keys: list[AccessKey] = []
        self.error = error
        self.result = result

    def __call__(self, key: AccessKey):
        self.keys.append(key)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def user() -> str:
    return USER


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the rotator reads."""
    for name in (
        "KEY_ROTATOR_USER",
        "AWS_REGION",
        "AWS_PROFILE",
        "KEY_ROTATOR_AUDIT_LOG",
        "SLACK_WEBHOOK_URL",
        "KEY_ROTATOR_RELOAD_URLS",
        "KEY_ROTATOR_SECRET_ID",
        "KEY_ROTATOR_VAULT_PATH",
        "VAULT_ADDR",
        "VAULT_ROLE_ID_ROTATION_AGENT",
        "VAULT_SECRET_ID_ROTATION_AGENT",
        "VAULT_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
