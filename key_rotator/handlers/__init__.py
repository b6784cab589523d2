"""
key_rotator/handlers/__init__.py — New-key handlers.

A handler is any callable that takes the freshly created AccessKey and
delivers it somewhere. It signals failure by raising (or returning False),
in which case the rotator deletes the new key and leaves the old ones alone.

Handlers here:
  - AWSProfileHandler:      writes the key into a local AWS CLI profile
  - SecretsManagerHandler:  stores the key in AWS Secrets Manager
  - VaultHandler:           stores the key in HashiCorp Vault KV v2
  - ServiceReloadHandler:   asks running services to reload their credentials
"""
import logging
from collections.abc import Callable

from key_rotator.errors import KeyHandlerError
from key_rotator.models import AccessKey

log = logging.getLogger(__name__)


def chain_handlers(*handlers: Callable[[AccessKey], bool | None]) -> Callable[[AccessKey], None]:
    """Combine handlers into one that runs them in order and stops at the first failure."""

    def handle(key: AccessKey) -> None:
        for handler in handlers:
            name = getattr(handler, "__name__", handler.__class__.__name__)
            log.info(f"Running key handler: {name}")
            if handler(key) is False:
                raise KeyHandlerError(f"Key handler {name} rejected key {key.key_id}")

    return handle
