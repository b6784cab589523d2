"""
key_rotator/handlers/vault.py — Store a new key in HashiCorp Vault using hvac.

Authentication: AppRole (role_id + secret_id from environment variables),
falling back to VAULT_TOKEN for local dev.
Secret engine: KV v2 at mount point "secret". Every write is a new
version, so the previous key remains readable until it is pruned.
"""
import logging
import os
from typing import Any

import hvac
from hvac.exceptions import VaultError

from key_rotator.errors import KeyHandlerError
from key_rotator.models import AccessKey

log = logging.getLogger(__name__)

MOUNT_POINT = "secret"


class VaultHandler:
    """
    Vault KV v2 key handler.

    Authenticates via AppRole using:
      VAULT_ADDR, VAULT_ROLE_ID_ROTATION_AGENT, VAULT_SECRET_ID_ROTATION_AGENT
    """

    def __init__(
        self,
        path: str,
        mount_point: str = MOUNT_POINT,
        client: Any = None,
    ) -> None:
        self.path = path
        self.mount_point = mount_point
        self.vault_addr = os.environ.get("VAULT_ADDR", "http://localhost:8200")
        self.role_id = os.environ.get("VAULT_ROLE_ID_ROTATION_AGENT")
        self.secret_id = os.environ.get("VAULT_SECRET_ID_ROTATION_AGENT")
        self._client = client

    def _get_client(self) -> "hvac.Client":
        """Return an authenticated Vault client, re-authenticating if needed."""
        if self._client is None or not self._client.is_authenticated():
            client = hvac.Client(url=self.vault_addr)
            if self.role_id and self.secret_id:
                client.auth.approle.login(
                    role_id=self.role_id,
                    secret_id=self.secret_id,
                )
            else:
                token = os.environ.get("VAULT_TOKEN")
                if not token:
                    raise KeyHandlerError(
                        "Vault credentials missing: set VAULT_ROLE_ID_ROTATION_AGENT and "
                        "VAULT_SECRET_ID_ROTATION_AGENT, or VAULT_TOKEN"
                    )
                client.token = token
            self._client = client
        return self._client

    def __call__(self, key: AccessKey) -> None:
        client = self._get_client()
        try:
            client.secrets.kv.v2.create_or_update_secret(
                path=self.path,
                secret={**key.as_credentials(), "user_name": key.user_name},
                mount_point=self.mount_point,
            )
        except VaultError as e:
            raise KeyHandlerError(f"Failed to write {self.mount_point}/{self.path}: {e}") from e
        log.info(f"  [OK] Stored key {key.key_id} at {self.mount_point}/{self.path}")
