"""
key_rotator/handlers/secrets_manager.py — Store a new key in AWS Secrets Manager.

The secret value is JSON: {"aws_access_key_id": ..., "aws_secret_access_key": ...}.
put_secret_value moves the AWSCURRENT label to the new version, so readers
pick up the new key and AWSPREVIOUS still holds the old one.
"""
import json
import logging
import os
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from key_rotator.errors import KeyHandlerError
from key_rotator.models import AccessKey

log = logging.getLogger(__name__)


class SecretsManagerHandler:
    """Writes the key as a new AWSCURRENT version, creating the secret on first use."""

    def __init__(
        self,
        secret_id: str,
        region: str | None = None,
        profile: str | None = None,
        client: Any = None,
    ) -> None:
        self.secret_id = secret_id
        if client is not None:
            self._sm = client
            return

        session_kwargs: dict[str, Any] = {
            "region_name": region or os.environ.get("AWS_REGION", "us-east-1")
        }
        if profile:
            session_kwargs["profile_name"] = profile
        self._sm = boto3.Session(**session_kwargs).client("secretsmanager")

    def __call__(self, key: AccessKey) -> None:
        secret_string = json.dumps(key.as_credentials())
        try:
            self._sm.put_secret_value(SecretId=self.secret_id, SecretString=secret_string)
            log.info(f"  [OK] Stored key {key.key_id} in secret {self.secret_id}")
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceNotFoundException":
                raise KeyHandlerError(f"Failed to put secret {self.secret_id}: {e}") from e
            self._create_secret(key, secret_string)
        except BotoCoreError as e:
            raise KeyHandlerError(f"Failed to put secret {self.secret_id}: {e}") from e

    def _create_secret(self, key: AccessKey, secret_string: str) -> None:
        try:
            self._sm.create_secret(
                Name=self.secret_id,
                Description=f"IAM access key for {key.user_name}",
                SecretString=secret_string,
            )
            log.info(f"  [OK] Created secret {self.secret_id} with key {key.key_id}")
        except (ClientError, BotoCoreError) as e:
            raise KeyHandlerError(f"Failed to create secret {self.secret_id}: {e}") from e
