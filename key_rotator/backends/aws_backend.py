"""
key_rotator/backends/aws_backend.py — AWS IAM backend using boto3.

This is the PRODUCTION backend.

Authentication: boto3 credential chain (SSO, instance role, env vars, ~/.aws/credentials)
Key cap: IAM allows at most 2 access keys per user; a third CreateAccessKey
fails with LimitExceeded, surfaced here as KeyLimitExceededError.
"""
import logging
import os
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from key_rotator.backends import IAMBackend
from key_rotator.errors import IAMBackendError, KeyLimitExceededError, KeyNotFoundError
from key_rotator.models import AccessKey, KeySummary

log = logging.getLogger(__name__)

ERROR_TYPES: dict[str, type[IAMBackendError]] = {
    "LimitExceeded": KeyLimitExceededError,
    "NoSuchEntity": KeyNotFoundError,
}


def translate_error(action: str, error: Exception) -> IAMBackendError:
    """Map a botocore exception onto the key_rotator error hierarchy."""
    if isinstance(error, ClientError):
        code = error.response.get("Error", {}).get("Code", "")
        error_type = ERROR_TYPES.get(code, IAMBackendError)
        return error_type(f"{action} failed ({code}): {error}")
    return IAMBackendError(f"{action} failed: {error}")


class AWSIAMBackend(IAMBackend):
    """
    AWS IAM backend.

    Reads credentials from the boto3 credential chain:
      1. Environment: AWS_ACCESS_KEY_ID + AWS_SECRET_ACCESS_KEY
      2. AWS SSO profile
      3. EC2/ECS instance role
      4. ~/.aws/credentials

    Pass ``client`` to reuse an existing IAM client (e.g. one wrapped in a
    botocore Stubber).
    """

    def __init__(
        self,
        region: str | None = None,
        profile: str | None = None,
        client: Any = None,
    ) -> None:
        if client is not None:
            self._iam = client
            return

        self._region = region or os.environ.get("AWS_REGION", "us-east-1")
        session_kwargs: dict[str, Any] = {"region_name": self._region}
        if profile:
            session_kwargs["profile_name"] = profile

        self._session = boto3.Session(**session_kwargs)
        self._iam = self._session.client("iam")

    def list_keys(self, user_name: str) -> list[KeySummary]:
        try:
            paginator = self._iam.get_paginator("list_access_keys")
            keys = []
            for page in paginator.paginate(UserName=user_name):
                keys.extend(KeySummary.from_api(item) for item in page["AccessKeyMetadata"])
            return keys
        except (ClientError, BotoCoreError) as e:
            raise translate_error(f"ListAccessKeys for {user_name}", e) from e
        except (KeyError, ValueError) as e:
            raise IAMBackendError(f"Unexpected ListAccessKeys entry for {user_name}: {e}") from e

    def create_key(self, user_name: str) -> AccessKey:
        try:
            resp = self._iam.create_access_key(UserName=user_name)
        except (ClientError, BotoCoreError) as e:
            raise translate_error(f"CreateAccessKey for {user_name}", e) from e
        return AccessKey.from_api(resp["AccessKey"])

    def delete_key(self, user_name: str, key_id: str) -> None:
        try:
            self._iam.delete_access_key(UserName=user_name, AccessKeyId=key_id)
        except (ClientError, BotoCoreError) as e:
            raise translate_error(f"DeleteAccessKey {key_id} for {user_name}", e) from e
