"""
key_rotator/models.py — Access key value types.

KeySummary mirrors an entry of IAM's ListAccessKeys response (no secret).
AccessKey mirrors CreateAccessKey's response and is the only type that
carries secret material.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class KeyStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    EXPIRED = "Expired"


@dataclass(frozen=True)
class KeySummary:
    key_id: str
    user_name: str
    status: KeyStatus
    create_date: datetime | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "KeySummary":
        """Build from an AccessKeyMetadata dict as returned by boto3."""
        return cls(
            key_id=data["AccessKeyId"],
            user_name=data["UserName"],
            status=KeyStatus(data["Status"]),
            create_date=data.get("CreateDate"),
        )


@dataclass(frozen=True)
class AccessKey:
    key_id: str
    user_name: str
    secret: str = field(repr=False)
    status: KeyStatus = KeyStatus.ACTIVE

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "AccessKey":
        """Build from the AccessKey dict of a CreateAccessKey response."""
        return cls(
            key_id=data["AccessKeyId"],
            user_name=data["UserName"],
            secret=data["SecretAccessKey"],
            status=KeyStatus(data["Status"]),
        )

    def as_credentials(self) -> dict[str, str]:
        """Credential payload in the shape the AWS CLI and SDKs expect."""
        return {
            "aws_access_key_id": self.key_id,
            "aws_secret_access_key": self.secret,
        }
