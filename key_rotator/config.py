"""
key_rotator/config.py — Settings read from the environment.

Environment variables:
    KEY_ROTATOR_USER            IAM user whose keys are rotated
    AWS_REGION, AWS_PROFILE     boto3 session for the IAM backend
    KEY_ROTATOR_AUDIT_LOG       audit log path (default: audit/audit.log)
    SLACK_WEBHOOK_URL           optional — posts rotation notifications
    KEY_ROTATOR_RELOAD_URLS     comma separated service URLs to reload
    KEY_ROTATOR_SECRET_ID       Secrets Manager secret for the new key
    KEY_ROTATOR_VAULT_PATH      Vault KV v2 path for the new key
"""
import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_AUDIT_LOG = Path("audit") / "audit.log"


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class RotatorSettings:
    user_name: str | None = None
    region: str = "us-east-1"
    profile: str | None = None
    audit_log: Path = DEFAULT_AUDIT_LOG
    slack_webhook_url: str = ""
    reload_urls: list[str] = field(default_factory=list)
    secret_id: str | None = None
    vault_path: str | None = None

    @classmethod
    def from_env(cls) -> "RotatorSettings":
        env = os.environ
        return cls(
            user_name=env.get("KEY_ROTATOR_USER") or None,
            region=env.get("AWS_REGION", "us-east-1"),
            profile=env.get("AWS_PROFILE") or None,
            audit_log=Path(env.get("KEY_ROTATOR_AUDIT_LOG", str(DEFAULT_AUDIT_LOG))),
            slack_webhook_url=env.get("SLACK_WEBHOOK_URL", ""),
            reload_urls=_split_csv(env.get("KEY_ROTATOR_RELOAD_URLS", "")),
            secret_id=env.get("KEY_ROTATOR_SECRET_ID") or None,
            vault_path=env.get("KEY_ROTATOR_VAULT_PATH") or None,
        )
