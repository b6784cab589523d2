#!/usr/bin/env python3
"""
rotate.py — Command-line entry point for IAM access key rotation.

Usage:
    key-rotator --user ci-deployer                                   # store in the default AWS profile
    key-rotator --user ci-deployer --store secretsmanager --secret-id ci/deployer
    key-rotator --user ci-deployer --store vault --vault-path ci/deployer \
        --reload-url http://localhost:5001
    key-rotator --user demo --backend memory --store log             # dry run, nothing remote

Environment variables: see key_rotator/config.py.
"""
import argparse
import logging
import sys
from typing import NoReturn
from pathlib import Path

from key_rotator.audit import make_event, write_audit_event
from key_rotator.backends import get_backend
from key_rotator.config import RotatorSettings
from key_rotator.errors import RotationError
from key_rotator.handlers import chain_handlers
from key_rotator.models import AccessKey
from key_rotator.notifications import send_slack_notification
from key_rotator.rotator import KeyRotator, NewKeyHandler

log = logging.getLogger("key_rotator.rotate")

STORE_CHOICES = ["profile", "secretsmanager", "vault", "log"]


def log_only_handler(key: AccessKey) -> None:
    log.info(f"  [DRY RUN] New key {key.key_id} not stored anywhere")


def build_handler(args: argparse.Namespace, settings: RotatorSettings) -> NewKeyHandler:
    handlers = []
    for store in args.store or ["profile"]:
        if store == "profile":
            from key_rotator.handlers.aws_profile import AWSProfileHandler
            handlers.append(AWSProfileHandler(profile=args.target_profile))
        elif store == "secretsmanager":
            if not settings.secret_id:
                raise ValueError("--store secretsmanager requires --secret-id or KEY_ROTATOR_SECRET_ID")
            from key_rotator.handlers.secrets_manager import SecretsManagerHandler
            handlers.append(SecretsManagerHandler(
                settings.secret_id, region=settings.region, profile=settings.profile
            ))
        elif store == "vault":
            if not settings.vault_path:
                raise ValueError("--store vault requires --vault-path or KEY_ROTATOR_VAULT_PATH")
            from key_rotator.handlers.vault import VaultHandler
            handlers.append(VaultHandler(settings.vault_path))
        elif store == "log":
            handlers.append(log_only_handler)
        else:
            raise ValueError(f"Unknown store: {store}. Use one of {', '.join(STORE_CHOICES)}.")

    if settings.reload_urls:
        from key_rotator.handlers.reload import ServiceReloadHandler
        handlers.append(ServiceReloadHandler(settings.reload_urls))

    return chain_handlers(*handlers)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Rotate the access keys of an IAM user",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  key-rotator --user ci-deployer --target-profile deploy
  key-rotator --user ci-deployer --store secretsmanager --secret-id ci/deployer
  key-rotator --user demo --backend memory --store log
        """,
    )
    parser.add_argument("--user", help="IAM user name (default: $KEY_ROTATOR_USER)")
    parser.add_argument(
        "--backend",
        choices=["aws", "memory"],
        default="aws",
        help="IAM backend (default: aws)",
    )
    parser.add_argument("--profile", help="AWS profile used to call IAM")
    parser.add_argument("--region", help="AWS region (default: $AWS_REGION or us-east-1)")
    parser.add_argument(
        "--store",
        action="append",
        choices=STORE_CHOICES,
        help="Where to deliver the new key; repeatable (default: profile)",
    )
    parser.add_argument(
        "--target-profile",
        default="default",
        help="AWS CLI profile that receives the new key (for --store profile)",
    )
    parser.add_argument("--secret-id", help="Secrets Manager secret id (for --store secretsmanager)")
    parser.add_argument("--vault-path", help="Vault KV v2 path (for --store vault)")
    parser.add_argument(
        "--reload-url",
        action="append",
        default=[],
        help="Service base URL to POST /reload-credentials to after storing; repeatable",
    )
    parser.add_argument("--audit-log", help="Audit log path (default: audit/audit.log)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def apply_overrides(settings: RotatorSettings, args: argparse.Namespace) -> RotatorSettings:
    if args.user:
        settings.user_name = args.user
    if args.profile:
        settings.profile = args.profile
    if args.region:
        settings.region = args.region
    if args.secret_id:
        settings.secret_id = args.secret_id
    if args.vault_path:
        settings.vault_path = args.vault_path
    if args.reload_url:
        settings.reload_urls = args.reload_url
    if args.audit_log:
        settings.audit_log = Path(args.audit_log)
    return settings


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    settings = apply_overrides(RotatorSettings.from_env(), args)
    if not settings.user_name:
        log.error("No IAM user given: pass --user or set KEY_ROTATOR_USER")
        sys.exit(2)
    user_name = settings.user_name

    write_audit_event(
        make_event("rotation_started", user_name, "success", {"backend": args.backend}),
        settings.audit_log,
    )

    try:
        backend = get_backend(args.backend, region=settings.region, profile=settings.profile)
        rotator = KeyRotator(backend, build_handler(args, settings))
        result = rotator.rotate_keys(user_name)
    except (RotationError, ValueError) as e:
        log.error(f"Rotation failed for {user_name}: {e}")
        fail(user_name, settings, e)
    except Exception as e:
        log.exception(f"Unexpected error rotating {user_name}: {e}")
        fail(user_name, settings, e)

    write_audit_event(
        make_event("rotation_complete", user_name, "success", {
            "new_key_id": result.new_key_id,
            "deleted_key_ids": result.deleted_key_ids,
            "self_healed": result.self_healed,
        }),
        settings.audit_log,
    )
    send_slack_notification(
        f":white_check_mark: Rotation COMPLETE for {user_name} (new key {result.new_key_id})",
        settings.slack_webhook_url,
    )
    log.info(f"[OK] Rotation complete for {user_name}")


def fail(user_name: str, settings: RotatorSettings, error: Exception) -> NoReturn:
    write_audit_event(
        make_event("rotation_failed", user_name, "failure", {
            "error": str(error),
            "error_type": type(error).__name__,
        }),
        settings.audit_log,
    )
    send_slack_notification(f":x: Rotation FAILED for {user_name}: {error}", settings.slack_webhook_url)
    sys.exit(1)


if __name__ == "__main__":
    main()
