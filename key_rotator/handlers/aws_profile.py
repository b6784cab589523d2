"""
key_rotator/handlers/aws_profile.py — Store a new key in a local AWS CLI profile.

Typical CI usage: the pipeline rotates its own deploy user's key and
keeps using it through the named profile.
"""
import logging
import subprocess

from key_rotator.errors import KeyHandlerError
from key_rotator.models import AccessKey

log = logging.getLogger(__name__)


class AWSProfileHandler:
    """
    Runs ``aws configure set`` for the key id and secret of a profile.

    The key id is written first. If the secret cannot be written the
    previous key id is put back, so the profile never pairs the new id
    with the old secret or the old id with the new secret.
    """

    def __init__(self, profile: str = "default", aws_cli: str = "aws") -> None:
        self.profile = profile
        self.aws_cli = aws_cli

    def _configure_get(self, name: str) -> str | None:
        cmd = [self.aws_cli, "configure", "get", name, "--profile", self.profile]
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise KeyHandlerError(f"AWS CLI not found: {self.aws_cli}") from e
        # exit status 1 means the value is not set
        if proc.returncode != 0:
            return None
        return proc.stdout.strip() or None

    def _configure_set(self, name: str, value: str) -> None:
        cmd = [self.aws_cli, "configure", "set", name, value, "--profile", self.profile]
        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise KeyHandlerError(f"AWS CLI not found: {self.aws_cli}") from e
        except subprocess.CalledProcessError as e:
            # stderr only; the command line contains the secret
            raise KeyHandlerError(
                f"aws configure set {name} failed for profile {self.profile}: {e.stderr.strip()}"
            ) from None

    def __call__(self, key: AccessKey) -> None:
        previous_key_id = self._configure_get("aws_access_key_id")
        self._configure_set("aws_access_key_id", key.key_id)
        try:
            self._configure_set("aws_secret_access_key", key.secret)
        except KeyHandlerError:
            if previous_key_id:
                log.warning(f"Restoring key id {previous_key_id} in profile '{self.profile}'")
                self._configure_set("aws_access_key_id", previous_key_id)
            raise
        log.info(f"  [OK] Profile '{self.profile}' now uses key {key.key_id}")
