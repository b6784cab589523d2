"""
key_rotator/rotator.py — Access key rotation for a single IAM user.

Steps:
  1. List the user's existing keys
  2. Create a new key (self-heal once on failure: delete INACTIVE keys, retry)
  3. Pass the new key to the handler (delete the new key if the handler fails)
  4. Delete every key that existed before the run

IAM caps a user at 2 keys. A run interrupted between steps 2 and 4 leaves
two keys behind and blocks every later creation; deleting the INACTIVE
ones is the only way to free capacity without touching a key that may
still be in use.

Callers must not rotate the same user from two places at once.
"""
import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from key_rotator.backends import IAMBackend
from key_rotator.errors import KeyHandlerError
from key_rotator.models import AccessKey, KeyStatus, KeySummary

log = logging.getLogger(__name__)

# A handler raises (or returns False) to reject the key.
NewKeyHandler = Callable[[AccessKey], bool | None]
KeyFilter = Callable[[KeySummary], bool]


def is_inactive(key: KeySummary) -> bool:
    """True for any key that cannot authenticate (Inactive or Expired)."""
    return key.status != KeyStatus.ACTIVE


@dataclass
class RotationResult:
    user_name: str
    new_key_id: str
    deleted_key_ids: list[str] = field(default_factory=list)
    self_healed: bool = False


class KeyRotator:
    """
    Rotates the access keys of one IAM user per call.

    Holds no state between runs; the IAM service is re-read every time.
    """

    def __init__(self, iam: IAMBackend, new_key_handler: NewKeyHandler) -> None:
        """
        Args:
            iam: backend used to list, create and delete keys
            new_key_handler: called with each new key; responsible for
                delivering it wherever it is used
        """
        self.iam = iam
        self.new_key_handler = new_key_handler

    def rotate_keys(self, user_name: str) -> RotationResult:
        """
        Rotate the access key(s) of an IAM user.

        Returns a RotationResult once the user holds exactly one key: the new
        one. Any failure is logged and re-raised unchanged.
        """
        if not user_name:
            raise ValueError("user_name must not be empty")

        try:
            existing = self.get_existing_keys(user_name)
            return self._rotate(user_name, existing)
        except Exception as e:
            log.error(f"There was an error during key rotation for {user_name}: {e}")
            raise

    def get_existing_keys(self, user_name: str) -> list[KeySummary]:
        log.info(f"Retrieving existing keys for user {user_name}")
        keys = self.iam.list_keys(user_name)
        log.info(
            f"Retrieved {len(keys)} key(s) for user {user_name}: "
            f"{[(k.key_id, k.status.value) for k in keys]}"
        )
        return keys

    def _rotate(self, user_name: str, existing: list[KeySummary]) -> RotationResult:
        healed: list[str] = []
        self_healed = False
        try:
            new_key = self.create_new_key(user_name)
        except Exception as e:
            log.error(f"Key creation failed: {e}")
            self_healed = True
            healed = self.self_heal(user_name, existing)
            # Second and last attempt; self-heal never runs twice.
            new_key = self.create_new_key(user_name)

        self.handle_new_key(user_name, new_key)

        log.info("Deleting old keys.")
        # Keys removed by self-heal are already gone.
        remaining = [k for k in existing if k.key_id not in healed]
        deleted = self.delete_keys(user_name, remaining)

        log.info(f"Key rotation complete for {user_name}; active key is {new_key.key_id}")
        return RotationResult(
            user_name=user_name,
            new_key_id=new_key.key_id,
            deleted_key_ids=healed + deleted,
            self_healed=self_healed,
        )

    def self_heal(self, user_name: str, existing: list[KeySummary]) -> list[str]:
        """Delete the user's INACTIVE (and Expired) keys to free capacity for a new one."""
        log.info("Attempting to self-heal by deleting any inactive keys")
        return self.delete_keys(user_name, existing, key_filter=is_inactive)

    def create_new_key(self, user_name: str) -> AccessKey:
        log.info(f"Creating a new access key for user {user_name}")
        key = self.iam.create_key(user_name)
        log.info(f"Created a new access key with ID: {key.key_id}")
        return key

    def handle_new_key(self, user_name: str, key: AccessKey) -> None:
        """
        Pass the key to the handler. If the handler fails the key is deleted
        and the handler's error is re-raised. When that delete fails too, the
        delete error is chained as the handler error's __cause__.
        """
        log.info("Handling the newly created key.")
        try:
            if self.new_key_handler(key) is False:
                raise KeyHandlerError(f"New key handler rejected key {key.key_id}")
        except Exception as e:
            log.error(f"New key handler failed with error: {e}. New key will be deleted.")
            try:
                self.delete_key(user_name, key.key_id)
            except Exception as delete_error:
                log.error(
                    f"Could not delete rejected key {key.key_id}; it is still active "
                    f"for {user_name}: {delete_error}"
                )
                raise e from delete_error
            raise

    def delete_keys(
        self,
        user_name: str,
        keys: Iterable[KeySummary],
        key_filter: KeyFilter | None = None,
    ) -> list[str]:
        """
        Delete every key in ``keys`` that passes ``key_filter`` (all of them
        when no filter is given). Deletions run concurrently and all of them
        are waited for. Nothing is rolled back if one fails; the first
        failure is raised.

        Returns the ids of the deleted keys.
        """
        to_delete = [k for k in keys if key_filter is None or key_filter(k)]
        log.info(f"The following keys will be deleted: {[k.key_id for k in to_delete]}")
        if not to_delete:
            return []

        with ThreadPoolExecutor(max_workers=len(to_delete)) as executor:
            futures = [
                executor.submit(self.delete_key, user_name, k.key_id) for k in to_delete
            ]

        errors = [e for e in (f.exception() for f in futures) if e is not None]
        for extra in errors[1:]:
            log.error(f"Additional key deletion failure: {extra}")
        if errors:
            raise errors[0]
        return [k.key_id for k in to_delete]

    def delete_key(self, user_name: str, key_id: str) -> None:
        log.info(f"Deleting access key {key_id} for user {user_name}")
        self.iam.delete_key(user_name, key_id)
        log.info(f"Deleted access key {key_id}")
