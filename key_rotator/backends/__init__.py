"""
key_rotator/backends/__init__.py — Abstract base class for IAM backends.

The rotator only needs three operations on a user's access keys, so any
service that can list, create and delete them can sit behind this
interface. AWS IAM is the production implementation; the in-memory
backend enforces the same 2-key cap for local runs and tests.
"""
from abc import ABC, abstractmethod

from key_rotator.models import AccessKey, KeySummary

MAX_KEYS_PER_USER = 2


class IAMBackend(ABC):
    """Abstract interface for an IAM service holding a user's access keys."""

    @abstractmethod
    def list_keys(self, user_name: str) -> list[KeySummary]:
        """
        List every access key belonging to a user.

        Args:
            user_name: IAM user name (not an ARN)

        Returns:
            Metadata for each key, active or inactive. Order is not significant.

        Raises:
            IAMBackendError: the service could not be reached or refused the call.
        """
        ...

    @abstractmethod
    def create_key(self, user_name: str) -> AccessKey:
        """
        Create a new, active access key for a user.

        Raises:
            KeyLimitExceededError: the user already holds MAX_KEYS_PER_USER keys.
            IAMBackendError: any other failure.
        """
        ...

    @abstractmethod
    def delete_key(self, user_name: str, key_id: str) -> None:
        """
        Delete one access key.

        Raises:
            KeyNotFoundError: no such key for this user.
            IAMBackendError: any other failure.
        """
        ...


def get_backend(backend_name: str, region: str | None = None, profile: str | None = None) -> IAMBackend:
    if backend_name == "aws":
        from key_rotator.backends.aws_backend import AWSIAMBackend
        return AWSIAMBackend(region=region, profile=profile)
    elif backend_name == "memory":
        from key_rotator.backends.memory_backend import InMemoryIAMBackend
        return InMemoryIAMBackend()
    raise ValueError(f"Unknown backend: {backend_name}. Use 'aws' or 'memory'.")
