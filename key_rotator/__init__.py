"""IAM access key rotation with self-healing when the 2-key cap is hit."""

from key_rotator.errors import (
    IAMBackendError,
    KeyHandlerError,
    KeyLimitExceededError,
    KeyNotFoundError,
    RotationError,
)
from key_rotator.models import AccessKey, KeyStatus, KeySummary
from key_rotator.rotator import KeyRotator, NewKeyHandler, RotationResult

__all__ = [
    "AccessKey",
    "IAMBackendError",
    "KeyHandlerError",
    "KeyLimitExceededError",
    "KeyNotFoundError",
    "KeyRotator",
    "KeyStatus",
    "KeySummary",
    "NewKeyHandler",
    "RotationError",
    "RotationResult",
]
