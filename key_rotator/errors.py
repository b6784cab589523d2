"""
key_rotator/errors.py — Exceptions raised during key rotation.

The rotator re-raises whatever its collaborators raise, so callers can
catch RotationError for "any rotation failure" or a subclass for a
specific cause.
"""


class RotationError(Exception):
    """Base class for every error raised by key_rotator."""


class IAMBackendError(RotationError):
    """Raised when a call to the IAM service fails."""


class KeyLimitExceededError(IAMBackendError):
    """Raised when the user already holds the maximum number of access keys."""


class KeyNotFoundError(IAMBackendError):
    """Raised when an access key (or its user) does not exist."""


class KeyHandlerError(RotationError):
    """Raised when a new-key handler rejects or cannot deliver a key."""
