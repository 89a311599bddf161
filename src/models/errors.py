# src/models/errors.py
from __future__ import annotations

from typing import Optional


# Base for every failure that ends a deployment with a FAILED response
class DeploymentError(RuntimeError):
    """Raised when a provisioning request cannot be completed."""


class ValidationError(DeploymentError):
    """Bad or missing request fields. Raised before any I/O happens."""


class FetchError(DeploymentError):
    """The source artifact could not be read or saved to scratch space."""


class ExtractionError(DeploymentError):
    """An archive is malformed or an expected entry is missing."""


class PublishError(DeploymentError):
    """At least one upload to the destination bucket failed."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class InvalidationError(DeploymentError):
    """The edge-cache invalidation request was rejected."""


class CleanupError(DeploymentError):
    """The destination bucket could not be enumerated for teardown."""


# Not a DeploymentError: this one must reach the Lambda runtime
class SignalError(RuntimeError):
    """The response PUT to the control plane callback failed."""


class StorageError(RuntimeError):
    """An object-store call failed."""


class NotificationError(RuntimeError):
    """The chat webhook rejected or never received a message."""


__all__ = [
    "DeploymentError",
    "ValidationError",
    "FetchError",
    "ExtractionError",
    "PublishError",
    "InvalidationError",
    "CleanupError",
    "SignalError",
    "StorageError",
    "NotificationError",
]
