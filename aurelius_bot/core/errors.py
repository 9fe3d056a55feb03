"""Error taxonomy shared by the stores, the remote mirror and the caption engine.

Every error carries a short message suitable for showing to a user as-is.
"""

from __future__ import annotations


class AureliusError(Exception):
    """Base class for all domain errors."""


class NotFound(AureliusError):
    """A stream or organization id does not exist."""


class NotConfigured(AureliusError):
    """A remote operation was attempted without endpoint, credentials or session."""


class RemoteError(AureliusError):
    """Transport, auth or validation failure reported by the remote mirror."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnknownPlatform(AureliusError):
    """The platform key is not one of the recognised caption platforms."""


class ValidationError(AureliusError):
    """A store precondition was violated (e.g. non-positive due days)."""


__all__ = [
    "AureliusError",
    "NotConfigured",
    "NotFound",
    "RemoteError",
    "UnknownPlatform",
    "ValidationError",
]
