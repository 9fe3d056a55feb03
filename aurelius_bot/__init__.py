"""Core package for Aurelius.

This module exposes the data models, the stores and the caption engine so
that consumers of the package can simply import them from ``aurelius_bot``.
The Discord front-end lives in :mod:`aurelius_bot.bot` and is not imported
here, keeping the core usable without a bot token.
"""

from .core.captions import generate_for_platform, render, resolve_template
from .core.errors import (
    AureliusError,
    NotConfigured,
    NotFound,
    RemoteError,
    UnknownPlatform,
    ValidationError,
)
from .core.models import (
    LineItem,
    OrganizationProfile,
    StreamDraft,
    StreamPatch,
    StreamRecord,
)
from .core.storage import JSONStorage
from .core.sync import SyncCoordinator
from .data.profiles import ProfileStore
from .data.store import StreamStore

__all__ = [
    "AureliusError",
    "JSONStorage",
    "LineItem",
    "NotConfigured",
    "NotFound",
    "OrganizationProfile",
    "ProfileStore",
    "RemoteError",
    "StreamDraft",
    "StreamPatch",
    "StreamRecord",
    "StreamStore",
    "SyncCoordinator",
    "UnknownPlatform",
    "ValidationError",
    "generate_for_platform",
    "render",
    "resolve_template",
]
