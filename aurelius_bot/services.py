"""Process-wide wiring of storage, stores and remote collaborators.

Everything is constructed once at start-up from :class:`Settings`; the remote
mirror is rebuilt only when the user saves new cloud credentials.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import httpx

from .adapters.imvu import IMVULinkParser
from .adapters.supabase import SupabaseMirror
from .config import RemoteConfig, Settings, remote_config_from_env
from .core.storage import JSONStorage
from .core.sync import SyncCoordinator
from .data.profiles import ProfileStore
from .data.store import StreamStore

log = logging.getLogger("aurelius.services")


@dataclass
class Services:
    storage: JSONStorage
    streams: StreamStore
    profiles: ProfileStore
    mirror: SupabaseMirror
    sync: SyncCoordinator
    links: IMVULinkParser

    def configure_remote(self, config: RemoteConfig | None) -> None:
        """Persist new credentials and rebuild the mirror around them."""
        self.storage.save_remote_config(config)
        self.mirror = SupabaseMirror(config, client=self.mirror.client)
        self.streams.set_mirror(self.mirror)
        self.sync.mirror = self.mirror
        log.info("Remote mirror %s", "configured" if config else "cleared")

    async def close(self) -> None:
        await self.mirror.close()
        await self.links.close()


def build_services(settings: Settings, client: httpx.AsyncClient | None = None) -> Services:
    storage = JSONStorage(Path(settings.data_path))
    remote = storage.load_remote_config() or remote_config_from_env()
    mirror = SupabaseMirror(remote, client=client)
    streams = StreamStore(storage, mirror)
    return Services(
        storage=storage,
        streams=streams,
        profiles=ProfileStore(storage),
        mirror=mirror,
        sync=SyncCoordinator(streams, mirror),
        links=IMVULinkParser(),
    )
