"""Port interfaces for the remote mirror and link enrichment collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..core.errors import RemoteError
from ..core.models import StreamPatch, StreamRecord
from ..core.result import Result


class RemoteMirror(ABC):
    """Remote copy of one user's stream records, scoped by owner id."""

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether endpoint and credentials are available."""

    @abstractmethod
    async def fetch_all(self, owner_id: str) -> list[StreamRecord]:
        """Return ``owner_id``'s records, newest created first."""

    @abstractmethod
    async def create(self, record: StreamRecord) -> Result[None, RemoteError]:
        """Upsert ``record`` for ``record.owner_id``."""

    @abstractmethod
    async def update(
        self, owner_id: str, record_id: str, patch: StreamPatch
    ) -> Result[None, RemoteError]:
        """Apply ``patch`` to the remote copy of ``record_id``."""

    @abstractmethod
    async def delete(self, owner_id: str, record_id: str) -> Result[None, RemoteError]:
        """Remove the remote copy of ``record_id``."""
