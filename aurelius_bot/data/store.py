"""Record store for streams: local-first persistence with optional mirroring."""

from __future__ import annotations

import asyncio
import datetime
import logging
from collections.abc import Callable, Iterable
from datetime import UTC

import pydantic

from ..adapters.base import RemoteMirror
from ..core.errors import NotFound, RemoteError, ValidationError
from ..core.models import StreamDraft, StreamPatch, StreamRecord, StreamStatus
from ..core.result import Err, Result
from ..core.storage import JSONStorage

log = logging.getLogger("aurelius.store")


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(tz=UTC)


class StreamStore:
    """Owns the stream set of the active local session.

    Local storage is authoritative: every mutation is written to disk first
    and only then mirrored to the remote, when a mirror is configured and a
    user is signed in. A failed remote call never rolls the local change back;
    it is logged and kept in :meth:`pop_warnings` for the UI to report.
    """

    def __init__(
        self,
        storage: JSONStorage,
        mirror: RemoteMirror | None = None,
        clock: Callable[[], datetime.datetime] = _utcnow,
    ) -> None:
        self.storage = storage
        self.mirror = mirror
        self.clock = clock
        self.owner_id: str | None = None
        # Serialises mutations against the sign-in reconciliation.
        self.lock = asyncio.Lock()
        self._streams: list[StreamRecord] = storage.load_streams()
        self._warnings: list[str] = []

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    def sign_in(self, owner_id: str) -> None:
        self.owner_id = owner_id

    def sign_out(self) -> None:
        self.owner_id = None

    def set_mirror(self, mirror: RemoteMirror | None) -> None:
        """Swap the mirror after the remote configuration changed."""
        self.mirror = mirror

    @property
    def syncing(self) -> bool:
        return bool(self.owner_id and self.mirror and self.mirror.is_configured())

    def pop_warnings(self) -> list[str]:
        warnings, self._warnings = self._warnings, []
        return warnings

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list(self) -> list[StreamRecord]:
        return list(self._streams)

    def get(self, record_id: str) -> StreamRecord:
        for record in self._streams:
            if record.id == record_id:
                return record
        raise NotFound("Stream not found.")

    def stats(self, now: datetime.datetime | None = None) -> dict[str, int]:
        """Dashboard counters; the week starts on Sunday as in the web UI."""
        now = now or self.clock()
        days_since_sunday = (now.weekday() + 1) % 7
        week_start = (now - datetime.timedelta(days=days_since_sunday)).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        statuses = [r.display_status(now) for r in self._streams]
        return {
            "active": statuses.count(StreamStatus.ACTIVE),
            "completed": statuses.count(StreamStatus.COMPLETED),
            "overdue": statuses.count(StreamStatus.OVERDUE),
            "this_week": sum(1 for r in self._streams if r.created_at >= week_start),
        }

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def _commit(self, streams: list[StreamRecord]) -> None:
        # Raises on a failed write, leaving ``self._streams`` untouched.
        self.storage.save_streams(streams)
        self._streams = streams

    def _note(self, action: str, result: Result[None, RemoteError]) -> None:
        if isinstance(result, Err):
            message = f"{action} locally, but failed to sync to cloud: {result.error}"
            log.warning(message)
            self._warnings.append(message)

    async def create(self, draft: StreamDraft) -> StreamRecord:
        if isinstance(draft.due_days, bool) or draft.due_days <= 0:
            raise ValidationError("Due days must be a positive number.")
        async with self.lock:
            now = self.clock()
            record = StreamRecord(
                owner_id=self.owner_id,
                organization_name=draft.organization_name,
                due_at=now + datetime.timedelta(days=draft.due_days),
                status=StreamStatus.ACTIVE,
                priority=draft.priority,
                category=draft.category,
                notes=draft.notes,
                created_at=now,
                items=list(draft.items),
            )
            self._commit([*self._streams, record])
            log.info("Created stream %s", record.id)
            if self.syncing:
                self._note("Saved", await self.mirror.create(record))
            return record

    async def update(self, record_id: str, patch: StreamPatch) -> StreamRecord:
        async with self.lock:
            return await self._update(record_id, patch, "Updated")

    async def _update(self, record_id: str, patch: StreamPatch, action: str) -> StreamRecord:
        current = self.get(record_id)
        try:
            updated = StreamRecord.model_validate(
                {**current.model_dump(), **patch.changes()}
            )
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Invalid stream update: {exc.errors()[0]['msg']}") from exc
        self._commit([updated if r.id == record_id else r for r in self._streams])
        log.info("%s stream %s", action, record_id)
        if self.syncing:
            self._note(action, await self.mirror.update(self.owner_id, record_id, patch))
        return updated

    async def complete(self, record_id: str) -> StreamRecord:
        """Mark a stream completed and stamp ``completed_at``.

        Completing twice restamps ``completed_at``.
        """
        async with self.lock:
            patch = StreamPatch(status=StreamStatus.COMPLETED, completed_at=self.clock())
            return await self._update(record_id, patch, "Completed")

    async def delete(self, record_id: str) -> None:
        async with self.lock:
            remaining = [r for r in self._streams if r.id != record_id]
            if len(remaining) == len(self._streams):
                return
            self._commit(remaining)
            log.info("Deleted stream %s", record_id)
            if self.syncing:
                self._note("Deleted", await self.mirror.delete(self.owner_id, record_id))

    def replace_all(self, records: Iterable[StreamRecord]) -> None:
        """Replace the whole local set; only valid while holding :attr:`lock`."""
        if not self.lock.locked():
            raise RuntimeError("replace_all requires the store lock")
        self._commit(list(records))
