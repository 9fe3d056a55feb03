"""Sign-in reconciliation between the local stream set and the remote mirror.

The merge is deliberately one-way-then-replace: local-only records are
uploaded, then the remote snapshot (if it has anything) replaces the local set
wholesale. There is no field level merge and no timestamp comparison, so a
local record whose upload failed is dropped when the remote set is non-empty.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .models import StreamRecord
from .result import Err

if TYPE_CHECKING:
    from ..adapters.base import RemoteMirror
    from ..data.store import StreamStore

log = logging.getLogger("aurelius.sync")


@dataclass
class SyncOutcome:
    records: list[StreamRecord]
    uploaded: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    replaced: bool = False


class SyncCoordinator:
    """Runs reconciliation once per signed-out to signed-in transition."""

    def __init__(self, store: StreamStore, mirror: RemoteMirror) -> None:
        self.store = store
        self.mirror = mirror
        self.signed_in = False

    async def handle_auth_event(self, owner_id: str | None, is_signed_in: bool) -> SyncOutcome | None:
        """React to an auth state change.

        Only the false -> true edge reconciles; repeated "signed in" events are
        ignored and a sign-out just ends the store session.
        """
        if not is_signed_in or not owner_id:
            self.signed_in = False
            self.store.sign_out()
            return None
        if self.signed_in:
            return None
        self.signed_in = True
        self.store.sign_in(owner_id)
        try:
            return await self.reconcile_on_sign_in(owner_id, self.store.list())
        except Exception:
            # A failed sign-in must be retryable.
            self.signed_in = False
            self.store.sign_out()
            raise

    async def reconcile_on_sign_in(
        self, owner_id: str, local_records: Iterable[StreamRecord]
    ) -> SyncOutcome:
        async with self.store.lock:
            remote = await self.mirror.fetch_all(owner_id)
            remote_ids = {r.id for r in remote}
            outcome = SyncOutcome(records=self.store.list())

            for record in local_records:
                if record.id in remote_ids:
                    continue
                result = await self.mirror.create(
                    record.model_copy(update={"owner_id": owner_id})
                )
                if isinstance(result, Err):
                    message = f"Could not upload stream {record.id}: {result.error}"
                    log.warning(message)
                    outcome.warnings.append(message)
                else:
                    outcome.uploaded.append(record.id)

            if outcome.uploaded:
                remote = await self.mirror.fetch_all(owner_id)

            if remote:
                self.store.replace_all(remote)
                outcome.records = list(remote)
                outcome.replaced = True
            log.info(
                "Reconciled %s: uploaded %d, %d failed, replaced=%s",
                owner_id,
                len(outcome.uploaded),
                len(outcome.warnings),
                outcome.replaced,
            )
            return outcome
