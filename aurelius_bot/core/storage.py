"""Simple JSON-backed storage for Aurelius data models."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from ..config import RemoteConfig
from .models import OrganizationProfile, StreamRecord

SCHEMA_VERSION = 1

log = logging.getLogger("aurelius.storage")


class JSONStorage:
    """Persist streams, organization profiles and the remote configuration.

    The storage is intentionally lightweight. Each slot is rewritten as a
    whole into a single JSON file on every mutation, which keeps the
    implementation simple while providing durability across process restarts.
    Writes go through a temporary file and :func:`os.replace`, so a failed
    write leaves the previous document intact.
    """

    def __init__(self, path: Path) -> None:
        """Initialise storage using JSON file at ``path``."""
        self.path = Path(path)
        self._streams: list[StreamRecord] = []
        self._organizations: list[OrganizationProfile] = []
        self._remote: RemoteConfig | None = None
        if self.path.exists():
            self._load()
        else:
            self._save()

    # ------------------------------------------------------------------
    # Internal helpers
    def _load(self) -> None:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        version = data.get("schema_version", 0)
        if version < SCHEMA_VERSION:
            data = _migrate(data, version)
        self._streams = [StreamRecord.model_validate(s) for s in data.get("streams", [])]
        self._organizations = [
            OrganizationProfile.model_validate(o) for o in data.get("organizations", [])
        ]
        remote = data.get("remote")
        self._remote = RemoteConfig(**remote) if remote else None

    def _document(
        self,
        streams: Iterable[StreamRecord],
        organizations: Iterable[OrganizationProfile],
        remote: RemoteConfig | None,
    ) -> dict:
        return {
            "schema_version": SCHEMA_VERSION,
            "streams": [s.model_dump(mode="json") for s in streams],
            "organizations": [o.model_dump(mode="json") for o in organizations],
            "remote": (
                {"endpoint": remote.endpoint, "api_key": remote.api_key}
                if remote
                else None
            ),
        }

    def _write(self, data: dict) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp, self.path)

    def _save(self) -> None:
        self._write(self._document(self._streams, self._organizations, self._remote))

    # ------------------------------------------------------------------
    # Stream slot
    def load_streams(self) -> list[StreamRecord]:
        """Return a copy of the persisted stream set."""
        return list(self._streams)

    def save_streams(self, streams: Iterable[StreamRecord]) -> None:
        """Overwrite the whole stream slot.

        The in-memory copy only changes once the file was written.
        """
        streams = list(streams)
        self._write(self._document(streams, self._organizations, self._remote))
        self._streams = streams

    # ------------------------------------------------------------------
    # Organization slot
    def load_organizations(self) -> list[OrganizationProfile]:
        return list(self._organizations)

    def save_organizations(self, organizations: Iterable[OrganizationProfile]) -> None:
        organizations = list(organizations)
        self._write(self._document(self._streams, organizations, self._remote))
        self._organizations = organizations

    # ------------------------------------------------------------------
    # Remote configuration slot
    def load_remote_config(self) -> RemoteConfig | None:
        return self._remote

    def save_remote_config(self, remote: RemoteConfig | None) -> None:
        """Persist ``remote``; ``None`` clears the saved configuration."""
        self._write(self._document(self._streams, self._organizations, remote))
        self._remote = remote


def _migrate(data: dict, version: int) -> dict:
    """Upgrade an older document in place to :data:`SCHEMA_VERSION`."""
    if version == 0:
        # Unversioned documents stored the remote slot under the browser
        # storage shape ``{url, anonKey}``.
        remote = data.get("remote")
        if remote and "url" in remote:
            data["remote"] = {
                "endpoint": remote.get("url", ""),
                "api_key": remote.get("anonKey", ""),
            }
        # ... and used numeric millisecond ids.
        for stream in data.get("streams", []):
            stream["id"] = str(stream["id"])
            for item in stream.get("items", []):
                item["id"] = str(item["id"])
        for org in data.get("organizations", []):
            org["id"] = str(org["id"])
        log.info("Migrated storage document from schema version 0")
    data["schema_version"] = SCHEMA_VERSION
    return data
