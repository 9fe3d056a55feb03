"""Supabase adapter implementing :class:`~aurelius_bot.adapters.base.RemoteMirror`.

The adapter talks to the project's PostgREST endpoint directly using
:mod:`httpx` rather than a provider SDK. Records live in a ``streams`` table
whose columns match the model aliases (``user_id``, ``agency_name``,
``due_date`` ...).

Write operations never raise for remote failures; they return
:class:`~aurelius_bot.core.result.Err` so each caller decides explicitly what a
failed sync means for it.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError as ModelValidationError

from ..config import RemoteConfig
from ..core.errors import NotConfigured, RemoteError
from ..core.models import StreamPatch, StreamRecord
from ..core.result import Err, Ok, Result
from .base import RemoteMirror

log = logging.getLogger("aurelius.remote")

TABLE = "streams"


def _headers(api_key: str) -> dict[str, str]:
    return {"apikey": api_key, "Authorization": f"Bearer {api_key}"}


def _describe(exc: Exception) -> RemoteError:
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get("message") if isinstance(body, dict) else None
        detail = detail or response.text
        return RemoteError(
            f"Remote returned {response.status_code}: {detail or response.reason_phrase}",
            status_code=response.status_code,
        )
    return RemoteError(f"Could not reach remote: {exc}")


class SupabaseMirror(RemoteMirror):
    """Remote mirror backed by a user-owned Supabase project."""

    def __init__(
        self, config: RemoteConfig | None, client: httpx.AsyncClient | None = None
    ) -> None:
        """Store the active ``config`` and optional HTTP ``client``."""
        self.config = config if config and config.is_complete() else None
        self.client = client or httpx.AsyncClient()
        # Set when the last fetch failed, cleared on success. ``fetch_all``
        # returns [] for both "no rows" and "request failed".
        self.last_error: RemoteError | None = None

    # ------------------------------------------------------------------
    def is_configured(self) -> bool:
        return self.config is not None

    def _require(self, owner_id: str | None) -> RemoteConfig:
        if self.config is None:
            raise NotConfigured("Cloud sync is not configured.")
        if not owner_id:
            raise NotConfigured("Sign in to use cloud sync.")
        return self.config

    def _url(self, config: RemoteConfig) -> str:
        return f"{config.endpoint.rstrip('/')}/rest/v1/{TABLE}"

    async def _send(
        self, method: str, config: RemoteConfig, **kwargs: Any
    ) -> Result[None, RemoteError]:
        headers = _headers(config.api_key) | kwargs.pop("headers", {})
        try:
            response = await self.client.request(
                method, self._url(config), headers=headers, **kwargs
            )
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return Err(_describe(exc))
        return Ok(None)

    # ------------------------------------------------------------------
    async def fetch_all(self, owner_id: str) -> list[StreamRecord]:
        """Fetch the remote copy of ``owner_id``'s streams.

        Transport errors are logged and an empty list is returned; check
        :attr:`last_error` to tell a failed fetch from an empty table.
        """
        config = self._require(owner_id)
        params = {
            "select": "*",
            "user_id": f"eq.{owner_id}",
            "order": "created_at.desc",
        }
        try:
            response = await self.client.get(
                self._url(config), params=params, headers=_headers(config.api_key)
            )
            response.raise_for_status()
            rows: list[dict[str, Any]] = response.json() or []
            records = [StreamRecord.model_validate(row) for row in rows]
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, ModelValidationError) as exc:
            self.last_error = (
                _describe(exc)
                if isinstance(exc, (httpx.HTTPError, httpx.InvalidURL))
                else RemoteError(f"Remote returned malformed data: {exc}")
            )
            log.error("Error fetching streams for %s: %s", owner_id, self.last_error)
            return []
        self.last_error = None
        return records

    async def create(self, record: StreamRecord) -> Result[None, RemoteError]:
        """Upsert ``record``; its ``owner_id`` scopes the row."""
        config = self._require(record.owner_id)
        return await self._send(
            "POST",
            config,
            json=record.to_remote(),
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )

    async def update(
        self, owner_id: str, record_id: str, patch: StreamPatch
    ) -> Result[None, RemoteError]:
        config = self._require(owner_id)
        return await self._send(
            "PATCH",
            config,
            params={"id": f"eq.{record_id}", "user_id": f"eq.{owner_id}"},
            json=patch.to_remote(),
            headers={"Prefer": "return=minimal"},
        )

    async def delete(self, owner_id: str, record_id: str) -> Result[None, RemoteError]:
        config = self._require(owner_id)
        return await self._send(
            "DELETE",
            config,
            params={"id": f"eq.{record_id}", "user_id": f"eq.{owner_id}"},
        )

    async def test_connection(self, endpoint: str, api_key: str) -> Result[str, RemoteError]:
        """Check caller supplied credentials without touching the active config.

        Used by the setup flow only. Returns a human readable message either
        way.
        """
        if not endpoint.strip() or not api_key.strip():
            return Err(RemoteError("Please enter both URL and API key."))
        url = f"{endpoint.strip().rstrip('/')}/auth/v1/settings"
        try:
            response = await self.client.get(url, headers=_headers(api_key.strip()))
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return Err(_describe(exc))
        return Ok("Connection successful!")

    async def close(self) -> None:
        """Close the underlying :class:`httpx.AsyncClient`."""
        await self.client.aclose()
