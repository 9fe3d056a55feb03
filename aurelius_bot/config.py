from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    token: str
    data_path: str = "aurelius_data.json"
    # Set to True to sync commands per guild for faster propagation
    sync_per_guild: bool = True


@dataclass(frozen=True)
class RemoteConfig:
    """Credentials for the user's own Supabase project."""

    endpoint: str
    api_key: str

    def is_complete(self) -> bool:
        return bool(self.endpoint.strip() and self.api_key.strip())


def load_settings() -> Settings:
    token = os.getenv("DISCORD_BOT_TOKEN", "").strip()
    data_path = os.getenv("AURELIUS_DATA_PATH", "").strip() or "aurelius_data.json"
    per_guild = os.getenv("AURELIUS_SYNC_PER_GUILD", "1").strip().lower()
    return Settings(
        token=token or "",
        data_path=data_path,
        sync_per_guild=per_guild not in {"0", "false", "no"},
    )


def remote_config_from_env() -> RemoteConfig | None:
    """Demo/development fallback when no configuration was saved."""
    endpoint = os.getenv("SUPABASE_URL", "").strip()
    api_key = os.getenv("SUPABASE_ANON_KEY", "").strip()
    if not endpoint or not api_key:
        return None
    return RemoteConfig(endpoint=endpoint, api_key=api_key)
