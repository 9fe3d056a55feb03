"""Discord bot front-end for the stream dashboard.

The bot is a thin collaborator: slash commands call into the stores and the
caption engine and render their results as ephemeral replies.
"""

from __future__ import annotations

from typing import Any

import discord
from discord.ext import commands

from .logging_config import setup_logging
from .services import Services


class AureliusBot(commands.Bot):
    """Small ``discord.py`` based bot exposing the stream commands."""

    def __init__(self, services: Services, **kwargs: Any) -> None:  # pragma: no cover - trivial
        """Initialize the bot with the minimal intents required."""
        intents = kwargs.pop("intents", None) or discord.Intents.default()
        # Slash commands and components only; message content intent not
        # needed.
        intents.message_content = False
        super().__init__(
            command_prefix=kwargs.pop("command_prefix", "!"),
            intents=intents,
        )
        self.services = services
        self.sync_per_guild = kwargs.pop("sync_per_guild", False)
        self.log = setup_logging()

    async def setup_hook(self) -> None:
        """Sync slash commands so newly added ones show up for users."""
        tree = getattr(self, "tree", None)
        if tree is not None:
            if self.sync_per_guild:
                for guild in self.guilds:
                    tree.copy_global_to(guild=guild)
                    await tree.sync(guild=guild)
            await tree.sync()
        await super().setup_hook()

    async def on_ready(self) -> None:  # pragma: no cover - requires discord
        """Log a short confirmation once the bot connected successfully."""
        await self.change_presence(activity=discord.Game(name="Aurelius"))
        self.log.info(
            "Logged in as %s (%s)",
            self.user,
            self.user.id if self.user else "?",
        )

    async def close(self) -> None:
        await self.services.close()
        await super().close()


__all__ = ["AureliusBot"]
