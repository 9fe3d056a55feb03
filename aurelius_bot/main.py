from __future__ import annotations

import asyncio

from .bot import AureliusBot
from .commands import register_commands
from .config import load_settings
from .logging_config import setup_logging
from .services import build_services


def main() -> int:
    log = setup_logging()
    settings = load_settings()
    if not settings.token:
        log.error(
            "DISCORD_BOT_TOKEN is not set. "
            "Export it in your environment before running."
        )
        return 2
    services = build_services(settings)
    bot = AureliusBot(services, sync_per_guild=settings.sync_per_guild)
    register_commands(bot, services)

    async def runner():
        try:
            async with bot:
                await bot.start(settings.token)
        except KeyboardInterrupt:
            log.info("Shutting down...")
        return 0

    return asyncio.run(runner())


if __name__ == "__main__":
    raise SystemExit(main())
