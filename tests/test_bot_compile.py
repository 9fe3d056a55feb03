import asyncio
import py_compile
from pathlib import Path

from . import discord_stubs

ROOT = Path(__file__).resolve().parent.parent


def test_bot_and_main_compile() -> None:
    """The Discord modules should at least be syntactically valid without discord installed."""
    for module in ("bot.py", "main.py", "ui/views.py", "ui/modals.py", "commands/register.py"):
        py_compile.compile(str(ROOT / "aurelius_bot" / module), doraise=True)


def test_setup_hook_syncs_tree(monkeypatch) -> None:
    discord_stubs.install(monkeypatch)
    from aurelius_bot.bot import AureliusBot

    class Services:
        closed = False

        async def close(self):
            self.closed = True

    services = Services()
    bot = AureliusBot(services)
    asyncio.run(bot.setup_hook())
    assert bot.tree.synced is True

    asyncio.run(bot.close())
    assert services.closed is True
