from __future__ import annotations

import datetime

import discord

from ..core.errors import AureliusError
from ..core.models import StreamRecord, StreamStatus
from ..data.store import StreamStore

STATUS_ICONS = {
    StreamStatus.ACTIVE: "🟣",
    StreamStatus.COMPLETED: "✅",
    StreamStatus.OVERDUE: "🔴",
}


def stream_title(record: StreamRecord) -> str:
    first = record.items[0].name if record.items else "Stream"
    more = f" +{len(record.items) - 1}" if len(record.items) > 1 else ""
    agency = f"{record.organization_name} · " if record.organization_name else ""
    return f"{agency}{first}{more}"


def days_until_due(record: StreamRecord, now: datetime.datetime) -> int:
    return (record.due_at.date() - now.date()).days


def stream_summary(record: StreamRecord, now: datetime.datetime) -> str:
    status = record.display_status(now)
    lines = [
        f"{STATUS_ICONS[status]} {status.value} · {record.priority.value} priority"
        f" · {record.category.value}",
        f"Due: {record.due_at.date().isoformat()} ({days_until_due(record, now)} days)",
    ]
    for item in record.items:
        pid = f" — {item.external_id}" if item.external_id else ""
        lines.append(f"• {item.name} by {item.creator_name}{pid}")
    if record.notes:
        lines.append(f"_{record.notes}_")
    return "\n".join(lines)


def streams_embed(store: StreamStore, now: datetime.datetime | None = None) -> discord.Embed:
    now = now or store.clock()
    stats = store.stats(now)
    embed = discord.Embed(
        title="Streams",
        description=(
            f"Active: {stats['active']} · Completed: {stats['completed']} · "
            f"Overdue: {stats['overdue']} · This week: {stats['this_week']}"
        ),
    )
    for record in sorted(store.list(), key=lambda r: r.due_at)[:25]:
        embed.add_field(
            name=f"{stream_title(record)} (`{record.id[:8]}`)",
            value=stream_summary(record, now),
            inline=False,
        )
    return embed


class StreamView(discord.ui.View):
    """Buttons for acting on a single stream."""

    def __init__(self, store: StreamStore, record_id: str) -> None:
        super().__init__(timeout=300)
        self.store = store
        self.record_id = record_id

    async def _reply(self, interaction: discord.Interaction, message: str) -> None:
        warnings = self.store.pop_warnings()
        if warnings:
            message += "\n⚠️ " + "\n⚠️ ".join(warnings)
        await interaction.response.send_message(message, ephemeral=True)

    @discord.ui.button(label="Complete", style=discord.ButtonStyle.success)
    async def complete(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        try:
            await self.store.complete(self.record_id)
        except AureliusError as exc:
            await interaction.response.send_message(str(exc), ephemeral=True)
            return
        await self._reply(interaction, "Stream completed successfully! ✨")

    @discord.ui.button(label="Delete", style=discord.ButtonStyle.danger)
    async def delete(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        await self.store.delete(self.record_id)
        await self._reply(interaction, "Stream deleted.")
