from __future__ import annotations

import logging

import discord

from ..core.errors import AureliusError
from ..core.models import Category, LineItem, Priority, StreamDraft
from ..services import Services

log = logging.getLogger("aurelius.ui")


def parse_item_line(line: str) -> LineItem:
    """``name | creator | shop id | product url``; trailing parts are optional."""
    parts = [p.strip() for p in line.split("|")]
    parts += [""] * (4 - len(parts))
    name, creator, shop_id, url = parts[:4]
    return LineItem(
        name=name,
        creator_name=creator,
        creator_id=shop_id,
        source_url=url or None,
    )


def parse_items(text: str) -> list[LineItem]:
    return [parse_item_line(line) for line in text.splitlines() if line.strip()]


class StreamModal(discord.ui.Modal, title="Create Stream"):
    def __init__(self, services: Services, priority: Priority, category: Category) -> None:
        super().__init__()
        self.services = services
        self.priority = priority
        self.category = category
        self.agency_input = discord.ui.TextInput(
            label="Agency Name",
            placeholder="Enter agency name",
            required=False,
            max_length=100,
        )
        self.due_days_input = discord.ui.TextInput(
            label="Due Days (1-7)",
            default="3",
            required=True,
            max_length=1,
        )
        self.items_input = discord.ui.TextInput(
            label="Items (one per line)",
            style=discord.TextStyle.long,
            placeholder="Item name | Creator | Shop ID | Product URL",
            required=True,
            max_length=4000,
        )
        self.notes_input = discord.ui.TextInput(
            label="Notes",
            style=discord.TextStyle.long,
            required=False,
            max_length=1000,
        )
        self.add_item(self.agency_input)
        self.add_item(self.due_days_input)
        self.add_item(self.items_input)
        self.add_item(self.notes_input)

    async def on_submit(self, interaction: discord.Interaction) -> None:
        try:
            due_days = int(self.due_days_input.value)
        except ValueError:
            await interaction.response.send_message(
                "Due days must be a number between 1 and 7.", ephemeral=True
            )
            return
        if not 1 <= due_days <= 7:
            await interaction.response.send_message(
                "Due days must be a number between 1 and 7.", ephemeral=True
            )
            return

        # Link lookups can outlast the initial response window.
        await interaction.response.defer(ephemeral=True)
        items = await self.services.links.enrich_items(parse_items(self.items_input.value))
        valid = [item for item in items if item.is_valid()]
        if not valid:
            await interaction.followup.send(
                "Please add at least one valid item.", ephemeral=True
            )
            return

        draft = StreamDraft(
            due_days=due_days,
            organization_name=self.agency_input.value.strip() or None,
            priority=self.priority,
            category=self.category,
            notes=self.notes_input.value.strip() or None,
            items=valid,
        )
        try:
            record = await self.services.streams.create(draft)
        except AureliusError as exc:
            await interaction.followup.send(str(exc), ephemeral=True)
            return

        message = f"Stream created with {len(record.items)} item(s) ✨ (`{record.id[:8]}`)"
        warnings = self.services.streams.pop_warnings()
        if warnings:
            message += "\n⚠️ " + "\n⚠️ ".join(warnings)
        await interaction.followup.send(message, ephemeral=True)
