"""Registration of slash commands for the bot."""

from __future__ import annotations

import discord
from discord.ext import commands

from ..config import RemoteConfig
from ..core import captions
from ..core.errors import AureliusError, NotFound
from ..core.models import Category, OrganizationProfile, Priority, StreamRecord
from ..core.result import Err
from ..services import Services
from ..ui.modals import StreamModal
from ..ui.views import StreamView, stream_summary, stream_title, streams_embed

MESSAGE_LIMIT = 1900


def find_stream(services: Services, ref: str) -> StreamRecord:
    """Look a stream up by full id or by an unambiguous id prefix."""
    ref = ref.strip()
    matches = [r for r in services.streams.list() if r.id == ref]
    if not matches and len(ref) >= 4:
        matches = [r for r in services.streams.list() if r.id.startswith(ref)]
    if len(matches) != 1:
        raise NotFound("Stream not found.")
    return matches[0]


def find_agency(services: Services, ref: str) -> OrganizationProfile:
    """Look an agency up by id, falling back to a case-insensitive name match."""
    try:
        return services.profiles.get(ref)
    except NotFound:
        profile = services.profiles.find_by_name(ref)
        if profile is None:
            raise
        return profile


def format_captions(
    platform: str,
    result: str | dict[str, str],
    record: StreamRecord,
    combined: bool = False,
) -> str:
    """Render a generation result as one message, one code block per caption.

    With ``combined`` every caption goes into a single copyable block.
    """
    if isinstance(result, str) or (combined and result):
        text = captions.join_captions(result)
        blocks = [f"**{captions.PLATFORMS[platform]}**\n```\n{text}\n```"]
    else:
        names = {item.id: f"{item.name} by {item.creator_name}" for item in record.items}
        blocks = [
            f"**{names.get(item_id, item_id)}**\n```\n{text}\n```"
            for item_id, text in result.items()
        ]
    content = "\n".join(blocks) or "This stream has no items."
    if len(content) > MESSAGE_LIMIT:
        content = content[:MESSAGE_LIMIT] + "…"
    return content


def with_warnings(services: Services, message: str) -> str:
    warnings = services.streams.pop_warnings()
    if warnings:
        message += "\n⚠️ " + "\n⚠️ ".join(warnings)
    return message


def register_commands(bot: commands.Bot, services: Services) -> None:
    """Register the stream, caption, agency and cloud commands."""
    tree = bot.tree
    choices = getattr(
        discord.app_commands, "choices", lambda **_kwargs: (lambda func: func)
    )

    async def fail(interaction: discord.Interaction, exc: AureliusError) -> None:
        await interaction.response.send_message(str(exc), ephemeral=True)

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------
    @tree.command(name="stream_create", description="Create a new stream")
    @discord.app_commands.describe(
        priority="Stream priority", category="Type of stream"
    )
    @choices(
        priority=[discord.app_commands.Choice(name=p.value, value=p.value) for p in Priority],
        category=[discord.app_commands.Choice(name=c.value, value=c.value) for c in Category],
    )
    async def stream_create(
        interaction: discord.Interaction,
        priority: discord.app_commands.Choice[str] | None = None,
        category: discord.app_commands.Choice[str] | None = None,
    ) -> None:
        await interaction.response.send_modal(
            StreamModal(
                services,
                Priority(priority.value) if priority else Priority.MEDIUM,
                Category(category.value) if category else Category.SHOWCASE,
            )
        )

    @tree.command(name="stream_list", description="Show your streams")
    async def stream_list(interaction: discord.Interaction) -> None:
        if not services.streams.list():
            await interaction.response.send_message(
                "No streams yet. Use `/stream_create`.", ephemeral=True
            )
            return
        await interaction.response.send_message(
            embed=streams_embed(services.streams), ephemeral=True
        )

    @tree.command(name="stream_view", description="Show one stream with actions")
    @discord.app_commands.describe(stream_id="Stream")
    async def stream_view(interaction: discord.Interaction, stream_id: str) -> None:
        try:
            record = find_stream(services, stream_id)
        except AureliusError as exc:
            await fail(interaction, exc)
            return
        embed = discord.Embed(
            title=stream_title(record),
            description=stream_summary(record, services.streams.clock()),
        )
        await interaction.response.send_message(
            embed=embed, view=StreamView(services.streams, record.id), ephemeral=True
        )

    @tree.command(name="stream_complete", description="Mark a stream completed")
    @discord.app_commands.describe(stream_id="Stream")
    async def stream_complete(interaction: discord.Interaction, stream_id: str) -> None:
        try:
            record = find_stream(services, stream_id)
            await services.streams.complete(record.id)
        except AureliusError as exc:
            await fail(interaction, exc)
            return
        await interaction.response.send_message(
            with_warnings(services, "Stream completed successfully! ✨"), ephemeral=True
        )

    @tree.command(name="stream_delete", description="Delete a stream permanently")
    @discord.app_commands.describe(stream_id="Stream")
    async def stream_delete(interaction: discord.Interaction, stream_id: str) -> None:
        try:
            record = find_stream(services, stream_id)
        except AureliusError as exc:
            await fail(interaction, exc)
            return
        await services.streams.delete(record.id)
        await interaction.response.send_message(
            with_warnings(services, "Stream deleted."), ephemeral=True
        )

    async def stream_autocomplete(
        interaction: discord.Interaction, current: str
    ) -> list[discord.app_commands.Choice[str]]:
        current_lower = current.lower()
        return [
            discord.app_commands.Choice(name=stream_title(r)[:100], value=r.id)
            for r in services.streams.list()
            if current_lower in stream_title(r).lower() or r.id.startswith(current_lower)
        ][:25]

    for command in (stream_view, stream_complete, stream_delete):
        if hasattr(command, "autocomplete"):
            command.autocomplete("stream_id")(stream_autocomplete)

    # ------------------------------------------------------------------
    # Captions
    # ------------------------------------------------------------------
    @tree.command(name="caption", description="Generate captions for a stream")
    @discord.app_commands.describe(
        stream_id="Stream",
        platform="Where the caption will be posted",
        agency="Agency whose templates to use",
        combined="Put every caption in one block",
    )
    @choices(
        platform=[
            discord.app_commands.Choice(name=label, value=key)
            for key, label in captions.PLATFORMS.items()
        ]
    )
    async def caption(
        interaction: discord.Interaction,
        stream_id: str,
        platform: discord.app_commands.Choice[str],
        agency: str | None = None,
        combined: bool = False,
    ) -> None:
        try:
            record = find_stream(services, stream_id)
            profile = find_agency(services, agency) if agency else None
            result = captions.generate_for_platform(platform.value, record, profile)
        except AureliusError as exc:
            await fail(interaction, exc)
            return
        await interaction.response.send_message(
            format_captions(platform.value, result, record, combined), ephemeral=True
        )

    async def agency_autocomplete(
        interaction: discord.Interaction, current: str
    ) -> list[discord.app_commands.Choice[str]]:
        current_lower = current.lower()
        return [
            discord.app_commands.Choice(name=p.name, value=p.id)
            for p in services.profiles.list()
            if current_lower in p.name.lower()
        ][:25]

    if hasattr(caption, "autocomplete"):
        caption.autocomplete("stream_id")(stream_autocomplete)
        caption.autocomplete("agency")(agency_autocomplete)

    # ------------------------------------------------------------------
    # Agencies
    # ------------------------------------------------------------------
    @tree.command(name="agency_add", description="Add an agency template profile")
    @discord.app_commands.describe(name="Agency name")
    async def agency_add(interaction: discord.Interaction, name: str) -> None:
        if services.profiles.find_by_name(name) is not None:
            await interaction.response.send_message(
                f"Agency `{name.strip()}` already exists.", ephemeral=True
            )
            return
        try:
            profile = services.profiles.add(name)
        except AureliusError as exc:
            await fail(interaction, exc)
            return
        await interaction.response.send_message(
            f"Agency `{profile.name}` added successfully! ✨", ephemeral=True
        )

    @tree.command(name="agency_template", description="Set an agency caption template")
    @discord.app_commands.describe(
        agency="Agency",
        platform="Template to change",
        text="Template text; leave empty to restore the default",
    )
    @choices(
        platform=[
            discord.app_commands.Choice(name=label, value=key)
            for key, label in captions.PLATFORMS.items()
        ]
    )
    async def agency_template(
        interaction: discord.Interaction,
        agency: str,
        platform: discord.app_commands.Choice[str],
        text: str = "",
    ) -> None:
        try:
            profile = find_agency(services, agency)
            profile = services.profiles.set_template(profile.id, platform.value, text)
        except AureliusError as exc:
            await fail(interaction, exc)
            return
        state = "updated" if platform.value in profile.templates else "reset to default"
        await interaction.response.send_message(
            f"{captions.PLATFORMS[platform.value]} template for `{profile.name}` {state}.",
            ephemeral=True,
        )

    @tree.command(name="agency_delete", description="Delete an agency template profile")
    @discord.app_commands.describe(agency="Agency")
    async def agency_delete(interaction: discord.Interaction, agency: str) -> None:
        services.profiles.delete(agency)
        await interaction.response.send_message("Agency deleted.", ephemeral=True)

    for command in (agency_template, agency_delete):
        if hasattr(command, "autocomplete"):
            command.autocomplete("agency")(agency_autocomplete)

    # ------------------------------------------------------------------
    # Cloud sync
    # ------------------------------------------------------------------
    @tree.command(name="cloud_connect", description="Connect your own Supabase database")
    @discord.app_commands.describe(endpoint="Project URL", api_key="Anon API key")
    async def cloud_connect(
        interaction: discord.Interaction, endpoint: str, api_key: str
    ) -> None:
        await interaction.response.defer(ephemeral=True)
        result = await services.mirror.test_connection(endpoint, api_key)
        if isinstance(result, Err):
            await interaction.edit_original_response(
                content=f"Connection failed: {result.error}"
            )
            return
        services.configure_remote(
            RemoteConfig(endpoint=endpoint.strip(), api_key=api_key.strip())
        )
        await interaction.edit_original_response(
            content=f"{result.value} Database configuration saved."
        )

    @tree.command(name="cloud_signin", description="Sync your streams with the cloud")
    async def cloud_signin(interaction: discord.Interaction) -> None:
        if not services.mirror.is_configured():
            await interaction.response.send_message(
                "Cloud sync is not configured. Use `/cloud_connect` first.",
                ephemeral=True,
            )
            return
        await interaction.response.defer(ephemeral=True)
        try:
            outcome = await services.sync.handle_auth_event(str(interaction.user.id), True)
        except AureliusError as exc:
            await interaction.edit_original_response(content=str(exc))
            return
        if outcome is None:
            await interaction.edit_original_response(content="Already signed in.")
            return
        lines = [
            f"Signed in. Uploaded {len(outcome.uploaded)} stream(s); "
            f"{len(outcome.records)} stream(s) now on this device."
        ]
        if services.mirror.last_error:
            lines.append(f"⚠️ {services.mirror.last_error}")
        lines.extend(f"⚠️ {w}" for w in outcome.warnings)
        await interaction.edit_original_response(content="\n".join(lines))

    @tree.command(name="cloud_signout", description="Stop syncing streams to the cloud")
    async def cloud_signout(interaction: discord.Interaction) -> None:
        await services.sync.handle_auth_event(None, False)
        await interaction.response.send_message(
            "Signed out. Streams are kept on this device only.", ephemeral=True
        )
