import asyncio
import types

import pytest

from aurelius_bot.core.models import Category, Priority
from aurelius_bot.core.errors import RemoteError
from aurelius_bot.core.result import Err

from . import discord_stubs


@pytest.fixture()
def modal_cls(monkeypatch):
    discord_stubs.install(monkeypatch)
    from aurelius_bot.ui.modals import StreamModal

    return StreamModal


@pytest.fixture()
def services(store):
    class Links:
        async def enrich_items(self, items):
            return items

    return types.SimpleNamespace(streams=store, links=Links())


def build(modal_cls, services, items="Gown | Lira | 77", due="3", agency="Velvet"):
    modal = modal_cls(services, Priority.HIGH, Category.SPONSORED)
    modal.agency_input.value = agency
    modal.due_days_input.value = due
    modal.items_input.value = items
    modal.notes_input.value = ""
    return modal


def submit(modal):
    interaction = discord_stubs.Interaction()
    asyncio.run(modal.on_submit(interaction))
    return interaction.last_message


def test_parse_item_line(modal_cls):
    from aurelius_bot.ui.modals import parse_item_line, parse_items

    item = parse_item_line(" Gown | Lira | 77 | https://www.imvu.com/next/shop/product-5/ ")
    assert (item.name, item.creator_name, item.creator_id) == ("Gown", "Lira", "77")
    assert item.source_url.endswith("product-5/")
    assert parse_item_line("Veil").creator_name == ""
    assert len(parse_items("A | a\n\n  \nB | b")) == 2


def test_submit_creates_stream(modal_cls, services):
    message = submit(build(modal_cls, services, items="Gown | Lira | 77\nbroken line"))
    assert message.startswith("Stream created with 1 item(s)")
    (record,) = services.streams.list()
    assert record.organization_name == "Velvet"
    assert record.priority is Priority.HIGH
    assert record.category is Category.SPONSORED
    assert record.notes is None
    assert [i.name for i in record.items] == ["Gown"]


@pytest.mark.parametrize("due", ["0", "8", "x"])
def test_submit_rejects_bad_due_days(modal_cls, services, due):
    assert "between 1 and 7" in submit(build(modal_cls, services, due=due))
    assert services.streams.list() == []


def test_submit_requires_valid_item(modal_cls, services):
    assert submit(build(modal_cls, services, items="Gown |")) == "Please add at least one valid item."


def test_submit_uses_enriched_items(modal_cls, services):
    class Links:
        async def enrich_items(self, items):
            return [i.model_copy(update={"name": "Silk Gown", "creator_name": "Lira", "external_id": "5"}) for i in items]

    services.links = Links()
    submit(build(modal_cls, services, items=" |  | | https://www.imvu.com/next/shop/product-5/"))
    (record,) = services.streams.list()
    assert record.items[0].external_id == "5"


def test_submit_reports_sync_warning(modal_cls, services, mirror):
    async def failing_create(record):
        return Err(RemoteError("offline"))

    mirror.create = failing_create
    services.streams.sign_in("u1")
    message = submit(build(modal_cls, services))
    assert "failed to sync to cloud: offline" in message
    assert len(services.streams.list()) == 1


def test_submit_defers_before_link_lookups(modal_cls, services):
    seen = []

    class Links:
        async def enrich_items(self, items):
            seen.append(interaction.response.deferred)
            return items

    services.links = Links()
    interaction = discord_stubs.Interaction()
    asyncio.run(build(modal_cls, services).on_submit(interaction))

    assert seen == [True]
    assert interaction.response.messages == []
    assert interaction.last_message.startswith("Stream created")


def test_bad_due_days_answered_without_deferring(modal_cls, services):
    interaction = discord_stubs.Interaction()
    asyncio.run(build(modal_cls, services, due="9").on_submit(interaction))
    assert interaction.response.deferred is False
    assert interaction.followup.messages == []
