"""Minimal stand-ins for the ``discord`` package.

The bot layer only needs a handful of names at import time; these stubs let
the commands, modals and views be exercised without the real dependency.
"""

from __future__ import annotations

import sys
import types

BOT_MODULES = (
    "aurelius_bot.bot",
    "aurelius_bot.commands",
    "aurelius_bot.commands.register",
    "aurelius_bot.ui.modals",
    "aurelius_bot.ui.views",
)


class Choice:
    def __init__(self, name, value):
        self.name = name
        self.value = value

    def __class_getitem__(cls, item):
        return cls


class Embed:
    def __init__(self, title=None, description=None, **kwargs):
        self.title = title
        self.description = description
        self.fields = []

    def add_field(self, name, value, inline=True):
        self.fields.append((name, value))


class Modal:
    def __init__(self, *args, **kwargs):
        self.children = []

    def add_item(self, item):
        self.children.append(item)

    def __init_subclass__(cls, **kwargs):
        pass


class View:
    def __init__(self, *args, **kwargs):
        self.children = []

    def add_item(self, item):
        self.children.append(item)


class TextInput:
    def __init__(self, *args, default=None, **kwargs):
        self.value = default or ""


class Tree:
    def __init__(self):
        self.commands = {}

    def command(self, name, description=None):
        def deco(func):
            self.commands[name] = func
            return func

        return deco

    async def sync(self, guild=None):
        self.synced = True


class Response:
    def __init__(self):
        self.messages = []
        self.modals = []
        self.deferred = False

    async def send_message(self, content=None, **kwargs):
        self.messages.append((content, kwargs))

    async def send_modal(self, modal):
        self.modals.append(modal)

    async def defer(self, **kwargs):
        self.deferred = True


class Followup:
    def __init__(self):
        self.messages = []

    async def send(self, content=None, **kwargs):
        self.messages.append((content, kwargs))


class Interaction:
    def __init__(self, user_id=1):
        self.user = types.SimpleNamespace(id=user_id)
        self.response = Response()
        self.followup = Followup()
        self.edits = []

    async def edit_original_response(self, **kwargs):
        self.edits.append(kwargs)

    @property
    def last_message(self):
        messages = self.followup.messages or self.response.messages
        return messages[-1][0]


def install(monkeypatch) -> types.ModuleType:
    """Install the stub package and drop cached bot-layer modules."""
    discord = types.ModuleType("discord")
    discord.Interaction = Interaction
    discord.Embed = Embed
    discord.TextStyle = types.SimpleNamespace(long=2, short=1)
    discord.ButtonStyle = types.SimpleNamespace(success=1, danger=2, primary=3)
    discord.Game = lambda name: name

    class Intents:
        message_content = True

        @staticmethod
        def default():
            return Intents()

    discord.Intents = Intents

    def passthrough(**_kwargs):
        return lambda func: func

    discord.app_commands = types.SimpleNamespace(
        Choice=Choice, describe=passthrough, choices=passthrough
    )

    ui = types.ModuleType("discord.ui")
    ui.Modal = Modal
    ui.View = View
    ui.TextInput = TextInput
    ui.Button = object
    ui.button = passthrough
    discord.ui = ui

    ext = types.ModuleType("discord.ext")
    commands = types.ModuleType("discord.ext.commands")

    class Bot:
        def __init__(self, *args, **kwargs):
            self.tree = Tree()
            self.guilds = []

        async def setup_hook(self):
            pass

        async def close(self):
            pass

    commands.Bot = Bot
    ext.commands = commands

    monkeypatch.setitem(sys.modules, "discord", discord)
    monkeypatch.setitem(sys.modules, "discord.ui", ui)
    monkeypatch.setitem(sys.modules, "discord.ext", ext)
    monkeypatch.setitem(sys.modules, "discord.ext.commands", commands)
    for name in BOT_MODULES:
        monkeypatch.delitem(sys.modules, name, raising=False)
    return discord
