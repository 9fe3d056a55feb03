"""Slash command registration for the Aurelius bot."""

from .register import register_commands

__all__ = ["register_commands"]
