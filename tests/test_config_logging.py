import logging

from aurelius_bot.config import RemoteConfig, load_settings, remote_config_from_env
from aurelius_bot.logging_config import setup_logging


def test_load_settings(monkeypatch):
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "abc123")
    monkeypatch.delenv("AURELIUS_DATA_PATH", raising=False)
    monkeypatch.delenv("AURELIUS_SYNC_PER_GUILD", raising=False)
    s = load_settings()
    assert s.token == "abc123"
    assert s.data_path == "aurelius_data.json"
    assert s.sync_per_guild is True

    # empty token environment
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "")
    monkeypatch.setenv("AURELIUS_DATA_PATH", "/tmp/streams.json")
    monkeypatch.setenv("AURELIUS_SYNC_PER_GUILD", "false")
    s2 = load_settings()
    assert s2.token == ""
    assert s2.data_path == "/tmp/streams.json"
    assert s2.sync_per_guild is False


def test_remote_config_from_env(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
    assert remote_config_from_env() is None

    monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "key")
    assert remote_config_from_env() == RemoteConfig("https://demo.supabase.co", "key")
    assert not RemoteConfig("https://demo.supabase.co", " ").is_complete()


def test_setup_logging_idempotent():
    logger1 = setup_logging(logging.DEBUG)
    logger2 = setup_logging(logging.DEBUG)
    assert logger1 is logger2
    assert logger1.handlers  # at least one handler installed
