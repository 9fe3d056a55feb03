"""Tests for the ``JSONStorage`` persistence layer."""

import datetime
import json
from pathlib import Path

import pytest

from aurelius_bot.config import RemoteConfig
from aurelius_bot.core.models import LineItem, OrganizationProfile, StreamRecord
from aurelius_bot.core.storage import SCHEMA_VERSION, JSONStorage

from .fakes import FIXED_NOW


def make_record(**kwargs) -> StreamRecord:
    return StreamRecord(due_at=FIXED_NOW + datetime.timedelta(days=1), created_at=FIXED_NOW, **kwargs)


def test_new_file_written_with_schema_version(tmp_path: Path) -> None:
    """A fresh storage creates its document with a schema version."""
    path = tmp_path / "data.json"
    JSONStorage(path)
    data = json.loads(path.read_text())
    assert data["schema_version"] == SCHEMA_VERSION
    assert data["streams"] == []
    assert data["remote"] is None


def test_persistence_across_instances(tmp_path: Path) -> None:
    """Data survives across multiple storage instances."""
    path = tmp_path / "data.json"
    storage = JSONStorage(path)
    record = make_record(items=[LineItem(name="Gown", creator_name="Lira")])
    storage.save_streams([record])
    storage.save_organizations([OrganizationProfile(name="Velvet")])
    storage.save_remote_config(RemoteConfig("https://x.supabase.co", "key"))

    again = JSONStorage(path)
    assert again.load_streams() == [record]
    assert [o.name for o in again.load_organizations()] == ["Velvet"]
    assert again.load_remote_config() == RemoteConfig("https://x.supabase.co", "key")


def test_slots_are_independent(storage: JSONStorage) -> None:
    """Saving one slot keeps the others."""
    record = make_record()
    storage.save_streams([record])
    storage.save_organizations([OrganizationProfile(name="Velvet")])
    storage.save_remote_config(None)
    assert storage.load_streams() == [record]


def test_failed_write_keeps_previous_state(storage: JSONStorage, monkeypatch) -> None:
    """A write error propagates and leaves the stored set unchanged."""
    first = make_record()
    storage.save_streams([first])

    def broken(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("aurelius_bot.core.storage.os.replace", broken)
    with pytest.raises(OSError):
        storage.save_streams([first, make_record()])
    assert storage.load_streams() == [first]


def test_unversioned_document_is_migrated(tmp_path: Path) -> None:
    """Documents without a schema version load and are upgraded."""
    path = tmp_path / "data.json"
    path.write_text(
        json.dumps(
            {
                "streams": [
                    {
                        "id": 1715774400000,
                        "agency_name": "Velvet",
                        "due_date": "2024-05-18T12:00:00+00:00",
                        "status": "active",
                        "priority": "high",
                        "stream_type": "open",
                        "created_at": "2024-05-15T12:00:00+00:00",
                        "items": [
                            {"id": 1, "item_name": "Gown", "creator_name": "Lira"}
                        ],
                    }
                ],
                "remote": {"url": "https://x.supabase.co", "anonKey": "key"},
            }
        )
    )
    storage = JSONStorage(path)
    (record,) = storage.load_streams()
    assert record.id == "1715774400000"
    assert record.organization_name == "Velvet"
    assert record.items[0].name == "Gown"
    assert storage.load_remote_config() == RemoteConfig("https://x.supabase.co", "key")
