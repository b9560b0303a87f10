"""Tests for the plugin store module."""

import asyncio
import json
import pytest
from unittest.mock import patch

from mcpsync.errors import StorageWriteError
from mcpsync.plugins.models import InvocationSpec, Origin, PluginRecord
from mcpsync.plugins.store import PluginStore


class TestPluginStore:
    """Tests for PluginStore."""

    def test_load_missing_file(self, tmp_path):
        """Test loading from a store that does not exist yet."""
        store = PluginStore(tmp_path / "store.json")
        assert asyncio.run(store.load("plugins")) is None

    def test_save_and_load(self, tmp_path):
        """Test values survive a save/load cycle."""
        store = PluginStore(tmp_path / "nested" / "store.json")
        asyncio.run(store.save("plugins", [{"id": "a"}]))

        assert asyncio.run(store.load("plugins")) == [{"id": "a"}]

    def test_save_keeps_other_keys(self, tmp_path):
        """Test saving one key leaves the rest of the store alone."""
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

        store = PluginStore(path)
        asyncio.run(store.save("plugins", []))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {"theme": "dark", "plugins": []}

    def test_load_corrupt_file_is_empty(self, tmp_path, caplog):
        """Test unreadable stores load as empty and log a warning."""
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")

        store = PluginStore(path)
        assert asyncio.run(store.load("plugins")) is None
        assert "Failed to read plugins" in caplog.text

    def test_load_non_object_file_is_empty(self, tmp_path):
        """Test a store that is not a JSON object loads as empty."""
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")

        assert PluginStore(path).load_sync("plugins") is None

    def test_save_failure_raises(self, tmp_path):
        """Test write failures propagate as StorageWriteError."""
        store = PluginStore(tmp_path / "store.json")
        with patch("mcpsync.plugins.store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageWriteError):
                asyncio.run(store.save("plugins", []))
        assert not (tmp_path / "store.json").exists()
        assert list(tmp_path.iterdir()) == []


class TestStoreTransaction:
    """Tests for StoreTransaction."""

    def test_load_records(self, tmp_path):
        """Test stored dicts load as plugin records."""
        path = tmp_path / "store.json"
        path.write_text(json.dumps({
            "plugins": [
                {"uuid": "u1", "id": "mcp_a", "origin": "managed"},
                {"uuid": "u2", "id": "custom"},
            ],
        }), encoding="utf-8")
        store = PluginStore(path)

        async def run():
            async with store.transaction("plugins") as txn:
                return await txn.load()

        records = asyncio.run(run())
        assert [r.origin for r in records] == [Origin.MANAGED, Origin.FOREIGN]

    def test_load_non_list_value(self, tmp_path):
        """Test a non-list value under the key loads as no records."""
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"plugins": {"oops": True}}), encoding="utf-8")
        store = PluginStore(path)

        async def run():
            async with store.transaction("plugins") as txn:
                return await txn.load()

        assert asyncio.run(run()) == []

    def test_load_malformed_items(self, tmp_path):
        """Test bad entries inside a valid list still load."""
        path = tmp_path / "store.json"
        path.write_text(json.dumps({
            "plugins": [
                "junk",
                {"uuid": None, "id": "mcp_a", "origin": "managed", "openaiSpec": "bad", "title": 5},
                {"uuid": "u2", "id": "custom"},
            ],
        }), encoding="utf-8")
        store = PluginStore(path)

        async def run():
            async with store.transaction("plugins") as txn:
                return await txn.load()

        records = asyncio.run(run())
        assert [r.origin for r in records] == [Origin.FOREIGN, Origin.MANAGED, Origin.FOREIGN]
        assert records[0].to_dict() == "junk"
        assert records[1].identity == ""
        assert records[1].display.title == ""
        assert records[1].invocation_spec == InvocationSpec("", "")

    def test_load_unparseable_item_kept_raw(self, tmp_path, caplog):
        """Test an entry that fails to parse is logged and written back unchanged."""
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"plugins": [{"id": "odd"}]}), encoding="utf-8")
        store = PluginStore(path)

        async def run():
            async with store.transaction("plugins") as txn:
                return await txn.load()

        with patch.object(PluginRecord, "from_dict", side_effect=TypeError("boom")):
            records = asyncio.run(run())

        assert len(records) == 1
        assert not records[0].is_managed
        assert records[0].to_dict() == {"id": "odd"}
        assert "Failed to read plugins" in caplog.text

    def test_save_records(self, tmp_path):
        """Test records are written in stored form."""
        store = PluginStore(tmp_path / "store.json")
        foreign = PluginRecord.from_dict({"uuid": "u", "id": "custom", "x": 1})

        async def run():
            async with store.transaction("plugins") as txn:
                await txn.save([foreign])

        asyncio.run(run())
        assert store.load_sync("plugins") == [{"uuid": "u", "id": "custom", "x": 1}]

    def test_transactions_are_exclusive(self, tmp_path):
        """Test a second transaction waits for the first to finish."""
        store = PluginStore(tmp_path / "store.json")
        events = []

        async def worker(name):
            async with store.transaction("plugins"):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        async def run():
            await asyncio.gather(worker("a"), worker("b"))

        asyncio.run(run())
        assert events == ["a-start", "a-end", "b-start", "b-end"]
