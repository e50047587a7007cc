"""Tests for the key-value stores and the persistent store adapter."""

import json
from urllib.parse import quote

import pytest
from gspread.utils import a1_to_rowcol

from src.config import GoogleSheetsSettings
from src.services.storage import (
    CollectionKeys,
    FileKeyValueStore,
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    PersistentStoreAdapter,
    SnapshotDecodeError,
    StorageConnectionError,
    StorageError,
)


class FakeWorksheet:
    """Just enough of gspread.Worksheet for the key-value store."""

    def __init__(self, rows=None):
        self.rows = rows if rows is not None else [["key", "value"]]
        self.appended = []
        self.updated = []

    def get_all_values(self):
        return [list(row) for row in self.rows]

    def append_row(self, values, value_input_option=None):
        self.appended.append(value_input_option)
        self.rows.append(list(values))

    def update(self, values=None, range_name=None, value_input_option=None):
        self.updated.append(value_input_option)
        row, col = a1_to_rowcol(range_name)
        cells = self.rows[row - 1]
        while len(cells) < col:
            cells.append("")
        cells[col - 1] = values[0][0]


class FakeSheetsClient:
    def __init__(self, sheet=None, error=None):
        self.sheet = sheet or FakeWorksheet()
        self.error = error

    def get_ledger_sheet(self):
        if self.error:
            raise self.error
        return self.sheet


class TestCollectionKeys:

    def test_default_prefix(self):
        keys = CollectionKeys.with_prefix()
        assert keys.transactions == "@moneyflow_transactions"
        assert keys.goals == "@moneyflow_goals"
        assert keys.all() == ("@moneyflow_transactions", "@moneyflow_goals")

    def test_custom_prefix(self):
        keys = CollectionKeys.with_prefix("test:")
        assert keys.transactions == "test:transactions"


class TestInMemoryStore:

    @pytest.mark.asyncio
    async def test_absent_key_is_none(self):
        store = InMemoryKeyValueStore()
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_set_replaces_value(self):
        store = InMemoryKeyValueStore({"k": "old"})
        await store.set("k", "new")
        assert await store.get("k") == "new"
        assert store.snapshot() == {"k": "new"}


class TestFileStore:

    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path):
        store = FileKeyValueStore(tmp_path / "ledger")
        assert await store.get("@moneyflow_goals") is None

        await store.set("@moneyflow_goals", "[]")
        assert await store.get("@moneyflow_goals") == "[]"

    @pytest.mark.asyncio
    async def test_key_is_encoded_into_file_name(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        await store.set("a/b", "x")
        assert (tmp_path / f"{quote('a/b', safe='')}.json").read_text() == "x"

    @pytest.mark.asyncio
    async def test_overwrite_leaves_no_temp_files(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        await store.set("k", "one")
        await store.set("k", "two")
        assert await store.get("k") == "two"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    @pytest.mark.asyncio
    async def test_unreadable_key_raises_storage_error(self, tmp_path):
        (tmp_path / "k.json").mkdir()
        store = FileKeyValueStore(tmp_path)
        with pytest.raises(StorageError):
            await store.get("k")

    @pytest.mark.asyncio
    async def test_unwritable_directory_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        store = FileKeyValueStore(blocker)
        with pytest.raises(StorageError):
            await store.set("k", "v")


class TestGoogleSheetsStore:

    @pytest.mark.asyncio
    async def test_set_appends_then_updates(self):
        sheet = FakeWorksheet()
        store = GoogleSheetsKeyValueStore(FakeSheetsClient(sheet))

        await store.set("@moneyflow_transactions", "[]")
        assert sheet.rows[1] == ["@moneyflow_transactions", "[]"]
        assert sheet.appended == ["RAW"]

        await store.set("@moneyflow_transactions", '[{"id": "1"}]')
        assert len(sheet.rows) == 2
        assert await store.get("@moneyflow_transactions") == '[{"id": "1"}]'
        assert sheet.updated == ["RAW"]

    @pytest.mark.asyncio
    async def test_snapshot_is_stored_as_literal_text(self):
        sheet = FakeWorksheet([["key", "value"], ["k", "[]"]])
        store = GoogleSheetsKeyValueStore(FakeSheetsClient(sheet))

        await store.set("k", "=SUM(1,2)")

        assert sheet.rows[1] == ["k", "=SUM(1,2)"]
        assert sheet.updated == ["RAW"]

    @pytest.mark.asyncio
    async def test_header_row_is_not_a_key(self):
        store = GoogleSheetsKeyValueStore(FakeSheetsClient())
        assert await store.get("key") is None

    @pytest.mark.asyncio
    async def test_backend_failure_becomes_storage_error(self):
        store = GoogleSheetsKeyValueStore(
            FakeSheetsClient(error=RuntimeError("quota exceeded"))
        )
        with pytest.raises(StorageError, match="quota exceeded"):
            await store.get("k")
        with pytest.raises(StorageError):
            await store.set("k", "v")

    def test_missing_credentials_raise_connection_error(self, tmp_path):
        missing = str(tmp_path / "missing.json")
        with pytest.warns(UserWarning):
            settings = GoogleSheetsSettings(
                credentials_path=missing,
                spreadsheet_id="sheet-id",
            )
        client = GoogleSheetsClient(settings)
        with pytest.raises(StorageConnectionError):
            client.connect()


class TestPersistentStoreAdapter:

    @pytest.mark.asyncio
    async def test_absent_collection_is_empty(self, adapter):
        assert await adapter.load_collection("@moneyflow_goals") == []

    @pytest.mark.asyncio
    async def test_save_then_load(self, adapter, store):
        records = [{"id": "1", "title": "Bike"}]
        await adapter.save_collection("@moneyflow_goals", records)
        assert json.loads(store.snapshot()["@moneyflow_goals"]) == records
        assert await adapter.load_collection("@moneyflow_goals") == records

    @pytest.mark.asyncio
    async def test_invalid_json_raises_decode_error(self):
        adapter = PersistentStoreAdapter(InMemoryKeyValueStore({"k": "{not json"}))
        with pytest.raises(SnapshotDecodeError):
            await adapter.load_collection("k")

    @pytest.mark.asyncio
    async def test_non_array_raises_decode_error(self):
        adapter = PersistentStoreAdapter(InMemoryKeyValueStore({"k": '{"id": 1}'}))
        with pytest.raises(SnapshotDecodeError, match="JSON array"):
            await adapter.load_collection("k")

    @pytest.mark.asyncio
    async def test_backend_exceptions_are_wrapped(self, failing_store_cls):
        adapter = PersistentStoreAdapter(failing_store_cls(fail_get=True, fail_set=True))

        with pytest.raises(StorageError) as read_error:
            await adapter.get("k")
        assert isinstance(read_error.value.__cause__, OSError)

        with pytest.raises(StorageError) as write_error:
            await adapter.set("k", "[]")
        assert "disk full" in str(write_error.value)
