"""Tests for the Supabase workshops table wrapper against a recording client."""

from types import SimpleNamespace

import pytest

from supabase_store.workshops_table import WorkshopsTable
from utils.errors import SupabaseError


class RecordingQuery:
    """Chainable query builder that remembers each call."""

    def __init__(self, log: list, data=None, error: Exception | None = None) -> None:
        self.log = log
        self.data = data
        self.error = error

    def __getattr__(self, name):
        def call(*args, **kwargs):
            self.log.append((name, args, kwargs))
            return self

        return call

    def execute(self):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.data)


class RecordingClient:
    def __init__(self, data=None, error: Exception | None = None) -> None:
        self.log: list = []
        self.tables: list = []
        self.data = data
        self.error = error

    def table(self, name: str) -> RecordingQuery:
        self.tables.append(name)
        return RecordingQuery(self.log, self.data, self.error)


def test_select_all_orders_by_date_descending() -> None:
    client = RecordingClient(data=[{"id": "1"}])
    rows = WorkshopsTable(client, table_name="workshops").select_all()
    assert rows == [{"id": "1"}]
    assert client.tables == ["workshops"]
    assert client.log == [("select", ("*",), {}), ("order", ("date",), {"desc": True})]


def test_update_and_delete_filter_on_id() -> None:
    client = RecordingClient(data=None)
    table = WorkshopsTable(client)
    assert table.update("7", {"title": "New"}) == []
    table.delete("7")
    assert ("eq", ("id", "7"), {}) in client.log
    assert client.log[0] == ("update", ({"title": "New"},), {})
    assert client.log[2] == ("delete", (), {})


def test_upsert_passes_conflict_column() -> None:
    client = RecordingClient(data=[])
    WorkshopsTable(client).upsert([{"id": "1"}])
    assert client.log == [("upsert", ([{"id": "1"}],), {"on_conflict": "id"})]


def test_failures_are_wrapped_in_supabase_error() -> None:
    client = RecordingClient(error=RuntimeError("connection reset"))
    with pytest.raises(SupabaseError) as excinfo:
        WorkshopsTable(client, table_name="workshops").insert({"id": "1"})
    assert "insert on 'workshops'" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, RuntimeError)
