"""Shared fixtures: in-memory stand-ins for the Supabase collaborators."""

from typing import Any, Dict, List

import pytest

from lib.record_store import RecordStore
from lib.workshop import AgendaItem, WorkshopRecord
from utils.errors import SupabaseError


class FakeWorkshopsTable:
    """Row store with the WorkshopsTable interface and switchable failures.

    Updates merge into the existing row, touching only the columns they name.
    """

    def __init__(self, rows: List[Dict[str, Any]] | None = None) -> None:
        self.rows = [dict(row) for row in rows or []]
        self.fail_on: set[str] = set()
        self.calls: List[str] = []

    def _check(self, action: str) -> None:
        self.calls.append(action)
        if action in self.fail_on:
            raise SupabaseError(f"{action} rejected by remote")

    def select_all(self) -> List[Dict[str, Any]]:
        self._check("select")
        return sorted(self.rows, key=lambda row: row.get("date", ""), reverse=True)

    def insert(self, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        self._check("insert")
        self.rows.append(dict(row))
        return [row]

    def update(self, record_id: str, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        self._check("update")
        self.rows = [{**existing, **row} if existing["id"] == record_id else existing for existing in self.rows]
        return [row]

    def delete(self, record_id: str) -> List[Dict[str, Any]]:
        self._check("delete")
        self.rows = [existing for existing in self.rows if existing["id"] != record_id]
        return []

    def upsert(self, rows: List[Dict[str, Any]], on_conflict: str = "id") -> List[Dict[str, Any]]:
        self._check("upsert")
        by_id = {row[on_conflict]: row for row in self.rows}
        for row in rows:
            by_id[row[on_conflict]] = dict(row)
        self.rows = list(by_id.values())
        return rows


def make_record(record_id: str, title: str = "Workshop", **overrides: Any) -> WorkshopRecord:
    data: Dict[str, Any] = {
        "id": record_id,
        "title": title,
        "lead": "Ms. Priya Rai",
        "venue": "Darshan Academy, Delhi",
        "date": "2024-06-01",
        "agenda": [AgendaItem(particulars="Opening", speaker_name="Ms. Priya Rai")],
    }
    data.update(overrides)
    return WorkshopRecord(**data)


@pytest.fixture
def remote() -> FakeWorkshopsTable:
    return FakeWorkshopsTable(
        [
            make_record("100", "Older Workshop", date="2023-01-10").to_payload(),
            make_record("200", "Newer Workshop", date="2024-02-20").to_payload(),
        ]
    )


@pytest.fixture
def surfaced() -> list:
    return []


@pytest.fixture
def store(remote: FakeWorkshopsTable, surfaced: list) -> RecordStore:
    record_store = RecordStore(
        remote,
        fallback_mode="empty",
        seed_on_empty=False,
        on_error=surfaced.append,
    )
    record_store.load()
    return record_store


@pytest.fixture
def make_workshop():
    return make_record
