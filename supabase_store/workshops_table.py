"""Remote persistence for workshop rows in Supabase."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from supabase import Client

from lib.config import WORKSHOPS_TABLE
from utils.errors import SupabaseError

logger = logging.getLogger(__name__)


class WorkshopsTable:
    """Thin wrapper over the ``workshops`` table keyed by text ``id``."""

    def __init__(self, client: Optional[Client] = None, table_name: str = WORKSHOPS_TABLE):
        self._client = client
        self.table_name = table_name

    @property
    def client(self) -> Client:
        if self._client is None:
            from supabase_store.supabase_client import get_supabase_client

            self._client = get_supabase_client()
        return self._client

    def _execute(self, action: str, build: Callable[[Any], Any]) -> List[Dict[str, Any]]:
        """Run a query builder and turn any failure into ``SupabaseError``."""
        try:
            response = build(self.client.table(self.table_name)).execute()
        except Exception as exc:
            logger.error("Supabase %s.%s failed: %s", self.table_name, action, exc)
            raise SupabaseError(f"{action} on '{self.table_name}' failed: {exc}") from exc
        return response.data or []

    def select_all(self) -> List[Dict[str, Any]]:
        """All rows, newest workshop date first."""
        return self._execute("select", lambda table: table.select("*").order("date", desc=True))

    def insert(self, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._execute("insert", lambda table: table.insert(row))

    def update(self, record_id: str, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._execute("update", lambda table: table.update(row).eq("id", record_id))

    def delete(self, record_id: str) -> List[Dict[str, Any]]:
        return self._execute("delete", lambda table: table.delete().eq("id", record_id))

    def upsert(self, rows: List[Dict[str, Any]], on_conflict: str = "id") -> List[Dict[str, Any]]:
        return self._execute("upsert", lambda table: table.upsert(rows, on_conflict=on_conflict))
