"""Canonical in-memory workshop archive reconciled with the remote table."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from lib import config
from lib.normalize import ensure_defaults, to_remote_row
from lib.optimistic import optimistic_mutation
from lib.seed import seed_workshops
from lib.workshop import WorkshopRecord
from supabase_store.workshops_table import WorkshopsTable
from utils.decorators import log_execution
from utils.errors import PersistenceError, RecordNotFoundError, ValidationError
from utils.logging import log_error, log_event

logger = logging.getLogger(__name__)

COMPONENT = "record_store"

ErrorReporter = Callable[[PersistenceError], None]


@dataclass
class LoadResult:
    records: List[WorkshopRecord] = field(default_factory=list)
    degraded: bool = False
    source: str = "remote"
    discarded: bool = False


def _newest_first(records: List[WorkshopRecord]) -> List[WorkshopRecord]:
    return sorted(records, key=lambda record: record.date, reverse=True)


class RecordStore:
    """
    Owns the session's ordered list of workshop records.

    Only ``load``, ``add``, ``update`` and ``delete`` change the list, one at a
    time under the store lock, in the order they are called. Each
    mutation is applied locally first; if the remote write fails the list is
    restored to its previous snapshot, the failure is reported once and a
    ``PersistenceError`` is raised. Nothing is retried.
    """

    def __init__(
        self,
        remote: Optional[WorkshopsTable] = None,
        *,
        fallback_mode: str = config.WORKSHOP_FALLBACK_MODE,
        seed_on_empty: bool = config.WORKSHOP_SEED_ON_EMPTY,
        seed_factory: Callable[[], List[WorkshopRecord]] = seed_workshops,
        on_error: Optional[ErrorReporter] = None,
        action_plan_column: Optional[str] = None,
    ):
        self.remote = remote if remote is not None else WorkshopsTable()
        self.fallback_mode = fallback_mode
        self.seed_on_empty = seed_on_empty
        self.seed_factory = seed_factory
        self.on_error = on_error
        self.action_plan_column = action_plan_column
        self.degraded = False
        self._records: List[WorkshopRecord] = []
        self._lock = threading.RLock()

    @property
    def records(self) -> Tuple[WorkshopRecord, ...]:
        return tuple(self._records)

    def find(self, record_id: str) -> Optional[WorkshopRecord]:
        return next((record for record in self._records if record.id == record_id), None)

    def get(self, record_id: str) -> WorkshopRecord:
        record = self.find(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record

    # Loading

    @log_execution
    def load(self, is_alive: Optional[Callable[[], bool]] = None) -> LoadResult:
        """
        Fetch the archive, newest first, repairing every row.

        Args:
            is_alive: Liveness check for the consumer. When it returns False
                once the remote call has resolved, the result is discarded and
                the store is left untouched.

        Returns:
            LoadResult describing what was loaded and whether the store is
            running in degraded (local-only) mode.
        """
        with self._lock:
            return self._load(is_alive or (lambda: True))

    def _load(self, alive: Callable[[], bool]) -> LoadResult:
        try:
            rows = self.remote.select_all()
        except Exception as exc:
            if not alive():
                return LoadResult(discarded=True, source="fallback")
            log_error(COMPONENT, "load", exc, {"fallback_mode": self.fallback_mode})
            records = _newest_first(self.seed_factory()) if self.fallback_mode == "seed" else []
            result = LoadResult(records=records, degraded=True, source="fallback")
        else:
            if not alive():
                return LoadResult(discarded=True)
            if rows:
                result = LoadResult(records=self._repair_rows(rows))
            elif self.seed_on_empty:
                result = LoadResult(records=self._seed_remote(), source="seed")
            else:
                result = LoadResult()

        self._records = list(result.records)
        self.degraded = result.degraded
        log_event(
            COMPONENT,
            "load",
            "archive loaded",
            {"count": len(self._records), "source": result.source, "degraded": result.degraded},
        )
        return result

    def _repair_rows(self, rows: List[dict]) -> List[WorkshopRecord]:
        records = []
        for row in rows:
            if not isinstance(row, dict) or not row.get("id"):
                logger.warning("Skipping workshop row without an id: %r", row)
                continue
            records.append(ensure_defaults(row))
        return records

    def _seed_remote(self) -> List[WorkshopRecord]:
        seed = _newest_first(self.seed_factory())
        logger.warning("Remote archive is empty; seeding %d baseline records.", len(seed))
        try:
            self.remote.upsert([to_remote_row(record, self.action_plan_column) for record in seed], on_conflict="id")
        except Exception as exc:
            # The seed stays in the local session either way.
            log_error(COMPONENT, "seed", exc, {"count": len(seed)})
        return seed

    # Mutations

    def _mutate(
        self,
        operation: str,
        record_id: str,
        change: Callable[[List[WorkshopRecord]], List[WorkshopRecord]],
        remote_call: Callable[[], object],
    ) -> None:
        def apply_local():
            snapshot = list(self._records)
            self._records = change(list(snapshot))

            def undo() -> None:
                self._records = snapshot

            return undo

        try:
            optimistic_mutation(apply_local, remote_call)
        except Exception as exc:
            error = PersistenceError(operation, record_id, exc)
            log_error(COMPONENT, operation, exc, {"record_id": record_id, "rolled_back": True})
            if self.on_error is not None:
                self.on_error(error)
            raise error from exc
        log_event(COMPONENT, operation, "persisted", {"record_id": record_id})

    def add(self, record: WorkshopRecord) -> WorkshopRecord:
        with self._lock:
            if self.find(record.id) is not None:
                raise ValidationError(f"Workshop record '{record.id}' already exists.")
            row = to_remote_row(record, self.action_plan_column)
            self._mutate("add", record.id, lambda records: records + [record], lambda: self.remote.insert(row))
        return record

    def update(self, record: WorkshopRecord) -> WorkshopRecord:
        with self._lock:
            self.get(record.id)
            row = to_remote_row(record, self.action_plan_column, clear_absent=True)
            self._mutate(
                "update",
                record.id,
                lambda records: [record if existing.id == record.id else existing for existing in records],
                lambda: self.remote.update(record.id, row),
            )
        return record

    def delete(self, record_id: str) -> None:
        with self._lock:
            self.get(record_id)
            self._mutate(
                "delete",
                record_id,
                lambda records: [existing for existing in records if existing.id != record_id],
                lambda: self.remote.delete(record_id),
            )
