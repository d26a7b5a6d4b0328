"""Shared test helpers: a fake clock, fake timer mutations and an in-memory Supabase client."""

import copy
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from app.services.timer.models.timer_state import TimerSubject

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = T0):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> datetime:
        self.current = self.current + timedelta(seconds=seconds)
        return self.current


class Collector:
    """Captures listener calls into a list."""

    def __init__(self):
        self.items: list = []

    def __call__(self, item):
        self.items.append(item)

    def __len__(self):
        return len(self.items)

    @property
    def last(self):
        return self.items[-1] if self.items else None


class FakeMutations:
    """In-memory backend for a single task's timer columns.

    Set ``fail_with`` to make the next calls raise.
    """

    def __init__(self, subject: TimerSubject, clock: FakeClock):
        self.subject = subject
        self.clock = clock
        self.calls: List[tuple] = []
        self.fail_with: Optional[Exception] = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def _set(self, **fields) -> TimerSubject:
        self.subject = self.subject.model_copy(update=fields)
        return self.subject

    async def start_timer(self, subject_id, duration_seconds, start_time=None):
        self.calls.append(("start", subject_id, duration_seconds, start_time))
        self._check()
        return self._set(
            timer_duration_seconds=duration_seconds,
            timer_started_at=start_time or self.clock(),
            timer_completed_at=None,
        )

    async def complete_timer(self, subject_id):
        self.calls.append(("complete", subject_id))
        self._check()
        if self.subject.timer_completed_at is not None:
            return self.subject
        return self._set(timer_completed_at=self.clock())

    async def reset_timer(self, subject_id):
        self.calls.append(("reset", subject_id))
        self._check()
        return self._set(timer_started_at=None, timer_completed_at=None)

    async def clear_timer(self, subject_id):
        self.calls.append(("clear", subject_id))
        self._check()
        return self._set(
            timer_duration_seconds=None,
            timer_started_at=None,
            timer_completed_at=None,
            is_urgent_after_timer=None,
        )

    def count(self, action: str) -> int:
        return sum(1 for call in self.calls if call[0] == action)


class FailingStorage:
    """Storage whose every operation fails, like a full or disabled localStorage."""

    def get_item(self, key):
        raise OSError("storage unavailable")

    def set_item(self, key, value):
        raise OSError("quota exceeded")

    def remove_item(self, key):
        raise OSError("storage unavailable")


# ── In-memory Supabase ──────────────────────────────────────────────


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


class FakeQuery:
    """Supports the subset of the postgrest query builder the repositories use."""

    def __init__(self, table: "FakeTable"):
        self._table = table
        self._action = "select"
        self._payload: Any = None
        self._filters: List[tuple] = []
        self._orders: List[tuple] = []
        self._limit: Optional[int] = None
        self._negate_next = False

    # actions
    def select(self, *columns, **kwargs):
        self._action = "select"
        return self

    def insert(self, payload):
        self._action, self._payload = "insert", payload
        return self

    def update(self, payload):
        self._action, self._payload = "update", payload
        return self

    def delete(self):
        self._action = "delete"
        return self

    # filters
    @property
    def not_(self):
        self._negate_next = True
        return self

    def _add(self, predicate):
        negate, self._negate_next = self._negate_next, False
        self._filters.append((lambda row: not predicate(row)) if negate else predicate)
        return self

    def eq(self, column, value):
        return self._add(lambda row: row.get(column) == value)

    def is_(self, column, value):
        assert value == "null"
        return self._add(lambda row: row.get(column) is None)

    def order(self, column, desc=False):
        self._orders.append((column, desc))
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matching(self) -> List[Dict[str, Any]]:
        return [row for row in self._table.rows if all(f(row) for f in self._filters)]

    def execute(self) -> FakeResponse:
        if self._action == "insert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            created = [self._table.add(item) for item in payload]
            return FakeResponse(copy.deepcopy(created))

        rows = self._matching()

        if self._action == "update":
            for row in rows:
                row.update(copy.deepcopy(self._payload))
            return FakeResponse(copy.deepcopy(rows))

        if self._action == "delete":
            self._table.rows = [row for row in self._table.rows if row not in rows]
            return FakeResponse(copy.deepcopy(rows))

        for column, desc in reversed(self._orders):
            present = [row for row in rows if row.get(column) is not None]
            missing = [row for row in rows if row.get(column) is None]
            present.sort(key=lambda row: row[column], reverse=desc)
            rows = present + missing
        if self._limit is not None:
            rows = rows[: self._limit]
        return FakeResponse(copy.deepcopy(rows))


class FakeTable:
    def __init__(self, name: str):
        self.name = name
        self.rows: List[Dict[str, Any]] = []
        self._sequence = 0

    def add(self, item: Dict[str, Any]) -> Dict[str, Any]:
        self._sequence += 1
        row = dict(item)
        row.setdefault("id", str(uuid.uuid4()))
        # Strictly increasing so "newest first" orderings are deterministic
        row.setdefault("created_at", (T0 + timedelta(seconds=self._sequence)).isoformat())
        self.rows.append(row)
        return row


class FakeSupabase:
    """Minimal stand-in for supabase.Client backed by Python lists."""

    def __init__(self):
        self.tables: Dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeQuery:
        if name not in self.tables:
            self.tables[name] = FakeTable(name)
        return FakeQuery(self.tables[name])

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return self.tables[name].rows if name in self.tables else []
