"""Task repository"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from supabase import Client  # type: ignore

from app.models.task import Task, TaskCreate, TaskStatus, TaskUpdate
from app.utils.datetime_helper import to_iso

from .base import BaseRepository

TIMER_FIELDS = ("timer_duration_seconds", "timer_started_at", "timer_completed_at", "is_urgent_after_timer")


class TaskRepository(BaseRepository[Task, TaskCreate, TaskUpdate]):
    """Repository for task operations"""

    def __init__(self, client: Client):
        super().__init__(client, "tasks", Task)

    async def find_by_board(self, board_id: str, status: Optional[TaskStatus] = None) -> List[Task]:
        """Find tasks on a board in display order

        Args:
            board_id: Board to list
            status: Optional status filter
        """
        query = self._client.table(self._table_name).select("*").eq("board_id", board_id)

        if status is not None:
            query = query.eq("status", status.value)

        response = query.order("display_order", desc=False).execute()
        return self._to_models(response.data)

    async def find_active_timers(self, user_id: str) -> List[Task]:
        """Find tasks whose timer has been started and not yet completed"""
        response = (
            self._client.table(self._table_name)
            .select("*")
            .eq("user_id", user_id)
            .not_.is_("timer_started_at", "null")
            .is_("timer_completed_at", "null")
            .order("timer_started_at", desc=False)
            .execute()
        )
        return self._to_models(response.data)

    async def set_timer_fields(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        """Write timer columns, including explicit nulls

        Args:
            task_id: Task to update
            fields: Subset of TIMER_FIELDS; datetimes are serialized to ISO strings
        """
        unknown = set(fields) - set(TIMER_FIELDS)
        if unknown:
            raise ValueError(f"Not timer fields: {sorted(unknown)}")

        payload = {
            key: to_iso(value) if isinstance(value, datetime) else value
            for key, value in fields.items()
        }
        response = self._client.table(self._table_name).update(payload).eq("id", task_id).execute()

        if not response.data:
            return None

        return self._to_model(response.data[0])

    async def mark_timer_completed(
        self,
        task_id: str,
        completed_at: datetime,
        extra: Optional[Dict[str, Any]] = None,
    ) -> Optional[Task]:
        """Set timer_completed_at only if it is still null (first write wins)

        Returns:
            The updated task, or None if nothing was written because the task
            is missing or its timer had already been completed
        """
        payload: Dict[str, Any] = {"timer_completed_at": to_iso(completed_at)}
        if extra:
            payload.update(extra)

        response = (
            self._client.table(self._table_name)
            .update(payload)
            .eq("id", task_id)
            .is_("timer_completed_at", "null")
            .execute()
        )

        if not response.data:
            return None

        return self._to_model(response.data[0])
