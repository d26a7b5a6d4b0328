"""
Task Timer Service

Server-side timer mutations on the tasks table:
- start / complete / reset / clear a task's timer
- list a user's running timers
- complete timers that ran out while nobody was watching
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from app import config
from app.infra.supabase.repositories.tasks import TaskRepository
from app.models.task import Task, TaskPriority
from app.utils.datetime_helper import ensure_utc, utc_now

from . import clock
from .errors import NotFoundError, TimerError, TransientRemoteError, ValidationError
from .models.timer_state import TimerSubject

logger = logging.getLogger(__name__)

# Clients decide a timer ran out on their own clock; accept completions this
# much early to absorb skew between client and server.
EARLY_COMPLETION_SECONDS = 3


def validate_duration(duration_seconds: Optional[int]) -> int:
    """Reject missing, non-positive and over-long durations"""
    if duration_seconds is None:
        raise ValidationError("timer_duration_seconds is required to start a timer")
    if duration_seconds < config.MIN_TIMER_SECONDS:
        raise ValidationError("timer_duration_seconds must be positive")
    if duration_seconds > config.MAX_TIMER_SECONDS:
        raise ValidationError(
            f"timer_duration_seconds must be at most {config.MAX_TIMER_SECONDS} (24 hours)"
        )
    return duration_seconds


class TaskTimerService:
    """Service for task timer mutations"""

    def __init__(self, task_repo: TaskRepository, now: Callable[[], datetime] = utc_now):
        self.task_repo = task_repo
        self._now = now

    async def _get_task(self, task_id: str) -> Task:
        task = await self.task_repo.find_by_id(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        return task

    async def start_timer(
        self,
        task_id: str,
        duration_seconds: Optional[int],
        start_time: Optional[datetime] = None,
    ) -> Task:
        """
        Start (or restart) a task's countdown.

        Args:
            task_id: The task ID
            duration_seconds: Countdown length in seconds
            start_time: Backdated start used to resume a pause; defaults to now

        Returns:
            The updated task

        Raises:
            ValidationError: duration missing, non-positive or above 24 hours
            NotFoundError: the task does not exist
        """
        duration = validate_duration(duration_seconds)
        started_at = ensure_utc(start_time) if start_time else self._now()

        task = await self.task_repo.set_timer_fields(task_id, {
            "timer_duration_seconds": duration,
            "timer_started_at": started_at,
            "timer_completed_at": None,
        })
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")

        logger.info(f"Timer started for task {task_id}: {duration}s from {started_at.isoformat()}")
        return task

    async def complete_timer(self, task_id: str) -> Task:
        """
        Mark a task's timer as completed.

        Idempotent: an already completed timer is returned unchanged, so the
        first completion timestamp wins. The stored timestamp is never
        earlier than started_at + duration. Tasks flagged
        is_urgent_after_timer are escalated to urgent priority.

        Raises:
            NotFoundError: the task does not exist
            ValidationError: no timer is running or it has not run out yet
        """
        task = await self._get_task(task_id)

        if task.timer_completed_at is not None:
            logger.debug(f"Timer for task {task_id} already completed at {task.timer_completed_at}")
            return task

        if task.timer_started_at is None or not task.timer_duration_seconds:
            raise ValidationError(f"Task {task_id} has no running timer")

        now = self._now()
        started_at = ensure_utc(task.timer_started_at)
        ends_at = started_at + timedelta(seconds=task.timer_duration_seconds)
        if now + timedelta(seconds=EARLY_COMPLETION_SECONDS) < ends_at:
            remaining = clock.remaining_seconds(started_at, task.timer_duration_seconds, now)
            raise ValidationError(f"Timer for task {task_id} has {remaining}s left")

        extra = {"priority": TaskPriority.URGENT.value} if task.is_urgent_after_timer else None
        updated = await self.task_repo.mark_timer_completed(task_id, max(now, ends_at), extra)

        if updated is None:
            # Someone else completed (or deleted) it between our read and write
            return await self._get_task(task_id)

        logger.info(f"Timer completed for task {task_id}")
        return updated

    async def reset_timer(self, task_id: str) -> Task:
        """Stop a timer without completing it; the configured duration is kept"""
        task = await self.task_repo.set_timer_fields(task_id, {
            "timer_started_at": None,
            "timer_completed_at": None,
        })
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")

        logger.info(f"Timer reset for task {task_id}")
        return task

    async def clear_timer(self, task_id: str) -> Task:
        """Null every timer field, leaving the task with no timer at all"""
        task = await self.task_repo.set_timer_fields(task_id, {
            "timer_duration_seconds": None,
            "timer_started_at": None,
            "timer_completed_at": None,
            "is_urgent_after_timer": None,
        })
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")

        logger.info(f"Timer cleared for task {task_id}")
        return task

    async def list_active_timers(self, user_id: str) -> List[Task]:
        """Tasks with a started, not yet completed timer"""
        return await self.task_repo.find_active_timers(user_id)

    async def sweep_expired_timers(self, user_id: str) -> List[Task]:
        """
        Complete every active timer of a user that has run out.

        Covers timers whose page was closed before the countdown reached
        zero. Failures on one task are logged and do not stop the sweep.

        Returns:
            Tasks completed by this sweep
        """
        now = self._now()
        completed: List[Task] = []

        for task in await self.task_repo.find_active_timers(user_id):
            if not task.timer_duration_seconds:
                continue
            remaining = clock.remaining_seconds(
                ensure_utc(task.timer_started_at), task.timer_duration_seconds, now
            )
            if remaining > 0:
                continue
            try:
                completed.append(await self.complete_timer(task.id))
            except TimerError as e:
                logger.error(f"Could not complete expired timer for task {task.id}: {e}")

        if completed:
            logger.info(f"Swept {len(completed)} expired timers for user {user_id}")
        return completed


class LocalTimerMutations:
    """TimerMutations backed directly by TaskTimerService (same process as the database client)"""

    def __init__(self, service: TaskTimerService):
        self._service = service

    async def _run(self, action: str, call) -> TimerSubject:
        try:
            task = await call
        except TimerError:
            raise
        except Exception as e:
            logger.error(f"Timer {action} failed: {e}", exc_info=True)
            raise TransientRemoteError(f"Timer {action} failed: {e}") from e
        return TimerSubject.from_task(task)

    async def start_timer(
        self,
        subject_id: str,
        duration_seconds: int,
        start_time: Optional[datetime] = None,
    ) -> TimerSubject:
        return await self._run("start", self._service.start_timer(subject_id, duration_seconds, start_time))

    async def complete_timer(self, subject_id: str) -> TimerSubject:
        return await self._run("complete", self._service.complete_timer(subject_id))

    async def reset_timer(self, subject_id: str) -> TimerSubject:
        return await self._run("reset", self._service.reset_timer(subject_id))

    async def clear_timer(self, subject_id: str) -> TimerSubject:
        return await self._run("clear", self._service.clear_timer(subject_id))
