"""
Task Service

Handles business logic for board tasks including:
- CRUD operations scoped to the owning user
- Ordering within a board section
- Status shortcuts (toggle done, archive)

Timer session columns (started, completed) are written by TaskTimerService;
the configured duration can only change here while the timer is idle.
"""

import logging
from typing import List, Optional

from app.infra.supabase.repositories import RepositoryFactory
from app.models.task import Task, TaskCreate, TaskStatus, TaskUpdate
from app.services.timer.errors import NotFoundError, ValidationError
from app.services.timer.timer_service import validate_duration

logger = logging.getLogger(__name__)


class TaskService:
    """Service for managing board tasks"""

    def __init__(self, repos: RepositoryFactory):
        self.task_repo = repos.tasks
        self.board_repo = repos.boards
        self.section_repo = repos.sections

    async def _check_board(self, board_id: str, user_id: str) -> None:
        board = await self.board_repo.find_by_id(board_id)
        if board is None or board.user_id != user_id:
            raise NotFoundError(f"Board {board_id} not found")

    async def _check_section(self, section_id: Optional[str], board_id: Optional[str]) -> None:
        if section_id is None:
            return
        section = await self.section_repo.find_by_id(section_id)
        if section is None or section.board_id != board_id:
            raise ValidationError(f"Section {section_id} does not belong to board {board_id}")

    @staticmethod
    def _check_timer_duration(existing: Task, duration_seconds: Optional[int]) -> None:
        # Fixed for the life of a session; change it only while the timer is idle
        if duration_seconds == existing.timer_duration_seconds:
            return
        if existing.timer_started_at is not None:
            raise ValidationError(
                f"Cannot change the timer duration of task {existing.id} while its timer is running"
            )
        if duration_seconds is not None:
            validate_duration(duration_seconds)

    async def get_task(self, task_id: str, user_id: str) -> Task:
        """
        Get a task owned by the user.

        Raises:
            NotFoundError: the task does not exist or belongs to someone else
        """
        task = await self.task_repo.find_by_id(task_id)
        if task is None or task.user_id != user_id:
            raise NotFoundError(f"Task {task_id} not found")
        return task

    async def list_tasks(
        self,
        board_id: str,
        user_id: str,
        status: Optional[TaskStatus] = None,
    ) -> List[Task]:
        """
        List a board's tasks in display order.

        Args:
            board_id: Board to list
            user_id: Caller; must own the board
            status: Optional status filter
        """
        await self._check_board(board_id, user_id)
        return await self.task_repo.find_by_board(board_id, status)

    async def create_task(self, user_id: str, **fields) -> Task:
        """
        Create a task at the end of its section (or of the board when it has no section).

        Args:
            user_id: Owner of the new task
            **fields: TaskBase fields (title and board_id are required)

        Returns:
            The created task
        """
        board_id = fields.get("board_id")
        if not board_id:
            raise ValidationError("board_id is required")
        await self._check_board(board_id, user_id)
        await self._check_section(fields.get("section_id"), board_id)

        display_order = await self.task_repo.next_display_order({
            "board_id": board_id,
            "section_id": fields.get("section_id"),
        })

        task = await self.task_repo.create(
            TaskCreate(user_id=user_id, display_order=display_order, **fields)
        )
        logger.info(f"Created task {task.id} on board {board_id}")
        return task

    async def update_task(self, task_id: str, user_id: str, data: TaskUpdate) -> Task:
        existing = await self.get_task(task_id, user_id)

        if "board_id" in data.model_fields_set and data.board_id != existing.board_id:
            await self._check_board(data.board_id, user_id)
        if "section_id" in data.model_fields_set:
            await self._check_section(data.section_id, data.board_id or existing.board_id)
        if "timer_duration_seconds" in data.model_fields_set:
            self._check_timer_duration(existing, data.timer_duration_seconds)

        task = await self.task_repo.update(task_id, data)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")

        logger.info(f"Updated task {task_id}")
        return task

    async def delete_task(self, task_id: str, user_id: str) -> bool:
        await self.get_task(task_id, user_id)

        success = await self.task_repo.delete(task_id)
        if success:
            logger.info(f"Deleted task {task_id}")
        return success

    async def move_task(
        self,
        task_id: str,
        user_id: str,
        section_id: Optional[str],
        display_order: int,
    ) -> Task:
        """Move a task to another section of its board (None for no section) at display_order"""
        return await self.update_task(
            task_id,
            user_id,
            TaskUpdate(section_id=section_id, display_order=display_order),
        )

    async def reorder_tasks(self, user_id: str, task_ids: List[str]) -> None:
        """Store task_ids' order as display_order 0..n-1"""
        for task_id in task_ids:
            await self.get_task(task_id, user_id)

        await self.task_repo.reorder(task_ids)

    async def toggle_status(self, task_id: str, user_id: str) -> Task:
        """Flip a task between todo and done; any other status becomes done"""
        task = await self.get_task(task_id, user_id)
        new_status = TaskStatus.TODO if task.status == TaskStatus.DONE else TaskStatus.DONE

        return await self.update_task(task_id, user_id, TaskUpdate(status=new_status))

    async def archive_task(self, task_id: str, user_id: str) -> Task:
        return await self.update_task(task_id, user_id, TaskUpdate(status=TaskStatus.ARCHIVED))
