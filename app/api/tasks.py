from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.api.errors import service_errors
from app.infra.supabase.client import get_repositories
from app.infra.supabase.repositories import RepositoryFactory
from app.middleware.auth import get_current_user_id
from app.models.task import (
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    Task,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)
from app.services.task import TaskService
from app.services.timer import TaskTimerService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


class CreateTaskRequest(BaseModel):
    board_id: str
    section_id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    item_type: Optional[str] = None
    item_data: Optional[Dict[str, Any]] = None
    is_favorite: Optional[bool] = None
    timer_duration_seconds: Optional[int] = None
    is_urgent_after_timer: Optional[bool] = None


class UpdateTaskRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    board_id: Optional[str] = None
    section_id: Optional[str] = None
    display_order: Optional[int] = None
    item_type: Optional[str] = None
    item_data: Optional[Dict[str, Any]] = None
    is_favorite: Optional[bool] = None
    timer_duration_seconds: Optional[int] = None
    is_urgent_after_timer: Optional[bool] = None


class MoveTaskRequest(BaseModel):
    section_id: Optional[str] = None
    display_order: int = Field(..., ge=0)


class ReorderTasksRequest(BaseModel):
    task_ids: List[str]


class StartTimerRequest(BaseModel):
    # Falls back to the task's configured duration when omitted
    duration_seconds: Optional[int] = None
    # Backdated start used when resuming a paused timer
    start_time: Optional[datetime] = None


class TaskResponse(BaseModel):
    task: Task


class TaskListResponse(BaseModel):
    tasks: List[Task]
    count: int


class DeleteResponse(BaseModel):
    success: bool
    message: str


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    board_id: str,
    status: Optional[TaskStatus] = None,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """List a board's tasks, optionally filtered by status"""
    with service_errors("list tasks"):
        tasks = await TaskService(repos).list_tasks(board_id, current_user_id, status)

    return {"tasks": tasks, "count": len(tasks)}


@router.post("", response_model=TaskResponse)
async def create_task(
    request: CreateTaskRequest,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("create task"):
        task = await TaskService(repos).create_task(
            current_user_id, **request.model_dump(exclude_none=True)
        )

    return {"task": task}


@router.post("/reorder", response_model=DeleteResponse)
async def reorder_tasks(
    request: ReorderTasksRequest,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("reorder tasks"):
        await TaskService(repos).reorder_tasks(current_user_id, request.task_ids)

    return {"success": True, "message": "Tasks reordered"}


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("get task"):
        task = await TaskService(repos).get_task(task_id, current_user_id)

    return {"task": task}


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    request: UpdateTaskRequest,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """Update task fields; fields left out of the body are not touched"""
    with service_errors("update task"):
        data = TaskUpdate(**request.model_dump(exclude_unset=True))
        task = await TaskService(repos).update_task(task_id, current_user_id, data)

    return {"task": task}


@router.delete("/{task_id}", response_model=DeleteResponse)
async def delete_task(
    task_id: str,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("delete task"):
        await TaskService(repos).delete_task(task_id, current_user_id)

    return {"success": True, "message": "Task deleted successfully"}


@router.post("/{task_id}/move", response_model=TaskResponse)
async def move_task(
    task_id: str,
    request: MoveTaskRequest,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("move task"):
        task = await TaskService(repos).move_task(
            task_id, current_user_id, request.section_id, request.display_order
        )

    return {"task": task}


@router.post("/{task_id}/toggle", response_model=TaskResponse)
async def toggle_task_status(
    task_id: str,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """Flip a task between todo and done"""
    with service_errors("toggle task status"):
        task = await TaskService(repos).toggle_status(task_id, current_user_id)

    return {"task": task}


@router.post("/{task_id}/archive", response_model=TaskResponse)
async def archive_task(
    task_id: str,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("archive task"):
        task = await TaskService(repos).archive_task(task_id, current_user_id)

    return {"task": task}


# Timer endpoints
@router.post("/{task_id}/timer/start", response_model=TaskResponse)
async def start_task_timer(
    task_id: str,
    request: StartTimerRequest,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """Start, restart or resume a task's countdown"""
    with service_errors("start timer"):
        existing = await TaskService(repos).get_task(task_id, current_user_id)
        duration = request.duration_seconds
        if duration is None:
            duration = existing.timer_duration_seconds
        task = await TaskTimerService(repos.tasks).start_timer(task_id, duration, request.start_time)

    return {"task": task}


@router.post("/{task_id}/timer/complete", response_model=TaskResponse)
async def complete_task_timer(
    task_id: str,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """Record that a task's countdown ran out (idempotent)"""
    with service_errors("complete timer"):
        await TaskService(repos).get_task(task_id, current_user_id)
        task = await TaskTimerService(repos.tasks).complete_timer(task_id)

    return {"task": task}


@router.post("/{task_id}/timer/reset", response_model=TaskResponse)
async def reset_task_timer(
    task_id: str,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("reset timer"):
        await TaskService(repos).get_task(task_id, current_user_id)
        task = await TaskTimerService(repos.tasks).reset_timer(task_id)

    return {"task": task}


@router.delete("/{task_id}/timer", response_model=TaskResponse)
async def clear_task_timer(
    task_id: str,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """Remove a task's timer entirely"""
    with service_errors("clear timer"):
        await TaskService(repos).get_task(task_id, current_user_id)
        task = await TaskTimerService(repos.tasks).clear_timer(task_id)

    return {"task": task}
