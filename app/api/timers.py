from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.errors import service_errors
from app.infra.supabase.client import get_repositories
from app.infra.supabase.repositories import RepositoryFactory
from app.middleware.auth import get_current_user_id
from app.models.task import Task
from app.services.timer import TaskTimerService

router = APIRouter(prefix="/api/timers", tags=["timers"])


class TimerListResponse(BaseModel):
    tasks: List[Task]
    count: int


@router.get("/active", response_model=TimerListResponse)
async def list_active_timers(
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """Tasks of the current user whose timer is running or paused"""
    with service_errors("list active timers"):
        tasks = await TaskTimerService(repos.tasks).list_active_timers(current_user_id)

    return {"tasks": tasks, "count": len(tasks)}


@router.post("/sweep", response_model=TimerListResponse)
async def sweep_expired_timers(
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """Complete every timer of the current user that ran out while no client was watching"""
    with service_errors("sweep expired timers"):
        tasks = await TaskTimerService(repos.tasks).sweep_expired_timers(current_user_id)

    return {"tasks": tasks, "count": len(tasks)}
