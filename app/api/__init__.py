# API module exports
from app.api import boards, health, tasks, timers
from app.api.base import api_router

__all__ = ["boards", "health", "tasks", "timers", "api_router"]
