"""Task timers: clock, local pause persistence, state machine, views and mutations"""
from app import config

from .alerts import TimerAlertMonitor
from .api_client import TimerApiClient
from .clock import format_countdown, progress_percent, remaining_seconds, timer_status
from .controller import TimerController
from .errors import (
    InvalidTimerConfigError,
    NotFoundError,
    StorageError,
    TimerError,
    TransientRemoteError,
    ValidationError,
)
from .models.timer_state import (
    CompletionPolicy,
    LocalPauseOverride,
    TimerSnapshot,
    TimerStatus,
    TimerSubject,
)
from .mutations import TimerMutations
from .pause_store import JsonFileStorage, KeyValueStorage, MemoryStorage, PauseStore
from .presentation import render_compact, render_full
from .timer_service import LocalTimerMutations, TaskTimerService
from .visibility import VisibilityGate


def default_pause_store() -> PauseStore:
    """Pause store on the JSON file configured by TIMER_PAUSE_STORE_PATH"""
    return PauseStore(JsonFileStorage(config.TIMER_PAUSE_STORE_PATH))


__all__ = [
    "CompletionPolicy",
    "InvalidTimerConfigError",
    "JsonFileStorage",
    "KeyValueStorage",
    "LocalPauseOverride",
    "LocalTimerMutations",
    "MemoryStorage",
    "NotFoundError",
    "PauseStore",
    "StorageError",
    "TaskTimerService",
    "TimerAlertMonitor",
    "TimerApiClient",
    "TimerController",
    "TimerError",
    "TimerMutations",
    "TimerSnapshot",
    "TimerStatus",
    "TimerSubject",
    "TransientRemoteError",
    "ValidationError",
    "VisibilityGate",
    "default_pause_store",
    "format_countdown",
    "progress_percent",
    "remaining_seconds",
    "render_compact",
    "render_full",
    "timer_status",
]
