from .timer_state import (
    CompletionPolicy,
    LocalPauseOverride,
    TimerSnapshot,
    TimerStatus,
    TimerSubject,
)

__all__ = [
    "CompletionPolicy",
    "LocalPauseOverride",
    "TimerSnapshot",
    "TimerStatus",
    "TimerSubject",
]
