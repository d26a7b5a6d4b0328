"""Remote timer mutations port"""
from datetime import datetime
from typing import Optional, Protocol

from .models.timer_state import TimerSubject


class TimerMutations(Protocol):
    """
    Writes timer state to the backend.

    Implemented in-process by TaskTimerService and over HTTP by
    TimerApiClient. Implementations raise NotFoundError, ValidationError or
    TransientRemoteError from app.services.timer.errors.
    """

    async def start_timer(
        self,
        subject_id: str,
        duration_seconds: int,
        start_time: Optional[datetime] = None,
    ) -> TimerSubject: ...

    async def complete_timer(self, subject_id: str) -> TimerSubject: ...

    async def reset_timer(self, subject_id: str) -> TimerSubject: ...

    async def clear_timer(self, subject_id: str) -> TimerSubject: ...
