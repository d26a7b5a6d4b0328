"""Timer state models"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from app.utils.datetime_helper import ensure_utc


class TimerStatus(str, Enum):
    """Effective timer status, derived and never stored"""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class CompletionPolicy(str, Enum):
    """What happens to a task's timer fields once a completion is acknowledged"""
    KEEP = "keep"    # leave started/completed timestamps as history
    CLEAR = "clear"  # null out every timer field


class TimerSubject(BaseModel):
    """Timer-only projection of a task"""
    id: str
    title: Optional[str] = None
    timer_duration_seconds: Optional[int] = None
    timer_started_at: Optional[datetime] = None
    timer_completed_at: Optional[datetime] = None
    is_urgent_after_timer: Optional[bool] = False

    @field_validator("timer_started_at", "timer_completed_at")
    @classmethod
    def as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None

    @classmethod
    def from_task(cls, task: Any) -> "TimerSubject":
        """Build from a Task model or a raw tasks row"""
        data = task if isinstance(task, dict) else task.model_dump()
        return cls.model_validate(data)

    @property
    def timer_version(self) -> Optional[str]:
        """Identifies one timer session; changes on every start, resume or restart"""
        if self.timer_started_at is None or not self.timer_duration_seconds:
            return None
        return f"{self.timer_started_at.isoformat()}|{self.timer_duration_seconds}"


class LocalPauseOverride(BaseModel):
    """Client-local record of a pause the backend knows nothing about"""
    timer_started_at: datetime
    timer_duration_seconds: int = Field(..., gt=0)
    remaining_seconds_at_pause: int = Field(..., ge=0)

    @field_validator("timer_started_at")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def timer_version(self) -> str:
        return f"{self.timer_started_at.isoformat()}|{self.timer_duration_seconds}"

    def matches(self, subject: TimerSubject) -> bool:
        """True while the subject is still in the timer session this pause was taken in"""
        return subject.timer_version == self.timer_version


class TimerSnapshot(BaseModel):
    """Everything a view needs to render a timer at one instant"""
    subject_id: str
    title: Optional[str] = None
    status: TimerStatus
    remaining_seconds: int = 0
    progress: float = 0.0
    duration_seconds: Optional[int] = None
    is_urgent_after_timer: bool = False
    pending: bool = False
