"""Timer Clock - pure remaining-time and progress calculations"""
import math
from datetime import datetime, timedelta
from typing import Optional

from .errors import InvalidTimerConfigError
from .models.timer_state import LocalPauseOverride, TimerStatus, TimerSubject


def _require_duration(duration_seconds: Optional[int]) -> int:
    if duration_seconds is None or duration_seconds <= 0:
        raise InvalidTimerConfigError(
            f"Timer duration must be a positive number of seconds, got {duration_seconds!r}"
        )
    return duration_seconds


def elapsed_seconds(started_at: datetime, now: datetime) -> float:
    """Seconds since started_at; a start in the future (clock skew) counts as zero"""
    return max(0.0, (now - started_at).total_seconds())


def remaining_seconds(started_at: datetime, duration_seconds: Optional[int], now: datetime) -> int:
    """
    Whole seconds left on a countdown.

    Args:
        started_at: When the countdown began
        duration_seconds: Total countdown length
        now: Reference instant

    Returns:
        max(0, duration - floor(elapsed))

    Raises:
        InvalidTimerConfigError: duration is missing or not positive
    """
    duration = _require_duration(duration_seconds)
    return max(0, duration - math.floor(elapsed_seconds(started_at, now)))


def progress_percent(started_at: datetime, duration_seconds: Optional[int], now: datetime) -> float:
    """Share of the countdown already elapsed, clamped to [0, 100]"""
    duration = _require_duration(duration_seconds)
    return min(100.0, 100.0 * elapsed_seconds(started_at, now) / duration)


def paused_progress_percent(duration_seconds: Optional[int], remaining_at_pause: int) -> float:
    """Progress frozen at the instant of a local pause"""
    duration = _require_duration(duration_seconds)
    return max(0.0, min(100.0, 100.0 * (duration - remaining_at_pause) / duration))


def resumed_start_time(duration_seconds: Optional[int], remaining_at_pause: int, now: datetime) -> datetime:
    """Start time that makes a restarted countdown show exactly remaining_at_pause at now"""
    duration = _require_duration(duration_seconds)
    return now - timedelta(seconds=duration - remaining_at_pause)


def timer_status(
    subject: TimerSubject,
    override: Optional[LocalPauseOverride],
    now: datetime,
) -> TimerStatus:
    """
    Reconcile remote timestamps, a local pause override and the wall clock.

    A timer that has run out but whose completion has not been written yet
    is already reported as completed.
    """
    if subject.timer_started_at is None:
        return TimerStatus.NOT_STARTED
    if subject.timer_completed_at is not None:
        return TimerStatus.COMPLETED
    if override is not None and override.matches(subject):
        return TimerStatus.PAUSED
    if not subject.timer_duration_seconds or subject.timer_duration_seconds <= 0:
        # Started without a usable duration; nothing to count down
        return TimerStatus.RUNNING
    if remaining_seconds(subject.timer_started_at, subject.timer_duration_seconds, now) == 0:
        return TimerStatus.COMPLETED
    return TimerStatus.RUNNING


def format_countdown(seconds: int) -> str:
    """Format seconds as MM:SS, or HH:MM:SS from one hour up"""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_duration_label(seconds: Optional[int]) -> str:
    """Short duration label for compact views: 45s, 30m, 1h 30m"""
    if not seconds or seconds <= 0:
        return ""
    hours, rest = divmod(int(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes}m" if minutes else f"{hours}h"
    if minutes:
        return f"{minutes}m {secs}s" if secs else f"{minutes}m"
    return f"{secs}s"
