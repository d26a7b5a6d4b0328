"""
View models for the two timer renderings.

Compact views sit in task lists and only show status; full views sit in
task detail and expose the countdown, progress and transport controls.
Styling is the client's business; these carry glyph names and tones.
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel

from .clock import format_countdown, format_duration_label
from .models.timer_state import TimerSnapshot, TimerStatus


class Glyph(str, Enum):
    PLAY = "play"
    PAUSE = "pause"
    CLOCK = "clock"
    CHECK = "check"
    ALERT = "alert"


class Tone(str, Enum):
    NEUTRAL = "neutral"
    CALM = "calm"
    WARNING = "warning"
    URGENT = "urgent"
    PAUSED = "paused"
    DONE = "done"


class ControlAction(str, Enum):
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    RESTART = "restart"


class CompactView(BaseModel):
    glyph: Glyph
    label: str
    tone: Tone
    animated: bool = False
    action: Optional[ControlAction] = None  # clicking the compact view starts the timer


class ControlView(BaseModel):
    action: ControlAction
    enabled: bool


class FullView(BaseModel):
    countdown: str
    progress: float
    badge: Optional[str] = None
    tone: Tone
    primary: ControlView
    restart: ControlView


def progress_tone(progress: float) -> Tone:
    """Green under half way, yellow under 80%, red after that"""
    if progress < 50:
        return Tone.CALM
    if progress < 80:
        return Tone.WARNING
    return Tone.URGENT


def _completed_glyph(snapshot: TimerSnapshot) -> Glyph:
    return Glyph.ALERT if snapshot.is_urgent_after_timer else Glyph.CHECK


def render_compact(snapshot: TimerSnapshot) -> CompactView:
    status = snapshot.status
    if status == TimerStatus.NOT_STARTED:
        return CompactView(
            glyph=Glyph.PLAY,
            label=format_duration_label(snapshot.duration_seconds),
            tone=Tone.NEUTRAL,
            action=ControlAction.START,
        )
    if status == TimerStatus.RUNNING:
        return CompactView(
            glyph=Glyph.CLOCK,
            label=format_countdown(snapshot.remaining_seconds),
            tone=progress_tone(snapshot.progress),
            animated=True,
        )
    if status == TimerStatus.PAUSED:
        return CompactView(
            glyph=Glyph.PAUSE,
            label=format_countdown(snapshot.remaining_seconds),
            tone=Tone.PAUSED,
        )
    return CompactView(
        glyph=_completed_glyph(snapshot),
        label="Done",
        tone=Tone.URGENT if snapshot.is_urgent_after_timer else Tone.DONE,
    )


def render_full(snapshot: TimerSnapshot) -> FullView:
    status = snapshot.status
    busy = snapshot.pending

    if status == TimerStatus.RUNNING:
        primary = ControlView(action=ControlAction.PAUSE, enabled=not busy)
    elif status == TimerStatus.PAUSED:
        primary = ControlView(action=ControlAction.RESUME, enabled=not busy)
    else:
        primary = ControlView(
            action=ControlAction.START,
            enabled=not busy and status == TimerStatus.NOT_STARTED and bool(snapshot.duration_seconds),
        )
    restart = ControlView(
        action=ControlAction.RESTART,
        enabled=not busy and status != TimerStatus.NOT_STARTED,
    )

    if status == TimerStatus.NOT_STARTED:
        countdown, progress, badge, tone = format_countdown(0), 0.0, None, Tone.NEUTRAL
    elif status == TimerStatus.COMPLETED:
        countdown, progress, badge = format_countdown(0), 100.0, "Completed"
        tone = Tone.URGENT if snapshot.is_urgent_after_timer else Tone.DONE
    elif status == TimerStatus.PAUSED:
        countdown, progress, badge, tone = (
            format_countdown(snapshot.remaining_seconds), snapshot.progress, "Paused", Tone.PAUSED
        )
    else:
        countdown, progress, badge = format_countdown(snapshot.remaining_seconds), snapshot.progress, None
        tone = progress_tone(progress)

    return FullView(
        countdown=countdown,
        progress=round(progress, 2),
        badge=badge,
        tone=tone,
        primary=primary,
        restart=restart,
    )
